"""
Access control for clinic logs.

Uses DRF's APITestCase: the setUp creates the users, one stocked
medicine and a log written by the first nurse.
"""
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from clinic.models import InventoryItem, User


def log_payload(**overrides):
    data = {
        "date": timezone.localdate().isoformat(),
        "lastName": "Dela Cruz",
        "firstName": "Juan",
        "sex": "Male",
        "employeeNumber": "EMP-001",
        "client": "Acme BPO",
        "chiefComplaint": "Headache",
        "medicines": [{"name": "Paracetamol", "quantity": 2}],
        "issuedBy": "Maria Santos",
    }
    data.update(overrides)
    return data


class ClinicLogAccessTests(APITestCase):
    def setUp(self) -> None:
        """Two nurses, an administrator, a staff member and one stocked medicine."""
        self.nurse = User.objects.create_user(
            username="nurse1", password="nursepass", role="nurse", first_name="Maria", last_name="Santos",
        )
        self.other_nurse = User.objects.create_user(
            username="nurse2", password="nursepass", role="nurse", first_name="Liza", last_name="Cruz",
        )
        self.admin_user = User.objects.create_user(username="admin1", password="adminpass", role="admin")
        self.staff_user = User.objects.create_user(username="staff1", password="staffpass", role="staff")
        self.item = InventoryItem.objects.create(
            item_type=InventoryItem.TYPE_MEDICINE, name="Paracetamol", stock=20, reorder_level=5,
        )
        r = self.authenticate(self.nurse).post(reverse("clinic_logs"), log_payload(), format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.url = reverse("clinic_log_detail", args=[r.data["data"]["id"]])

    def authenticate(self, user: User) -> APIClient:
        """Return an authenticated APIClient for the given user."""
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def test_other_nurse_can_read_but_not_change(self) -> None:
        client = self.authenticate(self.other_nurse)
        self.assertEqual(client.get(self.url).status_code, status.HTTP_200_OK)
        self.assertEqual(client.delete(self.url).status_code, status.HTTP_403_FORBIDDEN)
        r = client.put(self.url, log_payload(client="Globex"), format="json")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.item.refresh_from_db()
        self.assertEqual(self.item.stock, 18)

    def test_admin_can_change_any_log(self) -> None:
        r = self.authenticate(self.admin_user).put(self.url, log_payload(client="Globex"), format="json")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["data"]["client"], "Globex")
        # the nurse who wrote the log stays its owner
        self.assertEqual(r.data["data"]["nurseId"], self.nurse.id)

    def test_staff_cannot_see_clinic_logs(self) -> None:
        client = self.authenticate(self.staff_user)
        self.assertEqual(client.get(reverse("clinic_logs")).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)
