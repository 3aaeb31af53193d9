import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from clinic.models import Category, InventoryItem, Supplier, User


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttling and dashboard stats live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clinic_admin(db):
    return User.objects.create_user(
        username='admin@clinic.local', email='admin@clinic.local', password='P@ssw0rd1',
        role='admin', first_name='Clinic', last_name='Admin',
    )


@pytest.fixture
def nurse(db):
    return User.objects.create_user(
        username='nurse@clinic.local', email='nurse@clinic.local', password='P@ssw0rd1',
        role='nurse', first_name='Maria', last_name='Santos', nurse_id='RN-001',
    )


@pytest.fixture
def other_nurse(db):
    return User.objects.create_user(
        username='nurse2@clinic.local', email='nurse2@clinic.local', password='P@ssw0rd1',
        role='nurse', first_name='Liza', last_name='Cruz', nurse_id='RN-002',
    )


@pytest.fixture
def staff(db):
    return User.objects.create_user(
        username='staff@clinic.local', email='staff@clinic.local', password='P@ssw0rd1',
        role='staff', first_name='John', last_name='Reyes',
    )


@pytest.fixture
def client_for():
    def make(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return make


@pytest.fixture
def analgesic(db):
    return Category.objects.create(item_type=Category.TYPE_MEDICINE, name='Analgesic')


@pytest.fixture
def supplier(db):
    return Supplier.objects.create(name='MedSource Trading')


@pytest.fixture
def paracetamol(analgesic, supplier):
    return InventoryItem.objects.create(
        item_type=InventoryItem.TYPE_MEDICINE, name='Paracetamol', category=analgesic,
        supplier=supplier, stock=20, reorder_level=5, unit='tablet',
    )


@pytest.fixture
def gauze(db):
    return InventoryItem.objects.create(
        item_type=InventoryItem.TYPE_SUPPLY, name='Gauze Pad', stock=10, reorder_level=2, unit='piece',
    )
