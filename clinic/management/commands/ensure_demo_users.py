from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from clinic.models import User

DEMO_SET = [
    ("admin@clinic.local", "admin", "Clinic", "Administrator", ""),
    ("nurse@clinic.local", "nurse", "Maria", "Santos", "RN-001"),
    ("staff@clinic.local", "staff", "John", "Reyes", ""),
]


class Command(BaseCommand):
    help = "Ensure demo users exist with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="clinic123")

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for email, role, first, last, nurse_id in DEMO_SET:
            u, created = User.objects.get_or_create(
                username=email,
                defaults={
                    "email": email, "role": role, "first_name": first, "last_name": last,
                    "nurse_id": nurse_id, "password": password, "is_active": True,
                },
            )
            if not created:
                # reset password, role and active flag
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
