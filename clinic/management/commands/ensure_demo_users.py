from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password

from clinic.models import User

DEMO_SET = [
    ("admin1", User.ROLE_ADMIN),
    ("doctor1", User.ROLE_DOCTOR),
    ("nurse1", User.ROLE_NURSE),
    ("staff1", User.ROLE_STAFF),
]


class Command(BaseCommand):
    help = "Ensure one demo account per role exists with a known password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="demo123", help="password set on every demo account")

    def handle(self, *args, **opts):
        password = opts["password"]
        for username, role in DEMO_SET:
            email = f"{username}@example.com"
            u, created = User.objects.get_or_create(
                username=username,
                defaults={
                    "email": email,
                    "role": role,
                    "first_name": username.rstrip("1").capitalize(),
                    "last_name": "Demo",
                    "password": make_password(password),
                    "is_active": True,
                },
            )
            if not created:
                # reset password, role and activation on existing rows
                u.password = make_password(password)
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
