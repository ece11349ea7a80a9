import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Create the initial admin account (no-op when it already exists)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--email",
            default=os.environ.get("ADMIN_EMAIL", "admin@hostify.com"),
            help="Admin email (default: $ADMIN_EMAIL or admin@hostify.com)",
        )
        parser.add_argument(
            "--password",
            default=os.environ.get("ADMIN_PASSWORD", "admin123456"),
            help="Admin password (default: $ADMIN_PASSWORD)",
        )
        parser.add_argument("--first-name", default="Admin")
        parser.add_argument("--last-name", default="User")

    def handle(self, *args, **opts):
        User = get_user_model()
        email = opts["email"].lower()

        if User.objects.filter(email=email).exists():
            self.stdout.write(self.style.WARNING(f"Admin user {email} already exists"))
            return

        User.objects.create_admin(
            email=email,
            password=opts["password"],
            first_name=opts["first_name"],
            last_name=opts["last_name"],
        )
        self.stdout.write(self.style.SUCCESS(f"Admin user created: {email}"))
        self.stdout.write(self.style.WARNING("Change the default password after the first login."))
