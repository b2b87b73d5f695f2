from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from health.models import User


class Command(BaseCommand):
    help = "Create or reset the default administrator account (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--username', default=settings.SEED_ADMIN_USERNAME)
        parser.add_argument('--email', default=settings.SEED_ADMIN_EMAIL)
        parser.add_argument('--password', default=settings.SEED_ADMIN_PASSWORD)

    def handle(self, *args, **opts):
        if not opts['password']:
            raise CommandError("No password given; set SEED_ADMIN_PASSWORD or pass --password.")

        user, created = User.objects.update_or_create(
            username=opts['username'],
            defaults={
                'email': opts['email'],
                'role': 'admin',
                'is_staff': True,
                'is_superuser': True,
                'is_active': True,
            },
        )
        user.set_password(opts['password'])
        user.save(update_fields=['password'])
        verb = "created" if created else "updated"
        self.stdout.write(self.style.SUCCESS(f"ok: {user.username} {verb} (admin)"))
