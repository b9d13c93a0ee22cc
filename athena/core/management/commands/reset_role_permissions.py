from django.core.management.base import BaseCommand, CommandError

from athena.core.models import User
from athena.core.permissions import ROLE_PERMISSIONS


class Command(BaseCommand):
    help = 'Reset stored permission maps to the defaults of each user\'s role'

    def add_arguments(self, parser):
        parser.add_argument(
            '--role',
            type=str,
            choices=list(ROLE_PERMISSIONS),
            help='Only reset users with this role',
        )
        parser.add_argument(
            '--username',
            type=str,
            help='Only reset this user',
        )

    def handle(self, *args, **options):
        users = User.objects.all()
        if options['role']:
            users = users.filter(role=options['role'])
        if options['username']:
            users = users.filter(username=options['username'])
            if not users.exists():
                raise CommandError(f"User not found: {options['username']}")

        updated = 0
        for user in users:
            user.reset_permissions()
            user.save(update_fields=['permissions', 'updated_at'])
            updated += 1
            self.stdout.write(f"  ✓ {user.username} ({user.role})")

        self.stdout.write(self.style.SUCCESS(f"Reset permissions for {updated} user(s)."))
