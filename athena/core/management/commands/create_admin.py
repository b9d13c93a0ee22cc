from django.core.management.base import BaseCommand, CommandError

from athena.core.models import User
from athena.core.permissions import ROLE_ADMIN, default_permissions
from athena.core.serializers import username_from_email


class Command(BaseCommand):
    help = 'Create (or promote) an Admin account with every permission flag'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True, help='Login e-mail of the admin')
        parser.add_argument('--password', required=True, help='Password (at least 6 characters)')
        parser.add_argument('--nik', default='', help='Employee number')
        parser.add_argument('--name', default='', help='Display name')

    def handle(self, *args, **options):
        email = options['email'].strip()
        password = options['password']
        if '@' not in email:
            raise CommandError("A valid e-mail address is required.")
        if len(password) < 6:
            raise CommandError("Password must be at least 6 characters.")

        user = User.objects.filter(email__iexact=email).first()
        created = user is None
        if created:
            user = User(email=email, username=username_from_email(email))

        user.role = ROLE_ADMIN
        user.permissions = default_permissions(ROLE_ADMIN)
        user.is_staff = True
        user.is_active = True
        if options['nik']:
            user.nik = options['nik']
        if options['name']:
            user.nama_teknisi = options['name']
        user.set_password(password)
        user.save()

        verb = 'Created' if created else 'Updated'
        self.stdout.write(self.style.SUCCESS(f"{verb} admin {user.username} <{user.email}>"))
