"""
Management command to create the initial administrator account
Usage: python manage.py seed_admin [--email admin@example.com] [--password admin123]
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

User = get_user_model()


class Command(BaseCommand):
    help = 'Create the initial PrimeGestor administrator'

    def add_arguments(self, parser):
        parser.add_argument('--email', default='admin@example.com', help='Administrator e-mail')
        parser.add_argument('--password', default='admin123', help='Administrator password')
        parser.add_argument('--full-name', default='Admin User', help='Administrator full name')

    def handle(self, *args, **options):
        email = options['email']
        if User.objects.filter(email__iexact=email).exists():
            self.stdout.write(self.style.WARNING(f'User {email} already exists, nothing to do.'))
            return

        user = User.objects.create_user(
            username=email,
            email=email,
            password=options['password'],
            full_name=options['full_name'],
            role=User.ROLE_ADMIN,
        )
        self.stdout.write(self.style.SUCCESS(f'Administrator {user.email} created.'))
