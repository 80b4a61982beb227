"""
Development server that listens on the configured PORT by default.

Usage:
    python manage.py runserver            # 127.0.0.1:$PORT
    python manage.py runserver 0.0.0.0:9000
"""
from django.conf import settings
from django.core.management.commands.runserver import Command as RunserverCommand


class Command(RunserverCommand):
    help = 'Starts a lightweight web server on the configured PORT.'

    def handle(self, *args, **options):
        self.default_port = str(settings.PORT)
        super().handle(*args, **options)
