"""
WSGI config for the feedback portal.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import logging
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'backend.settings')

logger = logging.getLogger('backend')

# Set AUTO_MIGRATE=true on the host to apply migrations before serving.
# A failed migration is logged; the process still comes up.
if os.environ.get('AUTO_MIGRATE', '').lower() in ('1', 'true', 'yes'):
	try:
		import django
		from django.core.management import call_command

		django.setup()
		call_command('migrate', '--noinput')
	except Exception:
		logger.exception("AUTO_MIGRATE failed")

application = get_wsgi_application()
