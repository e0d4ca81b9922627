"""
WSGI config for the Django application.

The service is served over ASGI (config.asgi) so WebSocket push works. WSGI
remains for admin-only or management deployments where no sockets are needed.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
