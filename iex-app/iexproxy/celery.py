"""
Celery application configuration for the iexproxy project.

Background jobs (currently the historical price cache warm-up) run on this
instance. Configuration comes from the Django settings and task modules are
discovered in every installed app.
"""

import os
from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'iexproxy.settings')

app = Celery('iexproxy')

# All Celery settings in settings.py are prefixed with 'CELERY_'.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Picks up market_data/tasks.py.
app.autodiscover_tasks()
