"""Development settings.

Debug on, every host allowed and uploads served by Django itself. Do not
use these settings in production!
"""

from .base import *  # noqa: F401,F403

DEBUG = True

ALLOWED_HOSTS = ['*']

LOGGING['loggers']['Spaces']['level'] = 'DEBUG'  # noqa: F405
