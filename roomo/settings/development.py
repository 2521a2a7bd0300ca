from .base import *

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# CORS settings for development
CORS_ALLOW_ALL_ORIGINS = True

# Verbose matching logs while developing
LOGGING['loggers']['roommate_matching']['level'] = 'DEBUG'

SECURE_SSL_REDIRECT = False
