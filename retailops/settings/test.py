import tempfile

from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'
JWT_SECRET = 'test-jwt-secret'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

ALLOWED_HOSTS = ['testserver']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

MEDIA_ROOT = tempfile.mkdtemp(prefix='retailops-media-')

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
