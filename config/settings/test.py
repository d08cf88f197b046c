"""
Test settings.
"""
from .base import *  # noqa: F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

AWS_STORAGE_BUCKET_NAME = 'test-previews'
AWS_S3_REGION_NAME = 'us-east-1'
AWS_S3_ENDPOINT_URL = None

CART_LOCK_WAIT_SECONDS = 1
CART_LOCK_RETRY_INTERVAL_SECONDS = 0.01
