"""
Base Django settings shared by every environment.
"""
import os
from decimal import Decimal
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-change-me')
DEBUG = os.environ.get('DJANGO_DEBUG', 'False') == 'True'
ALLOWED_HOSTS = [h for h in os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',') if h]

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'apps.carts',
]

DATABASES = {
    'default': {
        'ENGINE': os.environ.get('DB_ENGINE', 'django.db.backends.postgresql'),
        'NAME': os.environ.get('DB_NAME', 'carts'),
        'USER': os.environ.get('DB_USER', 'postgres'),
        'PASSWORD': os.environ.get('DB_PASSWORD', ''),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
USE_TZ = True
TIME_ZONE = 'UTC'

REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')

CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': REDIS_URL,
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
        },
    }
}

REST_FRAMEWORK = {
    'EXCEPTION_HANDLER': 'shared.interfaces.custom_exception_handler',
}

# S3
AWS_ACCESS_KEY_ID = os.environ.get('AWS_ACCESS_KEY_ID')
AWS_SECRET_ACCESS_KEY = os.environ.get('AWS_SECRET_ACCESS_KEY')
AWS_STORAGE_BUCKET_NAME = os.environ.get('AWS_STORAGE_BUCKET_NAME', 'cart-previews')
AWS_S3_REGION_NAME = os.environ.get('AWS_S3_REGION_NAME', 'ap-northeast-2')
AWS_S3_ENDPOINT_URL = os.environ.get('AWS_S3_ENDPOINT_URL')

# Cart pricing
CART_TAX_RATE_PERCENT = Decimal(os.environ.get('CART_TAX_RATE_PERCENT', '18'))
CART_SHIPPING_COST = Decimal(os.environ.get('CART_SHIPPING_COST', '100.00'))
CART_SHIPPING_THRESHOLD = Decimal(os.environ.get('CART_SHIPPING_THRESHOLD', '1000.00'))
CART_CUSTOMIZATION_SURCHARGE = Decimal(os.environ.get('CART_CUSTOMIZATION_SURCHARGE', '10.00'))

# Cart locking and lifecycle
CART_LOCK_TIMEOUT_SECONDS = float(os.environ.get('CART_LOCK_TIMEOUT_SECONDS', '10'))
CART_LOCK_WAIT_SECONDS = float(os.environ.get('CART_LOCK_WAIT_SECONDS', '5'))
CART_LOCK_RETRY_INTERVAL_SECONDS = float(os.environ.get('CART_LOCK_RETRY_INTERVAL_SECONDS', '0.1'))
CART_EXPIRY_DAYS = int(os.environ.get('CART_EXPIRY_DAYS', '30'))
CART_MAX_QUANTITY_PER_REQUEST = int(os.environ.get('CART_MAX_QUANTITY_PER_REQUEST', '100'))

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': os.environ.get('APP_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        'shared': {
            'handlers': ['console'],
            'level': os.environ.get('APP_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
