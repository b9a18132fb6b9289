"""
Base Django settings for the session scheduler.

Shared configuration for all environments.
"""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Environment-based configuration using pydantic-settings."""

    SECRET_KEY: str = "django-insecure-change-me-in-production"
    DEBUG: bool = False
    ALLOWED_HOSTS: str = "localhost,127.0.0.1"

    # Database
    DB_NAME: str = "scheduler"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: str = "5432"

    # Logging
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"

    # AWS
    AWS_REGION: str = "ap-south-1"
    AWS_ENDPOINT_URL: str = ""  # LocalStack, e.g. http://localhost:4566

    # Queues
    SQS_SESSION_SCHEDULING_QUEUE_URL: str = ""
    SQS_SESSION_SCHEDULING_QUEUE_ARN: str = ""
    SQS_SESSION_REMINDERS_QUEUE_URL: str = ""
    SQS_SESSION_REMINDERS_QUEUE_ARN: str = ""
    SQS_TRENDING_JOB_QUEUE_URL: str = ""
    SQS_WAIT_TIME_SECONDS: int = 20
    SQS_MAX_MESSAGES: int = 10
    RECEIVE_ERROR_BACKOFF_SECONDS: float = 5.0

    # EventBridge Scheduler
    SCHEDULER_ROLE_ARN: str = ""
    SCHEDULER_GROUP_NAME: str = "default"

    # Downstream services
    EVENT_SERVICE_URL: str = "http://localhost:8081/api/event-seating"
    EVENT_QUERY_SERVICE_URL: str = "http://localhost:8082/api/event-query"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Keycloak
    KEYCLOAK_URL: str = "http://auth.ticketly.com:8080"
    KEYCLOAK_REALM: str = "event-ticketing"
    KEYCLOAK_CLIENT_ID: str = "scheduler-service-client"
    KEYCLOAK_CLIENT_SECRET: str = ""

    # Internal API
    INTERNAL_API_KEY: str = ""

    # Email
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    FROM_EMAIL: str = "noreply@ticketly.com"
    FROM_NAME: str = "Ticketly"
    FRONTEND_URL: str = "http://localhost:3000"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = settings.SECRET_KEY

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = settings.DEBUG

ALLOWED_HOSTS = [h.strip() for h in settings.ALLOWED_HOSTS.split(",") if h.strip()]

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Local apps
    "apps.core",
    "apps.identity",
    "apps.scheduling",
    "apps.queues",
    "apps.sessions",
    "apps.reminders",
    "apps.subscriptions",
    "apps.trending",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": settings.DB_NAME,
        "USER": settings.DB_USER,
        "PASSWORD": settings.DB_PASSWORD,
        "HOST": settings.DB_HOST,
        "PORT": settings.DB_PORT,
    }
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Email (SMTP)
EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"
EMAIL_HOST = settings.SMTP_HOST
EMAIL_PORT = settings.SMTP_PORT
EMAIL_HOST_USER = settings.SMTP_USERNAME
EMAIL_HOST_PASSWORD = settings.SMTP_PASSWORD
EMAIL_USE_TLS = settings.SMTP_USE_TLS
DEFAULT_FROM_EMAIL = f"{settings.FROM_NAME} <{settings.FROM_EMAIL}>"
EMAIL_BRAND_NAME = settings.FROM_NAME
FRONTEND_URL = settings.FRONTEND_URL

# AWS
AWS_REGION = settings.AWS_REGION
AWS_ENDPOINT_URL = settings.AWS_ENDPOINT_URL or None

# Queues (name -> url), consumed by run_consumers / consume_queue
QUEUE_URLS = {
    "session-scheduling": settings.SQS_SESSION_SCHEDULING_QUEUE_URL,
    "session-reminders": settings.SQS_SESSION_REMINDERS_QUEUE_URL,
    "trending-job": settings.SQS_TRENDING_JOB_QUEUE_URL,
}
SQS_WAIT_TIME_SECONDS = settings.SQS_WAIT_TIME_SECONDS
SQS_MAX_MESSAGES = settings.SQS_MAX_MESSAGES
RECEIVE_ERROR_BACKOFF_SECONDS = settings.RECEIVE_ERROR_BACKOFF_SECONDS

# EventBridge Scheduler targets
SCHEDULER_ROLE_ARN = settings.SCHEDULER_ROLE_ARN
SCHEDULER_GROUP_NAME = settings.SCHEDULER_GROUP_NAME
SESSION_SCHEDULING_QUEUE_ARN = settings.SQS_SESSION_SCHEDULING_QUEUE_ARN
SESSION_REMINDERS_QUEUE_ARN = settings.SQS_SESSION_REMINDERS_QUEUE_ARN

# Downstream services
EVENT_SERVICE_URL = settings.EVENT_SERVICE_URL.rstrip("/")
EVENT_QUERY_SERVICE_URL = settings.EVENT_QUERY_SERVICE_URL.rstrip("/")
HTTP_TIMEOUT_SECONDS = settings.HTTP_TIMEOUT_SECONDS

# Keycloak (client-credentials)
KEYCLOAK_URL = settings.KEYCLOAK_URL.rstrip("/")
KEYCLOAK_REALM = settings.KEYCLOAK_REALM
KEYCLOAK_CLIENT_ID = settings.KEYCLOAK_CLIENT_ID
KEYCLOAK_CLIENT_SECRET = settings.KEYCLOAK_CLIENT_SECRET

INTERNAL_API_KEY = settings.INTERNAL_API_KEY

# Logging is handed to structlog (see apps.core.apps.CoreConfig.ready)
LOGGING_CONFIG = None
LOG_JSON = settings.LOG_JSON
LOG_LEVEL = settings.LOG_LEVEL
