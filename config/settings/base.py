# config/settings/base.py
from pathlib import Path
import os
from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")


def _env_flag(name: str, default: str = "true") -> bool:
    # Only an explicit "false" disables a flag.
    return os.getenv(name, default).strip().lower() != "false"


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "unsafe-dev-key")
DEBUG = os.getenv("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    # Django
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third-party
    "corsheaders",
    "rest_framework",
    "rest_framework_simplejwt",
    "drf_spectacular",
    "django_filters",

    # Domain apps
    "mr_core.common.apps.CommonConfig",
    "mr_core.iam.apps.IamConfig",
    "mr_core.integrations.apps.IntegrationsConfig",
    "mr_core.audit.apps.AuditConfig",
    "mr_core.records.apps.RecordsConfig",
    "mr_core.diseases.apps.DiseasesConfig",
    "mr_core.diagnostics.apps.DiagnosticsConfig",
    "mr_core.documents.apps.DocumentsConfig",
    "mr_core.prescriptions.apps.PrescriptionsConfig",
    "mr_core.orders.apps.OrdersConfig",
    "mr_core.lab.apps.LabConfig",
    "mr_core.search.apps.SearchConfig",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "mr_core.common.middleware.RequestIdMiddleware",
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
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME", "medical_records"),
        "USER": os.getenv("DB_USER", "medcore"),
        "PASSWORD": os.getenv("DB_PASSWORD", "medcore"),
        "HOST": os.getenv("DB_HOST", "127.0.0.1"),
        "PORT": os.getenv("DB_PORT", "5432"),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
]

LANGUAGE_CODE = "es-co"
TIME_ZONE = os.getenv("TIME_ZONE", "America/Bogota")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Uploaded files live under <MEDIA_ROOT>/patients/{diagnostics,documents,prescriptions}
MEDIA_ROOT = Path(os.getenv("UPLOADS_ROOT", BASE_DIR / "uploads"))
MEDIA_URL = "uploads/"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "mr_core.iam.auth.ServiceJWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "DEFAULT_SCHEMA_CLASS": "mr_core.common.openapi.RecordsAutoSchema",
    "EXCEPTION_HANDLER": "mr_core.common.api.exceptions.api_exception_handler",
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
        "rest_framework.filters.OrderingFilter",
    ],
    "DEFAULT_PAGINATION_CLASS": "mr_core.common.api.pagination.DefaultPagination",
    "UNAUTHENTICATED_USER": None,
}

SPECTACULAR_SETTINGS = {
    "TITLE": "MedCore Medical Records API",
    "DESCRIPTION": "Clinical records, diagnostics, prescriptions, documents and medical orders",
    "VERSION": "0.1.0",
    "COMPONENT_SPLIT_REQUEST": True,
    "SORT_OPERATIONS": True,
    "SORT_OPERATION_PARAMETERS": True,
    "SECURITY": [
        {"BearerJWT": []}
    ],
}

# Tokens are issued by the auth service; this service only verifies them.
SIMPLE_JWT = {
    "ALGORITHM": "HS256",
    "SIGNING_KEY": os.getenv("JWT_SECRET", SECRET_KEY),
    "AUTH_HEADER_TYPES": ("Bearer",),
    "USER_ID_CLAIM": os.getenv("JWT_USER_ID_CLAIM", "id"),
    "TOKEN_TYPE_CLAIM": None,
    "JTI_CLAIM": None,
    "TOKEN_USER_CLASS": "mr_core.iam.tokens.ServiceUser",
}

INTEGRATIONS = {
    "USER_SERVICE_URL": os.getenv("USER_SERVICE_URL", ""),
    "AUTH_SERVICE_URL": os.getenv("AUTH_SERVICE_URL", ""),
    "AUDIT_SERVICE_URL": os.getenv("AUDIT_SERVICE_URL", ""),
    "APPOINTMENT_SERVICE_URL": os.getenv("APPOINTMENT_SERVICE_URL", ""),
    "AUTH_USER_PATH": os.getenv("AUTH_USER_PATH", "/api/v1/users/{id}"),
    "AUTH_PATIENT_PATH": os.getenv("AUTH_PATIENT_PATH", "/api/v1/patients/{id}"),
    "APPOINTMENT_BY_ID_PATH": os.getenv("APPOINTMENT_BY_ID_PATH", "/api/v1/appointments/by-id/{id}"),
    "VALIDATE_PATIENT": _env_flag("VALIDATE_PATIENT"),
    "VALIDATE_DOCTOR": _env_flag("VALIDATE_DOCTOR"),
    "TIMEOUT_SECONDS": float(os.getenv("INTEGRATIONS_TIMEOUT_SECONDS", "5")),
}

UPLOADS = {
    "MAX_FILE_SIZE": int(os.getenv("UPLOAD_MAX_FILE_SIZE", str(10 * 1024 * 1024))),
    "MAX_DIAGNOSTIC_FILES": int(os.getenv("UPLOAD_MAX_DIAGNOSTIC_FILES", "5")),
    "ALLOWED_MIME_TYPES": ["application/pdf", "image/jpeg", "image/jpg", "image/png"],
    "ALLOWED_EXTENSIONS": [".pdf", ".jpg", ".jpeg", ".png"],
}

# Let Django hand large files to the upload handler on disk; the size cap is enforced per file.
DATA_UPLOAD_MAX_MEMORY_SIZE = 60 * 1024 * 1024

CORS_ALLOW_ALL_ORIGINS = True
CORS_ALLOW_CREDENTIALS = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "httpx": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        "mr_core": {"level": LOG_LEVEL},
    },
}
