import os
from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "development")
IS_DEVELOPMENT = APP_ENV != "production"

# memory | database
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory" if IS_DEVELOPMENT else "database")

# Downstream services (each runs on its own port unless mounted by main.py)
INVOICES_SERVICE_URL = os.getenv("INVOICES_SERVICE_URL", "http://localhost:8002")
NOTIFICATIONS_SERVICE_URL = os.getenv("NOTIFICATIONS_SERVICE_URL", "http://localhost:8003")
DOWNSTREAM_TIMEOUT_SECONDS = float(os.getenv("DOWNSTREAM_TIMEOUT_SECONDS", "5"))

# console | smtp
MAIL_BACKEND = os.getenv("MAIL_BACKEND", "console" if IS_DEVELOPMENT else "smtp")
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@logistics.local")
# Sandboxed providers only deliver to verified addresses
MAIL_SANDBOX_RECIPIENT = os.getenv("MAIL_SANDBOX_RECIPIENT", "")
SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"

# local | object
ARTIFACT_BACKEND = os.getenv("ARTIFACT_BACKEND", "local" if IS_DEVELOPMENT else "object")
EXPORTS_DIR = os.getenv("EXPORTS_DIR", "exports")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", INVOICES_SERVICE_URL)
OBJECT_STORE_URL = os.getenv("OBJECT_STORE_URL", "")

UPLOADS_DIR = os.getenv("UPLOADS_DIR", "uploads")
