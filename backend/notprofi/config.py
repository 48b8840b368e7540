import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def normalize_db_url(url: str | None) -> str:
    if not url:
        return "sqlite:///notprofi.db"
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class Config:
    APP_ENV = os.getenv("APP_ENV", "development")
    SQLALCHEMY_DATABASE_URI = normalize_db_url(os.getenv("DATABASE_URL"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SESSION_SECRET", "dev-secret-change-me")

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = APP_ENV == "production"
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)

    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    JOB_NUMBER_PREFIX = os.getenv("JOB_NUMBER_PREFIX", "NP24")
    INVOICE_NUMBER_PREFIX = os.getenv("INVOICE_NUMBER_PREFIX", "RE")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SECRET_KEY = "test-secret"
    SESSION_COOKIE_SECURE = False
    ADMIN_EMAIL = "admin@notprofi24.at"
    ADMIN_PASSWORD = "s3cret"
