import os
from datetime import timedelta


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key")

    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///outtie.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    AUTO_CREATE_TABLES = _flag("AUTO_CREATE_TABLES", "1")

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-super-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv("JWT_EXPIRES_DAYS", "7")))
    JWT_TOKEN_LOCATION = ["headers"]

    # Only addresses under this domain may register
    INSTITUTION_EMAIL_DOMAIN = os.getenv("INSTITUTION_EMAIL_DOMAIN", "columbia.edu")

    FEED_DEFAULT_LIMIT = 20
    FEED_MAX_LIMIT = int(os.getenv("FEED_MAX_LIMIT", "100"))

    EMAIL_TOKEN_TTL_MINUTES = int(os.getenv("EMAIL_TOKEN_TTL_MINUTES", "30"))

    SCHEDULER_ENABLED = _flag("SCHEDULER_ENABLED", "1")
    TOKEN_CLEANUP_INTERVAL_MINUTES = int(os.getenv("TOKEN_CLEANUP_INTERVAL_MINUTES", "60"))

    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USE_TLS = True
    MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "noreply@outtie.local")
