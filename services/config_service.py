"""
Configuration service for runtime system settings.
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_INVOICE_FY_SUFFIX: Optional[str] = None
_DEFAULT_INVOICE_FY_SUFFIX = "25-26"


def _env_int(name: str, fallback: int) -> int:
    env_value = os.getenv(name)
    if not env_value:
        return fallback
    try:
        return int(env_value)
    except ValueError:
        return fallback


def _env_float(name: str, fallback: float) -> float:
    env_value = os.getenv(name)
    if not env_value:
        return fallback
    try:
        return float(env_value)
    except ValueError:
        return fallback


def get_secret_key() -> str:
    return os.getenv("SECRET_KEY", "DMS_BOOKING_DESK_DEV_KEY")


def get_access_token_expire_minutes() -> int:
    return _env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 480)


def get_default_admin_credentials() -> tuple[str, str]:
    username = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
    password = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")
    return username, password


def get_smtp_settings() -> dict:
    """Return the outbound mail account used by the email relay."""
    user = os.getenv("SMTP_USER", "")
    return {
        "host": os.getenv("SMTP_HOST", "smtp.gmail.com"),
        "port": _env_int("SMTP_PORT", 465),
        "user": user,
        "password": os.getenv("SMTP_PASSWORD", ""),
        "sender": os.getenv("MAIL_FROM", user),
        "timeout": _env_float("EMAIL_TIMEOUT_SECONDS", 20.0),
    }


def get_sob_notification_url() -> Optional[str]:
    return os.getenv("SOB_NOTIFICATION_URL") or None


def get_sob_notification_timeout() -> float:
    return _env_float("SOB_NOTIFICATION_TIMEOUT_SECONDS", 15.0)


def get_invoice_fy_suffix() -> str:
    """Return the financial-year suffix used in completed-file invoice numbers."""
    if _INVOICE_FY_SUFFIX is not None:
        return _INVOICE_FY_SUFFIX
    return os.getenv("INVOICE_FY_SUFFIX", _DEFAULT_INVOICE_FY_SUFFIX)


def set_invoice_fy_suffix(suffix: str) -> None:
    """Override the invoice financial-year suffix in memory."""
    global _INVOICE_FY_SUFFIX
    _INVOICE_FY_SUFFIX = str(suffix).strip()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").strip().upper()
