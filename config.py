import logging
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env", override=False)


def _flag(name, default):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ---------------------------------------------------
# BRANDING INFO (override through the environment / .env)
# ---------------------------------------------------
COMPANY_INFO = {
    "name": os.getenv("COMPANY_NAME", "Friends Group Company Pvt. Ltd."),
    "gstin": os.getenv("COMPANY_GSTIN", "27ABCDE1234F1Z5"),
    "address": os.getenv("COMPANY_ADDRESS", "Wiman Nagar, Pune, Maharashtra"),
    "contact": os.getenv("COMPANY_CONTACT", "+8207050123"),
    "email": os.getenv("COMPANY_EMAIL", "info@mycompany.com"),
    "logo_path": os.getenv("COMPANY_LOGO_PATH", str(BASE_DIR / "data" / "logo.png")),
}

DEFAULT_SELLER_STATE = os.getenv("DEFAULT_SELLER_STATE", "27")
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "INR")
DEFAULT_ROUND_OFF = _flag("DEFAULT_ROUND_OFF", "true")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(level=None):
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
