import os
from pathlib import Path

from dotenv import load_dotenv

# .env next to this file (backend/.env) or higher up
env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=env_path)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
ACCESS_TOKEN_MINUTES = _env_int("ACCESS_TOKEN_MINUTES", 60 * 24)
COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)

CLOUDINARY_CLOUD_NAME = (os.getenv("CLOUDINARY_CLOUD_NAME") or "").strip()
CLOUDINARY_API_KEY = (os.getenv("CLOUDINARY_API_KEY") or "").strip()
CLOUDINARY_API_SECRET = (os.getenv("CLOUDINARY_API_SECRET") or "").strip()
CLOUDINARY_FOLDER = (os.getenv("CLOUDINARY_FOLDER") or "products").strip("/ ")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]

SITE_URL = os.getenv("SITE_URL", "http://localhost:3000").rstrip("/")

CONTACT_EMAIL = os.getenv("CONTACT_EMAIL", "contact@example.com")
CONTACT_PHONE = os.getenv("CONTACT_PHONE", "+1234567890")
CONTACT_ADDRESS = os.getenv("CONTACT_ADDRESS", "123 Main Street, City, Country")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# page sizes for GET /products
PUBLIC_DEFAULT_LIMIT = 10
PUBLIC_MAX_LIMIT = 50
ADMIN_DEFAULT_LIMIT = 20
ADMIN_MAX_LIMIT = 100
LATEST_DEFAULT_LIMIT = 8

WHATSAPP_SETTING_KEY = "whatsapp_number"
