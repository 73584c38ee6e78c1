"""
5dpapa Backend - Centralized Configuration
===========================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
import sys
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


# ==========================================
# 🔧 App
# ==========================================
APP_NAME = os.getenv("APP_NAME", "5dpapa-backend")
APP_VERSION = "1.0.0"
APP_PROFILE = os.getenv("APP_PROFILE", "dev").strip().lower()
DEBUG = APP_PROFILE == "dev" or _env_bool("DEBUG", "false")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# ==========================================
# 🗄️ Database
# ==========================================
DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    if APP_PROFILE == "dev":
        DATABASE_URL = "sqlite:///./fivepapa.db"
    else:
        print("[ERROR] Critical: DATABASE_URL missing in .env")
        sys.exit(1)


# ==========================================
# 🔐 Security
# ==========================================
JWT_SECRET = os.getenv("JWT_SECRET")

if not JWT_SECRET:
    print("[ERROR] Critical: JWT_SECRET missing in .env")
    sys.exit(1)

JWT_ALGORITHM = "HS512"
JWT_MIN_SECRET_BYTES = 64
JWT_EXPIRATION_MS = int(os.getenv("JWT_EXPIRATION_MS", "3600000"))                  # 1 hour
JWT_REFRESH_EXPIRATION_MS = int(os.getenv("JWT_REFRESH_EXPIRATION_MS", "604800000"))  # 7 days

REFRESH_TOKEN_COOKIE = "refreshToken"
REFRESH_TOKEN_EXPIRATION_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRATION_DAYS", "7"))
COOKIE_SECURE = _env_bool("COOKIE_SECURE", "true")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))
PASSWORD_MIN_LENGTH = 8

# Double-submit CSRF
CSRF_COOKIE = "XSRF-TOKEN"
CSRF_HEADER = "X-XSRF-TOKEN"
CSRF_PARAMETER = "_csrf"


# ==========================================
# 🌐 CORS
# ==========================================
_DEFAULT_ORIGINS = "https://elvis1056.github.io,http://localhost:*,http://127.0.0.1:*"
CORS_ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOWED_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()
]
CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Authorization", "Content-Type", CSRF_HEADER, "X-Requested-With"]
CORS_EXPOSED_HEADERS = [CSRF_HEADER]


# ==========================================
# ⚠️ Problem documents (RFC 7807)
# ==========================================
PROBLEM_TYPE_BASE = "https://api.5dpapa.com/errors"
