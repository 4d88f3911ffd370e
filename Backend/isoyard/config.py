import os
import urllib.parse
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Database configuration (env defaults)
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_USER = os.getenv("DB_USER", "root")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "iso_yard")
DB_PORT = int(os.getenv("DB_PORT", 3306))

password_enc = urllib.parse.quote_plus(DB_PASSWORD)
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+pymysql://{DB_USER}:{password_enc}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# Load JWT secret and settings from env
JWT_SECRET = os.getenv("JWT_SECRET", "change_this_in_production")
JWT_ALGORITHM = "HS256"
JWT_EXP_HOURS = int(os.getenv("JWT_EXP_HOURS", "12"))

# Log the user out after this many minutes without a request
IDLE_TIMEOUT_MINUTES = int(os.getenv("IDLE_TIMEOUT_MINUTES", "10"))

# Yard rules
ENFORCE_ZONE_CAPACITY = _env_bool("ENFORCE_ZONE_CAPACITY", False)
DEFAULT_ZONE_CAPACITY = int(os.getenv("DEFAULT_ZONE_CAPACITY", "35"))

# Seeded when the users table is empty
DEFAULT_ADMIN_ID = os.getenv("DEFAULT_ADMIN_ID", "admin")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin")
