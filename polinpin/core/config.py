import os
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


def _get_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).strip().lower() in ("1", "true", "yes", "on")


def _get_ttl(key: str) -> Optional[float]:
    value = os.getenv(key, "").strip()
    if not value or value.lower() == "none":
        return None
    return float(value)


def _get_list(key: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(key, default).split(",") if item.strip()]


# Server Configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "25727"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "NONE").upper()
CORS_ORIGINS = _get_list("CORS_ORIGINS", "*")

# Session Configuration
SESSION_TTL_SECONDS = _get_ttl("SESSION_TTL_SECONDS")
TOKEN_LENGTH = int(os.getenv("TOKEN_LENGTH", "32"))

# Account Configuration
# "overwrite" silently replaces an existing username, "reject" answers 409
REGISTRATION_POLICY = os.getenv("REGISTRATION_POLICY", "overwrite").strip().lower()
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Study Configuration
REQUIRE_EDITOR_AUTH = _get_bool("REQUIRE_EDITOR_AUTH", "false")
SEED_DEMO = _get_bool("SEED_DEMO", "true")
DEMO_STUDY_ID = os.getenv("DEMO_STUDY_ID", "demo")
