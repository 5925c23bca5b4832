import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./budgets.db")
DB_ECHO = _as_bool(os.getenv("DB_ECHO"), False)

# JWT
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))

# Budget periods are computed in the user's local timezone
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "America/Chicago")
AUTO_MONTHLY_RESET = _as_bool(os.getenv("AUTO_MONTHLY_RESET"), True)

# LLM gateway used by the advisor endpoint
ADVISOR_GATEWAY_URL = os.getenv("ADVISOR_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions")
ADVISOR_API_KEY = os.getenv("ADVISOR_API_KEY", "")
ADVISOR_MODEL = os.getenv("ADVISOR_MODEL", "google/gemini-2.5-flash")
ADVISOR_TIMEOUT_SECONDS = float(os.getenv("ADVISOR_TIMEOUT_SECONDS", "30"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
