# config variables
import os

APP_NAME = "AI Interview Coach Backend API"
APP_VERSION = os.environ.get("APP_VERSION", "1.0.0")
ENVIRONMENT = os.environ.get("ENVIRONMENT", "production")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# CORS / request limits
ALLOWED_ORIGINS = [
    o.strip()
    for o in os.environ.get(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:8080,http://127.0.0.1:8080,"
        "http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if o.strip()
]
MAX_BODY_BYTES = int(os.environ.get("MAX_BODY_BYTES", str(10 * 1024 * 1024)))  # 10 MB

# --- OpenRouter / LLM config ---
OPENROUTER_API_KEY = os.environ.get("OPENROUTER_API_KEY")
OPENROUTER_URL = os.environ.get("OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions")
OPENROUTER_MODEL = os.environ.get("OPENROUTER_MODEL", os.environ.get("LLM_MODEL", "meta-llama/llama-3.3-70b-instruct"))
LLM_TIMEOUT = int(os.environ.get("LLM_TIMEOUT", "30"))  # seconds
LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.environ.get("LLM_MAX_TOKENS", "800"))

# Firebase ID token verification
FIREBASE_PROJECT_ID = os.environ.get("FIREBASE_PROJECT_ID")
FIREBASE_JWKS_URL = os.environ.get(
    "FIREBASE_JWKS_URL",
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com",
)
FIREBASE_KEYS_TIMEOUT = int(os.environ.get("FIREBASE_KEYS_TIMEOUT", "10"))

# session store; empty string disables persistence
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./interview_coach.db")

HISTORY_DEFAULT_LIMIT = int(os.environ.get("HISTORY_DEFAULT_LIMIT", "20"))
HISTORY_MAX_LIMIT = int(os.environ.get("HISTORY_MAX_LIMIT", "100"))


def is_development() -> bool:
    return ENVIRONMENT.lower() == "development"
