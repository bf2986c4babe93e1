import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./fieldservice.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Frontend base URL, also the default CORS origin
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:5173").split(",")
    if origin.strip()
]

# Number of upcoming visit dates returned by the schedule preview when the caller
# does not ask for a specific amount
DEFAULT_VISIT_PREVIEW_COUNT = int(os.getenv("DEFAULT_VISIT_PREVIEW_COUNT", "5"))
MAX_VISIT_PREVIEW_COUNT = 50
