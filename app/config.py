# app/config.py
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

MONGODB_URL = os.getenv("MONGODB_URL")
MONGODB_DB = os.getenv("MONGODB_DB", "harekrishna")
MONGODB_TIMEOUT_MS = int(os.getenv("MONGODB_TIMEOUT_MS", "5000"))

# "mongo" for MongoDB Atlas, "memory" for a throwaway in-process store
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mongo").lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]

# --- Account / email verification ---
APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:5000")
EMAIL_TOKEN_TTL_HOURS = int(os.getenv("EMAIL_TOKEN_TTL_HOURS", "24"))
EMAIL_FROM = os.getenv("EMAIL_FROM", "noreply@harekrishna.game")
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")

# --- Game constants ---
PAIRS_PER_MALA = 108
UNKNOWN_COUNTRY = "XX"
GLOBAL_LEADERBOARD_LIMIT = 100
COUNTRY_LEADERBOARD_LIMIT = 50
