# barberqueue/config.py

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# SQLite database (file-based) unless overridden
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barber.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"
# Seconds a SQLite writer waits for the lock held by a concurrent admission
DB_TIMEOUT = float(os.getenv("DB_TIMEOUT", "30"))

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-later")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Reject new appointments outside a shop's opening hours
ENFORCE_SHOP_HOURS = os.getenv("ENFORCE_SHOP_HOURS", "false").lower() == "true"
