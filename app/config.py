import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Local development falls back to a SQLite file; production points at the case-management database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./homevisits.db")

# CORS origins for the case-management front end
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")

# On-call coverage window used when the caller does not supply one
COVERAGE_WINDOW_DAYS = int(os.getenv("COVERAGE_WINDOW_DAYS", "30"))

# Defaults for bulk recurring appointments
DEFAULT_APPOINTMENT_TIME = os.getenv("DEFAULT_APPOINTMENT_TIME", "09:00")
DEFAULT_APPOINTMENT_DURATION_MINUTES = int(os.getenv("DEFAULT_APPOINTMENT_DURATION_MINUTES", "60"))
