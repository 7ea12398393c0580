# maintenance_app/config.py
import os

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

DATABASE_PATH = os.getenv("DATABASE_PATH", "maintenance.db")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

REPORT_COMPANY_NAME = os.getenv("REPORT_COMPANY_NAME", "MechCorp Manufacturing")
MAX_CONCURRENT_RENDERS = int(os.getenv("MAX_CONCURRENT_RENDERS", 2))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Optional first manager account, created at startup if missing
SEED_MANAGER_EMAIL = os.getenv("SEED_MANAGER_EMAIL")
SEED_MANAGER_PASSWORD = os.getenv("SEED_MANAGER_PASSWORD")
SEED_MANAGER_NAME = os.getenv("SEED_MANAGER_NAME", "Administrator")

PORT = int(os.getenv("PORT", 5000))
