"""
Runtime configuration for the ClientIQ front-end service
Values come from the environment (optionally a .env file loaded in main.py)
"""

import os

def _env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")

# Upstream CRM REST API
CRM_API_BASE_URL = os.getenv("CRM_API_BASE_URL", "http://localhost:5037/api").rstrip("/")
CRM_API_TIMEOUT_SECONDS = float(os.getenv("CRM_API_TIMEOUT_SECONDS", "30"))

# Persisted session profile (the browser-storage equivalent)
SESSION_STORE_PATH = os.getenv("SESSION_STORE_PATH", ".clientiq_session.json")
SESSION_STORAGE_KEY = "clientiq_user"

RATE_LIMIT_ENABLED = _env_flag("RATE_LIMIT_ENABLED")
CORS_ALLOW_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()
]

# Number of orders shown on the dashboard
RECENT_ORDERS_LIMIT = 10
