"""Configuration module for the classroom backend.

This module provides centralized configuration management, including directory
paths, API server settings, token lifetimes and membership policy.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# --- Database Configuration ---

# "sqlite://" selects a single shared in-memory connection (used by tests)
DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/classroom.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Authentication Configuration ---

# Access and refresh tokens are signed with different keys so that one can
# never be presented in place of the other.
JWT_ACCESS_SECRET: str = os.getenv("JWT_ACCESS_SECRET", "access-secret-change-in-production")
JWT_REFRESH_SECRET: str = os.getenv("JWT_REFRESH_SECRET", "refresh-secret-change-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

# bcrypt cost factor for new password hashes
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# --- Class Configuration ---

# Entropy (bytes) of the shareable class access token
CLASS_ACCESS_TOKEN_BYTES: int = int(os.getenv("CLASS_ACCESS_TOKEN_BYTES", "16"))

# When true, removing members and changing owners requires the caller to be a
# class owner (a member may still remove themself). When false, any
# authenticated user passing the existence checks may moderate.
OWNER_ONLY_MODERATION: bool = os.getenv("OWNER_ONLY_MODERATION", "true").lower() == "true"

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
