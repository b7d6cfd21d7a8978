"""
PPOB API - Configuration
Environment variables and settings
"""
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    APP_NAME: str = "PPOB API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    PORT: int = 5000
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5000"]

    # Database
    DATABASE_URL: str = "sqlite:///./ppob.db"

    # JWT
    JWT_SECRET: str = "secret"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # Password hashing
    BCRYPT_SALT_ROUNDS: int = 10

    # Digiflazz
    DIGIFLAZZ_USERNAME: str = ""
    DIGIFLAZZ_API_KEY: str = ""
    DIGIFLAZZ_BASE_URL: str = "https://api.digiflazz.com/v1"
    DIGIFLAZZ_TIMEOUT: float = 30.0
    DIGIFLAZZ_TESTING: bool = False

    # Admin seed (skipped unless email and password are set)
    ADMIN_USERNAME: str = "admin"
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True
