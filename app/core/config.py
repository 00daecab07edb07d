from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # sqlite+aiosqlite for local runs, postgresql+asyncpg in production
    DATABASE_URL: str = "sqlite+aiosqlite:///./ccms.db"

    # If DEV and you hit SSL cert issues on Windows, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    SECRET_KEY: str = "ccms-dev-secret-change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 12

    ENV: str = "dev"  # "dev" or "prod"
    SEED_ON_STARTUP: bool = True

    # --- BRANDING ---
    UNIVERSITY_NAME: str = "Bahir Dar University"
    CERTIFICATE_TITLE: str = "Clearance Certificate"
    REGISTRAR_CONTACT: str = "Office of the Registrar, registrar@bdu.edu.et, +251 58 220 0000"

    # --- CLEARANCE WORKFLOW ---
    # Simulated latency of the eligibility check (seconds). Tests set this to 0.
    CLEARANCE_CHECK_DELAY_SECONDS: float = 2.0
    CLEARANCE_CHECK_TIMEOUT_SECONDS: float = 10.0
    CERTIFICATE_CACHE_SIZE: int = 256

    # --- PDF ---
    WKHTMLTOPDF_PATH: Optional[str] = None

    # --- ADMIN FORMS ---
    # Fields an official record must carry; the form has changed across versions.
    OFFICIAL_REQUIRED_FIELDS: List[str] = [
        "official_id",
        "first_name",
        "last_name",
        "profession",
        "education",
        "department",
        "phone",
        "email",
        "username",
        "password",
    ]

    CORS_ORIGINS: List[str] = ["http://localhost:5173", "*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
