from pydantic_settings import BaseSettings
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "iSkolar"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"  # development, production, test
    DEBUG: bool = False

    # Database, overridden by DATABASE_URL (PostgreSQL in production)
    DATABASE_URL: str = f"sqlite:///{Path(__file__).resolve().parents[2] / 'data' / 'iskolar.db'}"

    # Auth: no default secret, an empty value stops the app at startup
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_DAYS_SHORT: int = 1
    TOKEN_TTL_DAYS_REMEMBER: int = 30
    BCRYPT_ROUNDS: int = 12

    # Password reset
    OTP_TTL_MINUTES: int = 5

    # CORS
    FRONTEND_URL: str = "http://localhost:8081"

    # Blob storage (scholarship images, profile pictures)
    UPLOAD_DIR: str = str(Path(__file__).resolve().parents[2] / "data" / "uploads")
    PUBLIC_BASE_URL: str = "http://localhost:5000"
    MAX_IMAGE_SIZE_MB: int = 5

    # SMTP (OTP emails)
    SMTP_SERVER: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = ""

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    class Config:
        env_file = ".env"


settings = Settings()
