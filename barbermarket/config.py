# barbermarket/config.py

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Barber Market"

    # Database
    DATABASE_URL: str = "sqlite:///./barbermarket.db"
    DATABASE_ECHO: bool = False

    # Security
    SECRET_KEY: str = "change-me-later"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Barbers are approved manually unless this is on
    AUTO_APPROVE_BARBERS: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
