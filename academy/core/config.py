from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")
    db_echo: bool = Field(False, alias="DB_ECHO")
    # Seconds before a pooled connection is replaced; ignored for SQLite
    db_pool_recycle: int = Field(300, alias="DB_POOL_RECYCLE")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    admin_email: Optional[str] = Field(None, alias="ADMIN_EMAIL")
    admin_password: Optional[str] = Field(None, alias="ADMIN_PASSWORD")

    # Footer and signature of outgoing makeup emails
    academy_name: str = Field("GearMinds Academy", alias="ACADEMY_NAME")
    academy_phone: str = Field("(469) 290-4561", alias="ACADEMY_PHONE")
    academy_email: str = Field("contactus@gearmindsacademy.com", alias="ACADEMY_EMAIL")
    academy_address: str = Field(
        "11511 Independence Pkwy, Suite #101, Frisco, TX 75035", alias="ACADEMY_ADDRESS"
    )

    # Display cap on regular weekly sessions per class
    max_sessions: int = Field(18, alias="MAX_SESSIONS")
    # Monday=0 ... Sunday=6
    makeup_weekday: int = Field(5, ge=0, le=6, alias="MAKEUP_WEEKDAY")
    makeup_time_text: str = Field("10:00 AM - 12:00 PM", alias="MAKEUP_TIME_TEXT")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

# Applied with logging.config.dictConfig by the app and the db scripts
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "academy": {"level": settings.log_level.upper()},
        # db scripts run with python -m
        "__main__": {"level": settings.log_level.upper()},
    },
}
