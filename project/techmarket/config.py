# techmarket/config.py

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./techmarket.db"
    STORE_NAME: str = "TechMarket"
    CURRENCY: str = "INR"

    # payment gateway: no key means mock mode
    STRIPE_SECRET_KEY: Optional[str] = None
    PAYMENT_SIGNATURE_SECRET: Optional[str] = None

    # mail relay: skipped unless SMTP_HOST and SMTP_USER are set
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = None
    SMTP_FROM: str = '"TechMarket" <noreply@techmarket.com>'
    ADMIN_EMAIL: Optional[str] = None

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_CHAT_MODEL: str = "gpt-4o"
    OPENAI_SUMMARY_MODEL: str = "gpt-4o-mini"
    OPENAI_SEARCH_MODEL: str = "gpt-4.1"
    OPENAI_IMAGE_MODEL: str = "gpt-image-1"
    OPENAI_VIDEO_MODEL: str = "sora-2"
    VIDEO_POLL_INTERVAL: float = 10.0
    VIDEO_POLL_ATTEMPTS: int = 30

    LOG_DIR: str = "log"
    LOG_PRINT: str = "1"

    STATIC_DIR: str = "dist"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    @property
    def payment_live(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)

    @property
    def mail_enabled(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER)

settings = Settings()
