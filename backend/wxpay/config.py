"""
WeChat Pay Configuration Module

Loads gateway credentials from environment variables (WXPAY_*) or a .env file.
"""
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


UNIFIED_ORDER_URL = "https://api.mch.weixin.qq.com/pay/unifiedorder"


class Credentials(BaseModel):
    """
    Merchant identity and shared signing secret.

    Immutable: to rotate keys, build a new Credentials and new
    builder/verifier objects around it.
    """
    app_id: str = Field(min_length=1)
    mch_id: str = Field(min_length=1)
    api_key: str = Field(min_length=1, repr=False)

    model_config = {
        "frozen": True,
        "extra": "forbid"
    }


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Credentials default to empty; an incomplete set is reported when an
    order is built, not when settings are loaded.
    """

    app_id: str = ""
    mch_id: str = ""
    api_key: str = Field(default="", repr=False)

    # Gateway
    unified_order_url: str = UNIFIED_ORDER_URL
    http_timeout: Optional[float] = None  # seconds, None waits indefinitely

    model_config = SettingsConfigDict(
        env_prefix="WXPAY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    def credentials(self) -> Optional[Credentials]:
        """Return Credentials when all three values are set, else None."""
        if not (self.app_id and self.mch_id and self.api_key):
            return None
        return Credentials(app_id=self.app_id, mch_id=self.mch_id, api_key=self.api_key)


# Global settings instance
settings = Settings()
