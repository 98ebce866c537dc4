# core/config.py
from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ────────────────────────────────
    # 1. APP & ENVIRONMENT
    # ────────────────────────────────
    PROJECT_NAME: str = "IshqMe Popup Capture"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=True)
    PORT: int = 3000
    CORS_ORIGINS: str = Field(
        default="*",
        description="Comma separated list of allowed origins, '*' for any"
    )

    # ────────────────────────────────
    # 2. SHOPIFY
    # ────────────────────────────────
    SHOPIFY_STORE_URL: Optional[str] = Field(
        default=None,
        description="Store base URL (e.g. https://ishqme.myshopify.com)"
    )
    SHOPIFY_ACCESS_TOKEN: Optional[str] = None
    SHOPIFY_API_VERSION: str = "2023-04"

    # ────────────────────────────────
    # 3. GOOGLE SHEETS
    # ────────────────────────────────
    SPREADSHEET_ID: Optional[str] = None
    SHEET_TAB: str = "Sheet1"
    GOOGLE_CREDENTIALS_PATH: Optional[str] = Field(
        default=None,
        description="Path to the Google service account JSON"
    )

    # ────────────────────────────────
    # 4. EMAIL (Gmail)
    # ────────────────────────────────
    GMAIL_USER: Optional[str] = None
    GMAIL_APP_PASSWORD: Optional[str] = None
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    MAIL_SENDER_NAME: str = "IshqMe"

    # ────────────────────────────────
    # 5. CAPTURE POLICY
    # ────────────────────────────────
    DEFAULT_COUNTRY_CODE: str = "91"
    BASE_DISCOUNT_PERCENT: int = 5
    UPGRADED_DISCOUNT_PERCENT: int = 10
    BASE_COUPON_CODE: str = "ISHQME5"
    UPGRADED_COUPON_CODE: str = "ISHQME10"
    REQUIRE_PHONE: bool = False
    REQUIRE_DISCOUNT: bool = False
    SERIALIZE_PER_EMAIL: bool = True

    # ────────────────────────────────
    # 6. OUTBOUND CALLS
    # ────────────────────────────────
    OUTBOUND_TIMEOUT_SECONDS: float = 10.0

    @property
    def shopify_configured(self) -> bool:
        return bool(self.SHOPIFY_STORE_URL and self.SHOPIFY_ACCESS_TOKEN)

    @property
    def sheets_configured(self) -> bool:
        return bool(self.SPREADSHEET_ID and self.GOOGLE_CREDENTIALS_PATH)

    @property
    def mail_configured(self) -> bool:
        return bool(self.GMAIL_USER and self.GMAIL_APP_PASSWORD)

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    class Config:
        case_sensitive = False
        env_file = ".env"
        env_file_encoding = "utf-8"


# Create singleton
settings = Settings()
