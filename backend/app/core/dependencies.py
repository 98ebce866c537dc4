# core/dependencies.py
import logging
from functools import lru_cache

from app.core.config import Settings, settings
from app.core.sheets import SheetLogSink
from app.core.shopify import ShopifyClient
from app.services.capture_service import CaptureService
from app.services.customer_service import CustomerReconciler
from app.utils.coupon_email import CouponMailer
from app.utils.locks import KeyedLock

logger = logging.getLogger("ishqme")


def build_capture_service(cfg: Settings) -> CaptureService:
    """Wire every collaborator explicitly. Unconfigured sinks are left out with a warning."""
    reconciler = None
    if cfg.shopify_configured:
        shopify = ShopifyClient(
            store_url=cfg.SHOPIFY_STORE_URL,
            access_token=cfg.SHOPIFY_ACCESS_TOKEN,
            api_version=cfg.SHOPIFY_API_VERSION,
            timeout=cfg.OUTBOUND_TIMEOUT_SECONDS,
        )
        locks = KeyedLock() if cfg.SERIALIZE_PER_EMAIL else None
        reconciler = CustomerReconciler(shopify, locks=locks)
    else:
        logger.warning("⚠️ SHOPIFY_STORE_URL / SHOPIFY_ACCESS_TOKEN missing, captures will fail")

    log_sink = None
    if cfg.sheets_configured:
        log_sink = SheetLogSink(
            spreadsheet_id=cfg.SPREADSHEET_ID,
            tab=cfg.SHEET_TAB,
            credentials_path=cfg.GOOGLE_CREDENTIALS_PATH,
            timeout=cfg.OUTBOUND_TIMEOUT_SECONDS,
        )
    else:
        logger.warning("⚠️ SPREADSHEET_ID / GOOGLE_CREDENTIALS_PATH missing, sheet log disabled")

    mailer = None
    if cfg.mail_configured:
        mailer = CouponMailer(
            user=cfg.GMAIL_USER,
            password=cfg.GMAIL_APP_PASSWORD,
            host=cfg.SMTP_HOST,
            port=cfg.SMTP_PORT,
            sender_name=cfg.MAIL_SENDER_NAME,
            timeout=cfg.OUTBOUND_TIMEOUT_SECONDS,
        )
    else:
        logger.warning("⚠️ GMAIL_USER / GMAIL_APP_PASSWORD missing, coupon emails disabled")

    return CaptureService(
        reconciler=reconciler,
        log_sink=log_sink,
        mailer=mailer,
        default_country_code=cfg.DEFAULT_COUNTRY_CODE,
        require_phone=cfg.REQUIRE_PHONE,
        require_discount=cfg.REQUIRE_DISCOUNT,
        base_percent=cfg.BASE_DISCOUNT_PERCENT,
        upgraded_percent=cfg.UPGRADED_DISCOUNT_PERCENT,
        base_code=cfg.BASE_COUPON_CODE,
        upgraded_code=cfg.UPGRADED_COUPON_CODE,
    )


@lru_cache()
def get_capture_service() -> CaptureService:
    return build_capture_service(settings)
