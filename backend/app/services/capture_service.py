# services/capture_service.py
import logging
from typing import Optional

from app.core.errors import CaptureValidationError, PlatformNotConfiguredError, SinkError
from app.core.sheets import SheetLogSink
from app.models.capture_model import CaptureRequest, CaptureResponse, LogEntry, ReconcileResult
from app.services.customer_service import CustomerReconciler
from app.utils.coupon_email import CouponMailer
from app.utils.coupons import BASE_CODE, BASE_PERCENT, UPGRADED_CODE, UPGRADED_PERCENT, discount_percent_for, select_coupon
from app.utils.executor import run_blocking
from app.utils.phone import normalize_phone

logger = logging.getLogger("ishqme.capture")


class CaptureService:
    """
    Validate → reconcile → log → notify → respond.

    Reconciliation failures abort the request before any sink is touched.
    Log and notification failures are logged and reported in the response
    details; they never change the outcome.
    """

    def __init__(
        self,
        reconciler: Optional[CustomerReconciler],
        log_sink: Optional[SheetLogSink] = None,
        mailer: Optional[CouponMailer] = None,
        default_country_code: str = "91",
        require_phone: bool = False,
        require_discount: bool = False,
        base_percent: int = BASE_PERCENT,
        upgraded_percent: int = UPGRADED_PERCENT,
        base_code: str = BASE_CODE,
        upgraded_code: str = UPGRADED_CODE,
    ):
        self.reconciler = reconciler
        self.log_sink = log_sink
        self.mailer = mailer
        self.default_country_code = default_country_code
        self.require_phone = require_phone
        self.require_discount = require_discount
        self.base_percent = base_percent
        self.upgraded_percent = upgraded_percent
        self.base_code = base_code
        self.upgraded_code = upgraded_code

    def validate(self, req: CaptureRequest) -> None:
        if not req.email:
            raise CaptureValidationError("Email is required.")
        if self.require_phone and not req.phone:
            raise CaptureValidationError("Phone is required.")
        if self.require_discount and not req.discount:
            raise CaptureValidationError("Discount is required.")

    def coupon_for(self, result: ReconcileResult) -> str:
        percent = discount_percent_for(result.phone_was_added, self.base_percent, self.upgraded_percent)
        return select_coupon(percent, self.base_percent, self.base_code, self.upgraded_code)

    async def handle(self, req: CaptureRequest) -> CaptureResponse:
        self.validate(req)

        if self.reconciler is None:
            raise PlatformNotConfiguredError("Customer platform is not configured.")

        phone = normalize_phone(req.phone, self.default_country_code)
        result = await self.reconciler.reconcile(req.email, phone, req.discount)

        logged = await self._log(LogEntry(email=req.email, phone=phone, discount=req.discount))
        coupon = self.coupon_for(result)
        notified = await self._notify(req.email, coupon)

        return CaptureResponse(
            success=True,
            message=self._message(result, notified),
            shopifyCustomer=result.record.dict(),
            details={
                "couponCode": coupon,
                "phoneAdded": result.phone_was_added,
                "created": result.created,
                "logged": logged,
                "notified": notified,
            },
        )

    async def _log(self, entry: LogEntry) -> bool:
        if self.log_sink is None:
            logger.warning("⚠️ Sheet log not configured, skipping capture row")
            return False
        try:
            await run_blocking(self.log_sink.append_row, entry.as_row())
            return True
        except SinkError as e:
            logger.error(f"Sheet log failed for {entry.email}: {e}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected sheet log error for {entry.email}: {e}")
            return False

    async def _notify(self, email: str, coupon: str) -> bool:
        if self.mailer is None:
            logger.warning("⚠️ Mail not configured, skipping coupon email")
            return False
        try:
            await run_blocking(self.mailer.send_coupon, email, coupon)
            return True
        except SinkError as e:
            logger.error(f"Coupon email failed for {email}: {e}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected coupon email error for {email}: {e}")
            return False

    @staticmethod
    def _message(result: ReconcileResult, notified: bool) -> str:
        if result.created:
            base = "New customer created."
        elif result.updated:
            base = "Existing customer updated with phone."
        else:
            base = "Email already registered."
        tail = " Coupon sent." if notified else " Coupon email could not be sent."
        return base + tail
