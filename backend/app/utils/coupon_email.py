# utils/coupon_email.py → discount code delivery over Gmail SMTP
import smtplib
import logging
from email.message import EmailMessage

from app.core.errors import SinkError

logger = logging.getLogger("ishqme.mail")

# ==========================
# ISHQME COLORS
# ==========================
BLUSH = "#F7E1E3"
WINE = "#7A1F3D"
INK = "#1A1A1A"

COUPON_TEMPLATE = {
    "subject": "Your {code} Discount Code!",
    "text": "Thank you! Your discount code is {code}",
    "html": """
    <div style="font-family: 'Inter', sans-serif; max-width: 520px; margin: 32px auto; padding: 40px; background: {blush}; color: {ink}; border-radius: 20px; text-align: center;">
      <p style="font-size: 18px; margin: 0 0 24px;">Thank you! Your discount code is <b>{code}</b></p>
      <div style="display: inline-block; padding: 16px 32px; border: 2px dashed {wine}; border-radius: 12px; color: {wine}; font-size: 28px; font-weight: 700; letter-spacing: 4px;">
        {code}
      </div>
      <p style="margin-top: 32px; font-size: 13px; color: #666666;">Apply it at checkout on ishqme.com</p>
    </div>
    """,
}


def build_coupon_message(sender: str, to_email: str, code: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = to_email
    msg["Subject"] = COUPON_TEMPLATE["subject"].format(code=code)
    msg.set_content(COUPON_TEMPLATE["text"].format(code=code))
    msg.add_alternative(
        COUPON_TEMPLATE["html"].format(code=code, blush=BLUSH, wine=WINE, ink=INK),
        subtype="html",
    )
    return msg


class CouponMailer:
    """Sends the coupon email. Blocking; run it through run_blocking."""

    def __init__(
        self,
        user: str,
        password: str,
        host: str = "smtp.gmail.com",
        port: int = 465,
        sender_name: str = "IshqMe",
        timeout: float = 10.0,
    ):
        self.user = user
        self.password = password
        self.host = host
        self.port = port
        self.sender = f'"{sender_name}" <{user}>'
        self.timeout = timeout

    def send_coupon(self, to_email: str, code: str) -> None:
        try:
            # Header values reject CR/LF, so a malformed address fails here
            msg = build_coupon_message(self.sender, to_email, code)
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.login(self.user, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise SinkError(f"Coupon email to {to_email} failed: {e}") from e
        logger.info(f"Sent coupon {code} to {to_email}")
