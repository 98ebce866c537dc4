# models/capture_model.py
from pydantic import BaseModel, Field, validator
from typing import Optional, Union, Any, Dict
from datetime import datetime, timezone


class CaptureRequest(BaseModel):
    """Popup submission. Only email is required by default; see REQUIRE_* settings."""
    email: Optional[str] = None
    phone: Optional[Union[str, int]] = None
    discount: Optional[Union[str, int, float]] = None

    @validator("email", pre=True)
    def clean_email(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @validator("phone", "discount", pre=True)
    def stringify(cls, v):
        # Popup scripts send numbers as often as strings
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class CustomerRecord(BaseModel):
    """Transient copy of a Shopify customer, never cached across requests."""
    id: Union[int, str]
    email: Optional[str] = None
    phone: Optional[str] = None
    tags: Optional[str] = None
    accepts_marketing: Optional[bool] = None

    class Config:
        extra = "allow"


class ReconcileResult(BaseModel):
    record: CustomerRecord
    phone_was_added: bool = False
    created: bool = False
    updated: bool = False


class LogEntry(BaseModel):
    email: str
    phone: Optional[str] = None
    discount: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def as_row(self) -> list:
        return [
            self.email,
            self.phone or "",
            self.discount or "",
            self.timestamp.isoformat(),
        ]


class CaptureResponse(BaseModel):
    success: bool
    message: str
    shopifyCustomer: Optional[Dict[str, Any]] = None
    details: Optional[Dict[str, Any]] = None
