# routers/popup_router.py
import logging

from fastapi import APIRouter, Depends

from app.core.dependencies import get_capture_service
from app.models.capture_model import CaptureRequest, CaptureResponse
from app.services.capture_service import CaptureService

logger = logging.getLogger("ishqme.popup")

router = APIRouter(tags=["Popup"])


@router.post("/popup-capture", response_model=CaptureResponse, response_model_exclude_none=True)
async def popup_capture(
    payload: CaptureRequest,
    service: CaptureService = Depends(get_capture_service),
):
    """
    Popup submission: reconcile the contact in Shopify, log it to the sheet
    and email the discount code. Errors are rendered by the CaptureError handler.
    """
    logger.info(f"Popup capture received | email={payload.email} | discount={payload.discount}")
    return await service.handle(payload)


@router.get("/health")
async def health():
    return {"status": "ok"}
