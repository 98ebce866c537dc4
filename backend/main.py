import logging
import logging.config
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ------------------------------------------------------------
# 1. CONFIG & LOGGING
# ------------------------------------------------------------
from app.core.config import settings
from app.core.errors import CaptureError

LOG_LEVEL = "INFO" if settings.ENVIRONMENT == "production" else "DEBUG"

logging_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["console"], "level": LOG_LEVEL},
        "uvicorn.error": {"handlers": ["console"], "level": LOG_LEVEL},
        "uvicorn.access": {"handlers": ["console"], "level": LOG_LEVEL},
        "ishqme": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}

logging.config.dictConfig(logging_config)
logger = logging.getLogger("ishqme")


# ------------------------------------------------------------
# 2. FASTAPI APP
# ------------------------------------------------------------
app = FastAPI(
    title="IshqMe Popup Capture",
    description="Popup signups → Shopify customers, sheet log and discount emails.",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# ------------------------------------------------------------
# 3. CORS
# ------------------------------------------------------------
origins = settings.cors_origins or ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------
# 4. ROUTERS (API ROUTES)
# ------------------------------------------------------------
from app.routers import popup_router

app.include_router(popup_router.router)


# ------------------------------------------------------------
# 5. EXCEPTION HANDLERS
# ------------------------------------------------------------
def _failure(status_code: int, message: str, reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "details": {"reason": reason},
        },
    )


@app.exception_handler(CaptureError)
async def capture_exception_handler(request: Request, exc: CaptureError):
    if exc.status_code >= 500:
        logger.error(f"Error in {request.url.path}: {exc}")
    else:
        logger.warning(f"Rejected {request.url.path}: {exc.message}")
    return _failure(exc.status_code, exc.message, exc.reason)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Malformed body on {request.url.path}: {exc.errors()}")
    return _failure(400, "Request body must be a JSON object with an email.", "validation_error")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _failure(500, "Internal server error", "unknown_error")


# ------------------------------------------------------------
# 6. STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def startup_event():
    logger.info(f"🚀 {settings.PROJECT_NAME} started | Env: {settings.ENVIRONMENT} | Debug: {settings.DEBUG}")
    logger.info(
        f"🔌 Shopify: {settings.shopify_configured} | Sheets: {settings.sheets_configured} | Mail: {settings.mail_configured}"
    )


# ------------------------------------------------------------
# 7. REQUEST LOGGING MIDDLEWARE
# ------------------------------------------------------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    client = request.client.host if request.client else "-"
    logger.info(f"➡️ {client} {request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(f"⬅️ {request.method} {request.url.path} → {response.status_code}")
    return response

