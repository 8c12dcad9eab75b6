import logging

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lead_qualifier.api.conversations import router as conversations_router
from lead_qualifier.api.customers import router as customers_router
from lead_qualifier.api.leads import dashboard_router
from lead_qualifier.api.leads import router as leads_router
from lead_qualifier.core.config import settings
from lead_qualifier.db import models as _models  # noqa: F401  (register tables on Base.metadata)
from lead_qualifier.db import session as db_session
from lead_qualifier.db.base import Base
from lead_qualifier.db.deps import get_db
from lead_qualifier.middleware.correlation_id import CorrelationIdMiddleware

logger = logging.getLogger(__name__)

app = FastAPI(title="Remodeling Lead Qualifier")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)


def validate_production_settings() -> list[str]:
    """Configuration problems that make the app unsafe to run with APP_ENV=production."""
    errors = []
    if not settings.admin_api_key:
        errors.append(
            "ADMIN_API_KEY is required in production. "
            "Set ADMIN_API_KEY environment variable with a strong random key."
        )
    if not settings.notifications_dry_run and not settings.sendgrid_api_key:
        errors.append(
            "SENDGRID_API_KEY is required when NOTIFICATIONS_DRY_RUN=false. "
            "Set SENDGRID_API_KEY or enable dry-run."
        )
    if settings.ai_responder_enabled and not settings.openai_api_key:
        errors.append(
            "OPENAI_API_KEY is required when AI_RESPONDER_ENABLED=true. "
            "Set OPENAI_API_KEY or disable the responder."
        )
    return errors


@app.on_event("startup")
async def startup_event():
    """Run startup checks and create tables."""
    if settings.app_env == "production":
        production_errors = validate_production_settings()
        if production_errors:
            error_message = (
                "Production environment validation failed:\n\n"
                + "\n".join(f"  - {error}" for error in production_errors)
                + "\n\nThe application cannot start in production with these settings."
            )
            logger.error(error_message)
            raise RuntimeError(error_message)

    Base.metadata.create_all(bind=db_session.engine)

    # No secrets in this line
    logger.info(
        "Startup: Configuration loaded - "
        f"Environment: {settings.app_env}, "
        f"Notifications enabled: {settings.feature_notifications_enabled}, "
        f"Notifications dry-run: {settings.notifications_dry_run}, "
        f"AI responder: {settings.ai_responder_enabled and bool(settings.openai_api_key)}"
    )
    if settings.notifications_dry_run:
        logger.warning("Notifications are in dry-run mode - qualified lead emails are logged, not sent")


@app.get("/health")
def health():
    """Liveness check with feature flag visibility. Returns 200 immediately."""
    return {
        "ok": True,
        "features": {
            "notifications_enabled": settings.feature_notifications_enabled,
            "notifications_dry_run": settings.notifications_dry_run,
            "ai_responder_enabled": settings.ai_responder_enabled,
        },
    }


@app.get("/ready")
def ready(db: Session = Depends(get_db)):
    """Readiness check - 200 if the database answers, 503 if not."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ok": False, "database": "disconnected", "error": str(e)},
        )
    return {"ok": True, "database": "connected"}


app.include_router(conversations_router, prefix="/conversations", tags=["conversations"])
app.include_router(customers_router, prefix="/customers", tags=["customers"])
app.include_router(leads_router, prefix="/leads", tags=["leads"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
