"""
Admin authentication dependencies for operator endpoints.
"""

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

from lead_qualifier.core.config import settings

API_KEY_HEADER = "X-Admin-API-Key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def get_admin_auth(api_key: str | None = Security(api_key_header)) -> bool:
    """
    Verify the admin API key header.

    With no ADMIN_API_KEY configured (dev only) operator endpoints are open.

    Raises:
        HTTPException: 401 if the header is missing, 403 if it does not match
        RuntimeError: in production without ADMIN_API_KEY configured
    """
    if settings.app_env == "production" and not settings.admin_api_key:
        raise RuntimeError(
            "ADMIN_API_KEY must be set in production environment. "
            "Set ADMIN_API_KEY or set APP_ENV=dev for development."
        )

    if not settings.admin_api_key:
        return True

    if not api_key:
        raise HTTPException(status_code=401, detail=f"Missing API key. Provide {API_KEY_HEADER} header.")

    if api_key != settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Invalid API key.")

    return True
