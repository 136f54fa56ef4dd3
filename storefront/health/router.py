from fastapi import APIRouter, Request

from storefront.config import AUTH_SERVICE_URL, BOOKING_SERVICE_URL, VACCINE_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root(request: Request):
    return {
        "ok": True,
        "services": {
            "auth": AUTH_SERVICE_URL,
            "vaccines": VACCINE_SERVICE_URL,
            "bookings": BOOKING_SERVICE_URL,
        },
        "timeoutSeconds": HTTP_TIMEOUT_SECONDS,
        "rateLimit": rate_limit_health_info(request),
    }
