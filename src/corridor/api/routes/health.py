"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_osrm_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.osrm_client import check_health as osrm_health_check
    return osrm_health_check


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Check OSRM service health."""
    osrm_health_check = _get_osrm_health_check()
    return {"service": "osrm", "healthy": osrm_health_check()}


@router.get("/health/catalogue", status_code=status.HTTP_200_OK)
def health_catalogue() -> dict:
    """Report whether the facility catalogue loads."""
    from ...config import settings
    from ...data.facility_repository import load_facilities

    try:
        facilities = load_facilities()
    except (OSError, ValueError) as exc:
        return {"service": "catalogue", "healthy": False, "error": str(exc)}
    return {
        "service": "catalogue",
        "healthy": True,
        "source": str(settings.facility_file) if settings.facility_file else "demo",
        "facilities": len(facilities),
    }
