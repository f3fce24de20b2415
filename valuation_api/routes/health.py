"""Health check endpoints."""

from fastapi import APIRouter

from valuation_api.core.config import load_settings

router = APIRouter()


@router.get("")
def health_check() -> dict:
    """Generic health check."""
    return {"status": "healthy"}


@router.get("/live")
def liveness() -> dict:
    """Liveness probe - is the process running?"""
    return {"status": "alive"}


@router.get("/ready")
def readiness() -> dict:
    """Readiness probe - can the service reach Alpha Vantage with a key?

    Does not call the provider; only checks that a credential is configured.
    """
    settings = load_settings()
    checks = {"api_key_configured": settings.has_credential}
    status = "ready" if all(checks.values()) else "not_ready"
    return {"status": status, "checks": checks}
