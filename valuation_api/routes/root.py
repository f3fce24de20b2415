"""Root endpoint (service info)."""

from fastapi import APIRouter

from valuation_api import __version__

router = APIRouter(tags=["root"])


@router.get("/")
def read_root() -> dict:
    """Service info endpoint."""
    return {"message": "Hello from Valuation API", "service": "valuation-api", "version": __version__}
