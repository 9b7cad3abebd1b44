"""Health and readiness routes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/")
def read_root() -> dict[str, str]:
    """Info endpoint with a short usage message."""
    return {"message": "Train Traffic skill. POST platform events to /alexa."}


@router.get("/alive")
async def alive_check() -> JSONResponse:
    """Health check endpoint for infrastructure probes."""
    return JSONResponse({"status": "ok", "message": "Train Traffic is alive and healthy."})


__all__ = ["router"]
