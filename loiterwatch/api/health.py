"""Health check endpoint."""

from fastapi import APIRouter, Request

from loiterwatch.config import settings

router = APIRouter()


@router.get("/healthz", summary="Health check")
def health_check(request: Request) -> dict[str, str]:
    """Simple health check endpoint."""

    coordinator = getattr(request.app.state, "coordinator", None)
    scanner = "running" if coordinator is not None else "stopped"
    return {"status": "ok", "env": settings.env, "scanner": scanner}
