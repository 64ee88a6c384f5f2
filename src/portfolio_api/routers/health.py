from fastapi import APIRouter, Request

from portfolio_api.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request):
    """
    Health check endpoint for monitoring API status and component readiness.

    Reports the database as degraded when it does not answer a ping.
    """
    state = request.app.state
    components = {
        "api": "ready",
        "database": "ready" if state.mongo_adapter.ping() else "unreachable",
        "media": state.settings.media_backend,
    }
    overall = "ok" if components["database"] == "ready" else "degraded"
    return HealthResponse(status=overall, components=components)
