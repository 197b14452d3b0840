from fastapi import APIRouter, Request, Response, status

from activity_sink.interfaces.schemas import HealthRead

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthRead)
def health(request: Request, response: Response) -> HealthRead:
    """Report whether the relational store answers and the subscriber runs."""

    service = request.app.state.service
    database_ok = service.database_available()
    if not database_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthRead(
        status="ok" if database_ok else "degraded",
        database=database_ok,
        search_enabled=service.search_enabled,
        subscriber_running=service.subscriber_running,
    )
