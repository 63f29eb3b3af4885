import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.dependencies import get_search_service
from app.exceptions import InvalidQuery, QueryRejected, SearchError
from app.schemas.search import GlobalSearchResponse, SearchErrorResponse
from app.services.search_service import SearchService

logger = logging.getLogger("app.routers.search")

router = APIRouter(tags=["search"])


def _error(status_code: int, exc: Exception, message: str | None = None) -> JSONResponse:
    """Error envelope. ``message`` overrides the exception text, which then moves to ``error``."""
    info = exc.to_dict() if isinstance(exc, SearchError) else {"message": str(exc)}
    body = SearchErrorResponse(
        message=message or info["message"],
        error=info["message"] if message else None,
        error_type=info.get("error_type"),
        details=info.get("details") or None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.get(
    "/global-search",
    response_model=GlobalSearchResponse,
    response_model_exclude_none=True,
    responses={400: {"model": SearchErrorResponse}, 500: {"model": SearchErrorResponse}},
)
async def global_search(
    q: str | None = Query(None),
    service: SearchService = Depends(get_search_service),
):
    try:
        outcome = await service.search(q)
    except (InvalidQuery, QueryRejected) as exc:
        return _error(400, exc)
    except Exception as exc:
        logger.exception("Search error for %r", q)
        return _error(500, exc, "Server error occurred")

    response = GlobalSearchResponse(
        count=len(outcome.results),
        query=outcome.query,
        results=outcome.results,
        failed_sources=outcome.failed_sources or None,
    )
    if not outcome.results:
        response.message = f'No results found for "{outcome.query}"'
    return response
