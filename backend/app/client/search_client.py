import logging

import httpx

from app.config import settings
from app.exceptions import TransportFailure
from app.schemas.search import GlobalSearchResponse, SearchResult

logger = logging.getLogger("app.client")

SEARCH_PATH = "/api/global-search"


class GlobalSearchClient:
    """
    Async client for ``GET /api/global-search``.

    Every failure (unreachable server, timeout, non-2xx status, unreadable
    body) surfaces as ``TransportFailure``; an empty result list is not a
    failure.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.client_timeout_seconds
        self._transport = transport

    async def search(self, query: str) -> list[SearchResult]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(SEARCH_PATH, params={"q": query})
                response.raise_for_status()
                payload = GlobalSearchResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            logger.error("Search request failed with status %s", exc.response.status_code)
            raise TransportFailure(f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("Search request failed: %s", exc)
            raise TransportFailure(str(exc)) from exc
        except ValueError as exc:  # bad JSON or schema mismatch
            logger.error("Unreadable search response: %s", exc)
            raise TransportFailure("invalid response body") from exc

        return payload.results
