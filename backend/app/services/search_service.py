import asyncio
import inspect
import logging
import time
from collections.abc import Sequence

from pydantic import BaseModel
from sqlalchemy.orm import sessionmaker

from app.config import settings
from app.exceptions import InvalidQuery, SearchError, SourceUnavailable
from app.schemas.search import SearchResult
from app.services.normalizer import normalize
from app.services.source_executor import SourceExecutor, build_sources
from app.utils.query import Query

logger = logging.getLogger("app.search")


class SearchOutcome(BaseModel):
    query: str
    results: list[SearchResult]
    failed_sources: list[str] = []


def rank_results(results: list[SearchResult]) -> list[SearchResult]:
    # sorted() stays stable with reverse=True: equal scores keep merge order.
    return sorted(results, key=lambda r: r.relevance_score, reverse=True)


class SearchService:
    """
    Fans a query out to every registered source at once and merges the
    normalized results into one list ranked by relevance score.

    Registration order of ``sources`` is the tie-break order; it does not
    depend on which source answers first.
    """

    def __init__(
        self,
        sources: Sequence[SourceExecutor],
        timeout_seconds: float | None = None,
        isolate_failures: bool = False,
    ):
        self.sources = list(sources)
        self.timeout_seconds = timeout_seconds
        self.isolate_failures = isolate_failures

    async def _run_source(self, source: SourceExecutor, query: Query) -> list[SearchResult]:
        if inspect.iscoroutinefunction(source.execute):
            call = source.execute(query)
        else:
            call = asyncio.to_thread(source.execute, query)

        try:
            records = await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except SearchError:
            raise
        except asyncio.TimeoutError as exc:
            raise SourceUnavailable(
                source.source_type, f"timed out after {self.timeout_seconds}s"
            ) from exc
        except Exception as exc:
            raise SourceUnavailable(source.source_type, str(exc)) from exc

        return [normalize(record, source.source_type) for record in records]

    async def search(self, raw_query: str | None) -> SearchOutcome:
        query = Query(raw=raw_query or "")
        if query.is_blank:
            raise InvalidQuery()

        started = time.perf_counter()
        tasks = [asyncio.ensure_future(self._run_source(source, query)) for source in self.sources]
        if self.isolate_failures:
            gathered = await asyncio.gather(*tasks, return_exceptions=True)
        else:
            try:
                gathered = await asyncio.gather(*tasks)
            except BaseException:
                # First failure aborts the search: stop the other sources and
                # collect their outcomes before re-raising.
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        merged: list[SearchResult] = []
        failed: list[str] = []
        for source, outcome in zip(self.sources, gathered):
            if isinstance(outcome, SourceUnavailable):
                logger.warning("Skipping failed source %s: %s", source.source_type, outcome.reason)
                failed.append(source.source_type)
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            merged.extend(outcome)

        ranked = rank_results(merged)
        logger.info(
            "Search %r: %d results from %d sources in %.1f ms",
            query.text,
            len(ranked),
            len(self.sources) - len(failed),
            (time.perf_counter() - started) * 1000,
        )
        return SearchOutcome(query=query.text, results=ranked, failed_sources=failed)


def build_search_service(session_factory: sessionmaker) -> SearchService:
    return SearchService(
        build_sources(session_factory, settings.match_mode),
        timeout_seconds=settings.source_timeout_seconds,
        isolate_failures=settings.isolate_source_failures,
    )
