"""
Client-side search session: debounced, supersedable searches over a single
text input.

Every input change bumps a generation counter. A debounce timer captures the
generation when it is armed, and a finished search only touches visible
state if its captured generation is still the current one, so results for
an older input are dropped even when they arrive last.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from app.config import settings
from app.exceptions import TransportFailure
from app.schemas.search import RenderedResult, SearchResult
from app.utils.highlight import highlight

logger = logging.getLogger("app.client.session")

SearchFn = Callable[[str], Awaitable[list[SearchResult]]]


class SessionState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class SearchSession:
    def __init__(
        self,
        search: SearchFn,
        debounce_seconds: float | None = None,
        on_change: Callable[["SearchSession"], None] | None = None,
    ):
        self._search = search
        self.debounce_seconds = (
            debounce_seconds if debounce_seconds is not None else settings.debounce_ms / 1000
        )
        self._on_change = on_change

        self.query = ""
        self.state = SessionState.IDLE
        self.results: list[SearchResult] = []
        self.error_message: str | None = None

        self._results_query = ""
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._inflight: set[asyncio.Task] = set()
        self._settled = asyncio.Event()
        self._settled.set()

    def set_query(self, text: str) -> None:
        self.query = text
        self._generation += 1
        self._cancel_timer()

        if not text.strip():
            self.results = []
            self._results_query = ""
            self.error_message = None
            self._transition(SessionState.IDLE)
            return

        self._transition(SessionState.PENDING)
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_seconds, self._fire, self._generation, text)

    def clear(self) -> None:
        self.set_query("")

    async def wait_settled(self, timeout: float | None = None) -> SessionState:
        """Wait until the session leaves Pending and return the new state."""
        await asyncio.wait_for(self._settled.wait(), timeout)
        return self.state

    @property
    def status_message(self) -> str:
        if self.state is SessionState.PENDING:
            return "Searching..."
        if self.state is SessionState.ERROR:
            return self.error_message or TransportFailure.user_message
        if self.state is SessionState.SUCCESS:
            if not self.results:
                return f'No results found for "{self._results_query}". Try different keywords.'
            return f'Found {len(self.results)} results for "{self._results_query}"'
        return ""

    def rendered_results(self) -> list[RenderedResult]:
        return [
            RenderedResult(
                result=r,
                title=highlight(r.title, self._results_query),
                description=highlight(r.description, self._results_query),
            )
            for r in self.results
        ]

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, generation: int, text: str) -> None:
        self._timer = None
        if generation != self._generation:
            return
        task = asyncio.get_running_loop().create_task(self._run(generation, text))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run(self, generation: int, text: str) -> None:
        try:
            results = await self._search(text)
        except TransportFailure as exc:
            self._fail(generation, text, exc.user_message)
            return
        except Exception:
            logger.exception("Search for %r failed", text)
            self._fail(generation, text, TransportFailure.user_message)
            return

        if generation != self._generation:
            logger.debug("Discarding stale results for %r", text)
            return
        self.results = list(results)
        self._results_query = text
        self.error_message = None
        self._transition(SessionState.SUCCESS)

    def _fail(self, generation: int, text: str, message: str) -> None:
        if generation != self._generation:
            logger.debug("Ignoring failure of superseded search %r", text)
            return
        self.results = []
        self._results_query = text
        self.error_message = message
        self._transition(SessionState.ERROR)

    def _transition(self, state: SessionState) -> None:
        self.state = state
        if state is SessionState.PENDING:
            self._settled.clear()
        else:
            self._settled.set()
        if self._on_change is not None:
            self._on_change(self)
