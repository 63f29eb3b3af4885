import asyncio

import httpx
import pytest

from app.client.search_client import GlobalSearchClient
from app.client.session import SearchSession, SessionState
from app.dependencies import get_session_factory
from app.exceptions import TransportFailure
from app.main import app
from app.schemas.search import SearchResult

DEBOUNCE = 0.02


def _result(id, title="Laptop Screen", description="A laptop screen"):
    return SearchResult(id=id, source_type="product", title=title, description=description)


class FakeSearch:
    def __init__(self, results=None, error=None):
        self.calls = []
        self.results = results if results is not None else [_result("p1")]
        self.error = error
        self.gates = {}

    async def __call__(self, query):
        self.calls.append(query)
        if query in self.gates:
            await self.gates[query].wait()
        if self.error is not None:
            raise self.error
        return [r.model_copy(update={"title": f"{r.title} {query}"}) for r in self.results]


class TestSearchSession:
    async def test_starts_idle(self):
        session = SearchSession(FakeSearch(), debounce_seconds=DEBOUNCE)
        assert session.state is SessionState.IDLE
        assert session.results == []
        assert session.status_message == ""

    async def test_rapid_typing_dispatches_once(self):
        search = FakeSearch()
        session = SearchSession(search, debounce_seconds=DEBOUNCE)
        for text in ("m", "mo", "mon"):
            session.set_query(text)
        assert session.state is SessionState.PENDING

        assert await session.wait_settled(timeout=1) is SessionState.SUCCESS
        await asyncio.sleep(DEBOUNCE * 3)
        assert search.calls == ["mon"]

    async def test_pending_until_timer_fires(self):
        search = FakeSearch()
        session = SearchSession(search, debounce_seconds=0.2)
        session.set_query("laptop")
        await asyncio.sleep(0.05)
        assert session.state is SessionState.PENDING
        assert search.calls == []

    async def test_success_stores_results(self):
        session = SearchSession(FakeSearch(), debounce_seconds=DEBOUNCE)
        session.set_query("lap")
        await session.wait_settled(timeout=1)
        assert session.state is SessionState.SUCCESS
        assert [r.id for r in session.results] == ["p1"]
        assert session.status_message == 'Found 1 results for "lap"'

    async def test_zero_results_is_success(self):
        session = SearchSession(FakeSearch(results=[]), debounce_seconds=DEBOUNCE)
        session.set_query("zzz")
        assert await session.wait_settled(timeout=1) is SessionState.SUCCESS
        assert session.results == []
        assert session.status_message.startswith('No results found for "zzz"')

    async def test_transport_failure_sets_error_and_clears(self):
        search = FakeSearch()
        session = SearchSession(search, debounce_seconds=DEBOUNCE)
        session.set_query("lap")
        await session.wait_settled(timeout=1)
        assert session.results

        search.error = TransportFailure("connection refused")
        session.set_query("laptop")
        assert await session.wait_settled(timeout=1) is SessionState.ERROR
        assert session.results == []
        assert session.status_message == TransportFailure.user_message
        assert "refused" not in session.status_message

    async def test_unexpected_failure_does_not_escape(self):
        session = SearchSession(FakeSearch(error=RuntimeError("boom")), debounce_seconds=DEBOUNCE)
        session.set_query("lap")
        assert await session.wait_settled(timeout=1) is SessionState.ERROR

    async def test_blank_input_returns_to_idle(self):
        search = FakeSearch()
        session = SearchSession(search, debounce_seconds=DEBOUNCE)
        session.set_query("lap")
        await session.wait_settled(timeout=1)

        session.set_query("   ")
        assert session.state is SessionState.IDLE
        assert session.results == []
        await asyncio.sleep(DEBOUNCE * 3)
        assert search.calls == ["lap"]

    async def test_clear_cancels_pending_timer(self):
        search = FakeSearch()
        session = SearchSession(search, debounce_seconds=DEBOUNCE)
        session.set_query("lap")
        session.clear()
        await asyncio.sleep(DEBOUNCE * 3)
        assert search.calls == []
        assert session.state is SessionState.IDLE

    async def test_superseded_result_is_discarded(self):
        search = FakeSearch()
        search.gates["old"] = asyncio.Event()
        session = SearchSession(search, debounce_seconds=DEBOUNCE)

        session.set_query("old")
        await asyncio.sleep(DEBOUNCE * 3)
        assert search.calls == ["old"]  # in flight

        session.set_query("new")
        assert await session.wait_settled(timeout=1) is SessionState.SUCCESS
        assert session.results[0].title.endswith("new")

        search.gates["old"].set()
        await asyncio.sleep(DEBOUNCE)
        assert session.state is SessionState.SUCCESS
        assert session.results[0].title.endswith("new")

    async def test_superseded_failure_is_discarded(self):
        search = FakeSearch()
        search.gates["old"] = asyncio.Event()
        session = SearchSession(search, debounce_seconds=DEBOUNCE)
        session.set_query("old")
        await asyncio.sleep(DEBOUNCE * 3)

        session.clear()
        search.error = TransportFailure("late")
        search.gates["old"].set()
        await asyncio.sleep(DEBOUNCE)
        assert session.state is SessionState.IDLE

    async def test_rendered_results_are_highlighted(self):
        results = [_result("p1", title="Laptop Screen Replacement", description="15.6 inch laptop screen")]
        session = SearchSession(lambda q: _resolved(results), debounce_seconds=DEBOUNCE)
        session.set_query("laptop screen")
        await session.wait_settled(timeout=1)

        rendered = session.rendered_results()[0]
        assert [s.text for s in rendered.title if s.is_match] == ["Laptop", "Screen"]
        assert [s.text for s in rendered.description if s.is_match] == ["laptop", "screen"]
        assert "".join(s.text for s in rendered.description) == "15.6 inch laptop screen"

    async def test_on_change_sees_every_transition(self):
        seen = []
        session = SearchSession(FakeSearch(), debounce_seconds=DEBOUNCE, on_change=lambda s: seen.append(s.state))
        session.set_query("l")
        session.set_query("la")
        await session.wait_settled(timeout=1)
        session.clear()
        assert seen == [SessionState.PENDING, SessionState.PENDING, SessionState.SUCCESS, SessionState.IDLE]


async def _resolved(value):
    return value


@pytest.fixture
def asgi_client(seeded):
    app.dependency_overrides[get_session_factory] = lambda: seeded
    yield GlobalSearchClient(base_url="http://test", transport=httpx.ASGITransport(app=app))
    app.dependency_overrides.clear()


class TestSessionAgainstApi:
    async def test_end_to_end_search(self, asgi_client):
        session = SearchSession(asgi_client.search, debounce_seconds=DEBOUNCE)
        for text in ("l", "la", "lap"):
            session.set_query(text)
        assert await session.wait_settled(timeout=5) is SessionState.SUCCESS
        assert len(session.results) == 4
        assert session.results[0].source_type == "product"

        title_spans = session.rendered_results()[0].title
        assert [s.text for s in title_spans if s.is_match] == ["Lap"]
