"""Shared test configuration: app factory, fake Supabase, fake completions."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from ideaboard import create_app
from ideaboard.services import ai, supabase_client
from ideaboard.utils.cache import clear_submission_cache


class FakeQuery:
    """Chainable stand-in for a supabase-py table query."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.filters: list[tuple[str, object]] = []
        self.ordering: tuple[str, bool] | None = None
        self.payload: dict | None = None

    def select(self, columns: str = "*"):
        return self

    def eq(self, column: str, value):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.ordering = (column, desc)
        return self

    def insert(self, data: dict):
        self.payload = data
        return self

    def execute(self):
        self.db.executed.append(self)
        if self.db.fail_with is not None:
            raise self.db.fail_with

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.payload is not None:
            if self.db.empty_insert:
                return SimpleNamespace(data=[])
            row = self.db.make_row(self.payload)
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        result = [r for r in rows if all(r.get(c) == v for c, v in self.filters)]
        if self.ordering:
            column, desc = self.ordering
            result.sort(key=lambda r: r.get(column) or "", reverse=desc)
        return SimpleNamespace(data=[dict(r) for r in result])


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.executed: list[FakeQuery] = []
        self.fail_with: Exception | None = None
        self.empty_insert = False
        self._counter = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def make_row(self, data: dict) -> dict:
        self._counter += 1
        row = {
            "id": str(self._counter),
            "created_at": f"2026-10-{self._counter:02d}T12:00:00+00:00",
        }
        row.update(data)
        return row

    def seed(self, **fields) -> dict:
        """Add a visible idea row; keyword args override the defaults."""
        data = {
            "title": "Smart compost sorter",
            "description": "Camera that sorts kitchen scraps for composting.",
            "category": "Lifestyle",
            "tags": ["AI", "Computer Vision"],
            "author_name": None,
            "is_approved": True,
            "is_nsfw": False,
        }
        data.update(fields)
        row = self.make_row(data)
        self.tables.setdefault("ai_ideas", []).append(row)
        return row


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    """Never use real keys, and start every test with empty caches."""
    monkeypatch.setenv("APP_CONFIG", "ideaboard.config.TestConfig")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    ai._clear_router_cache()
    clear_submission_cache()
    yield
    ai._clear_router_cache()
    clear_submission_cache()


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_db(app, monkeypatch):
    """Install a fake Supabase client for both the anon and admin slots."""
    db = FakeSupabase()
    monkeypatch.setattr(supabase_client, "_supabase_client", db)
    monkeypatch.setattr(supabase_client, "_supabase_admin", db)
    return db


@pytest.fixture
def no_db(app, monkeypatch):
    monkeypatch.setattr(supabase_client, "_supabase_client", None)
    monkeypatch.setattr(supabase_client, "_supabase_admin", None)


@pytest.fixture
def fake_completion(monkeypatch):
    """Replace the completion call; set ``.reply`` or ``.error`` per test."""
    state = SimpleNamespace(reply=None, error=None, calls=[])

    def _complete(messages, temperature=0.3, max_tokens=200):
        state.calls.append({"messages": messages, "temperature": temperature, "max_tokens": max_tokens})
        if state.error is not None:
            raise state.error
        return state.reply

    monkeypatch.setattr(ai, "complete_chat", _complete)
    return state


@pytest.fixture
def fake_router(monkeypatch):
    """Pre-seed the router cache with an object exposing completion()."""
    state = SimpleNamespace(content="ok", model="gpt-4o-mini", error=None, calls=[])

    class _Router:
        def completion(self, **kwargs):
            state.calls.append(kwargs)
            if state.error is not None:
                raise state.error
            message = SimpleNamespace(content=state.content)
            return SimpleNamespace(choices=[SimpleNamespace(message=message)], model=state.model)

    monkeypatch.setattr(ai, "_ROUTER_CACHE", _Router())
    return state
