"""
Fixtures compartidas para los tests de leadmatch.
"""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from leadmatch.matching import MatchingPolicy
from leadmatch.models import Lead, Property

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def policy():
    return MatchingPolicy()


@pytest.fixture
def make_property():
    def _make(**overrides) -> Property:
        data = {
            "id": "prop-1",
            "agency_id": "agency-1",
            "address": "Herzl 10",
            "city": "Tel Aviv",
            "price": 2_000_000,
            "type": "sale",
            "rooms": 4,
            "created_at": NOW,
        }
        data.update(overrides)
        return Property.model_validate(data)

    return _make


@pytest.fixture
def make_lead():
    def _make(requirements=None, **overrides) -> Lead:
        data = {
            "id": "lead-1",
            "agency_id": "agency-1",
            "name": "Dana Levi",
            "phone": "050-0000000",
            "status": "new",
            "updated_at": NOW - timedelta(days=3),
            "requirements": requirements or {},
        }
        data.update(overrides)
        return Lead.model_validate(data)

    return _make


class FakeQuery:
    """Query builder de Supabase que registra las llamadas encadenadas."""

    def __init__(self, table: str, rows: list):
        self.table_name = table
        self.rows = rows
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, *args, kwargs) if kwargs else (name, *args))
            return self

        return method

    def execute(self):
        return SimpleNamespace(data=self.rows)


class FakeSupabase:
    """Reemplazo en memoria de SupabaseClient para los repositorios."""

    def __init__(self, rows=None):
        self.rows = rows or {}
        self.queries = []

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(name, self.rows.get(name, []))
        self.queries.append(query)
        return query


@pytest.fixture
def fake_supabase():
    return FakeSupabase
