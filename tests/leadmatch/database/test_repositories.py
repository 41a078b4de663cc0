"""
Unit tests para los repositorios de Supabase
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from leadmatch.config import Settings
from leadmatch.database import (
    AlertRepository,
    LeadRepository,
    PropertyRepository,
    SupabaseClient,
    get_supabase_client,
)
from leadmatch.models import Alert

SINCE = datetime(2026, 3, 1, tzinfo=timezone.utc)


def make_alert(lead_id: str) -> Alert:
    return Alert(
        agency_id="agency-1",
        title="t",
        message="m",
        link=f"/dashboard/leads/{lead_id}",
        property_id="prop-1",
        lead_id=lead_id,
        match_score=75,
    )


class TestPropertyRepository:
    """Tests de consultas sobre propiedades"""

    def test_find_recent_duplicates_with_phone(self, fake_supabase):
        client = fake_supabase({"properties": [{"id": "old"}]})
        repo = PropertyRepository(client)

        rows = repo.find_recent_duplicates(
            agency_id="agency-1",
            address="Herzl 10",
            price=2_000_000,
            since=SINCE,
            seller_phone="050-1234567",
            exclude_id="prop-1",
        )

        assert rows == [{"id": "old"}, {"id": "old"}]
        phone_query, address_query = client.queries
        assert ("eq", "seller_phone", "050-1234567") in phone_query.calls
        assert ("gte", "created_at", SINCE.isoformat()) in phone_query.calls
        assert ("neq", "id", "prop-1") in phone_query.calls
        assert ("eq", "address", "Herzl 10") in address_query.calls
        assert ("eq", "price", 2_000_000) in address_query.calls
        assert ("eq", "agency_id", "agency-1") in address_query.calls
        assert ("limit", 1) in address_query.calls

    def test_find_recent_duplicates_without_phone(self, fake_supabase):
        client = fake_supabase()
        repo = PropertyRepository(client)

        rows = repo.find_recent_duplicates(
            agency_id="agency-1", address="Herzl 10", price=1, since=SINCE
        )

        assert rows == []
        assert len(client.queries) == 1
        assert not any(call[0] == "neq" for call in client.queries[0].calls)

    def test_find_recent_duplicates_without_address(self, fake_supabase):
        """Sin dirección solo se busca por teléfono"""
        client = fake_supabase({"properties": [{"id": "old"}]})
        repo = PropertyRepository(client)

        rows = repo.find_recent_duplicates(
            agency_id="agency-1",
            address=None,
            price=2_000_000,
            since=SINCE,
            seller_phone="050-1234567",
        )

        assert rows == [{"id": "old"}]
        (query,) = client.queries
        assert ("eq", "seller_phone", "050-1234567") in query.calls
        assert not any(call[:2] == ("eq", "address") for call in query.calls)

    def test_get_by_id(self, fake_supabase):
        repo = PropertyRepository(fake_supabase({"properties": [{"id": "p1"}]}))

        assert repo.get_by_id("p1") == {"id": "p1"}

    def test_get_by_id_missing(self, fake_supabase):
        repo = PropertyRepository(fake_supabase())

        assert repo.get_by_id("p1") is None

    def test_get_active(self, fake_supabase):
        client = fake_supabase({"properties": [{"id": "p1"}]})

        assert PropertyRepository(client).get_active("agency-1") == [{"id": "p1"}]
        assert ("eq", "status", "active") in client.queries[0].calls


class TestLeadRepository:
    """Tests de consultas sobre leads"""

    def test_get_by_agency(self, fake_supabase):
        client = fake_supabase({"leads": [{"id": "l1"}, {"id": "l2"}]})

        rows = LeadRepository(client).get_by_agency("agency-1")

        assert [r["id"] for r in rows] == ["l1", "l2"]
        assert client.queries[0].table_name == "leads"
        assert ("eq", "agency_id", "agency-1") in client.queries[0].calls


class TestAlertRepository:
    """Tests de escritura de alertas"""

    def test_create_many_upserts_single_batch(self, fake_supabase):
        client = fake_supabase({"alerts": [{"id": "a1"}, {"id": "a2"}]})

        rows = AlertRepository(client).create_many([make_alert("l1"), make_alert("l2")])

        assert len(rows) == 2
        (query,) = client.queries
        name, payload, options = query.calls[0]
        assert name == "upsert"
        assert options == {"on_conflict": "property_id,lead_id"}
        assert [p["lead_id"] for p in payload] == ["l1", "l2"]
        assert isinstance(payload[0]["created_at"], str)

    def test_create_many_retry_does_not_duplicate(self, fake_supabase):
        """Un reintento tras un fallo transitorio vuelve a hacer upsert, nunca insert"""
        client = fake_supabase({"alerts": [{"id": "a1"}]})
        repo = AlertRepository(client)
        original_table = client.table
        attempts = []

        def flaky_table(name):
            attempts.append(name)
            if len(attempts) == 1:
                raise ConnectionError("timeout")
            return original_table(name)

        client.table = flaky_table

        with patch("time.sleep"):
            rows = repo.create_many([make_alert("l1")])

        assert rows == [{"id": "a1"}]
        assert len(attempts) == 2
        assert [q.calls[0][0] for q in client.queries] == ["upsert"]

    def test_create_many_empty(self, fake_supabase):
        client = fake_supabase()

        assert AlertRepository(client).create_many([]) == []
        assert client.queries == []


class TestSupabaseClient:
    """Tests de la creación del cliente"""

    def test_missing_credentials_raise(self):
        get_supabase_client.cache_clear()
        settings = Settings(_env_file=None, supabase_url="", supabase_key="")

        with patch("leadmatch.database.supabase_client.get_settings", return_value=settings):
            with pytest.raises(ValueError):
                get_supabase_client()

        get_supabase_client.cache_clear()

    def test_table_delegates_to_client(self):
        raw = MagicMock()

        SupabaseClient(raw).table("alerts")

        raw.table.assert_called_once_with("alerts")
