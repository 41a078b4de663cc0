"""
Unit tests para la detección de duplicados
"""
from datetime import timedelta

from leadmatch.matching import MatchingPolicy, is_duplicate
from leadmatch.models import PropertyRecord


class TestIsDuplicate:
    """Tests de las reglas de teléfono y dirección + precio"""

    def test_same_phone_within_window(self, make_property, now):
        """Ingresada hace 10 días con el mismo teléfono"""
        existing = make_property(
            id="old", seller_phone="050-1234567", address="Other 1", created_at=now - timedelta(days=10)
        )
        new = make_property(id="new", seller_phone="050-1234567")

        assert is_duplicate(new, "agency-1", [existing], now) is True

    def test_same_phone_outside_window(self, make_property, now):
        """Ingresada hace 15 días: ya no es duplicada"""
        existing = make_property(
            id="old", seller_phone="050-1234567", address="Other 1", created_at=now - timedelta(days=15)
        )
        new = make_property(id="new", seller_phone="050-1234567")

        assert is_duplicate(new, "agency-1", [existing], now) is False

    def test_window_boundary_is_inclusive(self, make_property, now):
        existing = make_property(
            id="old", seller_phone="050-1234567", address="Other 1", created_at=now - timedelta(days=14)
        )
        new = make_property(id="new", seller_phone="050-1234567")

        assert is_duplicate(new, "agency-1", [existing], now) is True

    def test_same_address_and_price(self, make_property, now):
        existing = make_property(id="old", created_at=now - timedelta(days=2))
        new = make_property(id="new")

        assert is_duplicate(new, "agency-1", [existing], now) is True

    def test_same_address_different_price(self, make_property, now):
        existing = make_property(id="old", price=1_900_000, created_at=now - timedelta(days=2))
        new = make_property(id="new", price=2_000_000)

        assert is_duplicate(new, "agency-1", [existing], now) is False

    def test_other_agency_is_ignored(self, make_property, now):
        existing = make_property(id="old", agency_id="agency-2", created_at=now - timedelta(days=2))
        new = make_property(id="new")

        assert is_duplicate(new, "agency-1", [existing], now) is False

    def test_missing_phone_does_not_match_missing_phone(self, make_property, now):
        existing = make_property(
            id="old", seller_phone=None, address="Other 1", created_at=now - timedelta(days=2)
        )
        new = make_property(id="new", seller_phone="")

        assert is_duplicate(new, "agency-1", [existing], now) is False

    def test_own_record_is_ignored(self, make_property, now):
        """El trigger corre con la propiedad ya guardada"""
        itself = make_property(id="prop-1", seller_phone="050-1234567")

        assert is_duplicate(itself, "agency-1", [itself], now) is False

    def test_candidate_without_created_at_is_ignored(self, make_property, now):
        existing = make_property(id="old", created_at=None)
        new = make_property(id="new")

        assert is_duplicate(new, "agency-1", [existing], now) is False

    def test_no_candidates(self, make_property, now):
        assert is_duplicate(make_property(), "agency-1", [], now) is False

    def test_custom_window(self, make_property, now):
        existing = make_property(id="old", created_at=now - timedelta(days=10))
        new = make_property(id="new")

        assert is_duplicate(new, "agency-1", [existing], now, MatchingPolicy(dedup_window_days=7)) is False

    def test_draft_candidate_matches_by_phone(self, now, make_property):
        """La candidata es un borrador sin tipo, precio ni dirección"""
        draft = PropertyRecord(
            id="draft",
            agency_id="agency-1",
            seller_phone="050-1234567",
            created_at=now - timedelta(days=3),
        )
        new = make_property(id="new", seller_phone="050-1234567")

        assert is_duplicate(new, "agency-1", [draft], now) is True

    def test_missing_address_does_not_match_missing_address(self, now, make_property):
        draft = PropertyRecord(
            id="draft", agency_id="agency-1", price=2_000_000, created_at=now - timedelta(days=3)
        )
        new = make_property(id="new", address=None)

        assert is_duplicate(new, "agency-1", [draft], now) is False
