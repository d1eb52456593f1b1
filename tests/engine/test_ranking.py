from dataclasses import replace
from decimal import Decimal

import pytest

from dealdesk.engine.lender_rules import INACTIVE_REASON
from dealdesk.engine.ranking import rank
from dealdesk.engine.resolver import resolve
from dealdesk.models.lender import BookValueSource, LenderProfile, RateTier


@pytest.fixture
def resolved(canonical_deal, canonical_settings):
    return resolve(canonical_deal, canonical_settings)


def _priced(lender_id: str, min_rate: str | None, min_fico: int = 600) -> LenderProfile:
    return LenderProfile(
        id=lender_id,
        name=lender_id.title(),
        book_value_source=BookValueSource.RETAIL,
        tiers=(RateTier(name="Only", min_fico=min_fico, min_rate=None if min_rate is None else Decimal(min_rate)),),
    )


class TestRankOrdering:
    def test_cheapest_first_regardless_of_input_order(self, resolved, prime_customer):
        a = _priced("alpha", "5.9")
        b = _priced("bravo", "4.5")
        for catalog in ([a, b], [b, a]):
            results = rank(resolved, catalog, prime_customer)
            assert [r.lender_id for r in results] == ["bravo", "alpha"]

    def test_canonical_catalog(self, resolved, lender_catalog, prime_customer):
        results = rank(resolved, lender_catalog, prime_customer)
        assert [r.lender_name for r in results] == ["Lakeshore Credit Union", "Great Lakes Bank"]
        assert all(r.eligible for r in results)

    def test_ineligible_follow_in_input_order(self, resolved, prime_customer):
        catalog = [
            _priced("zulu", "3.0", min_fico=800),
            _priced("alpha", "6.0"),
            _priced("mike", "2.0", min_fico=780),
        ]
        results = rank(resolved, catalog, prime_customer)
        assert [r.lender_id for r in results] == ["alpha", "zulu", "mike"]
        assert [r.eligible for r in results] == [True, False, False]

    def test_unpriced_tiers_sort_after_priced(self, resolved, prime_customer):
        results = rank(resolved, [_priced("none", None), _priced("priced", "8.0")], prime_customer)
        assert [r.lender_id for r in results] == ["priced", "none"]

    def test_equal_rates_keep_catalog_order(self, resolved, prime_customer):
        results = rank(resolved, [_priced("first", "5.0"), _priced("second", "5.0")], prime_customer)
        assert [r.lender_id for r in results] == ["first", "second"]

    def test_inactive_lender_listed_as_ineligible(self, resolved, prime_customer):
        dormant = replace(_priced("dormant", "1.0"), active=False)
        results = rank(resolved, [dormant, _priced("live", "7.0")], prime_customer)
        assert results[0].lender_id == "live"
        assert results[1].rejection_reasons == (INACTIVE_REASON,)


class TestRankTolerance:
    def test_empty_catalog(self, resolved, prime_customer):
        assert rank(resolved, [], prime_customer) == []

    def test_none_catalog(self, resolved, prime_customer):
        assert rank(resolved, None, prime_customer) == []

    @pytest.mark.parametrize("catalog", [42, "lenders", {"id": "x"}])
    def test_malformed_catalog_treated_as_empty(self, resolved, prime_customer, catalog, caplog):
        assert rank(resolved, catalog, prime_customer) == []
        assert "treating as empty" in caplog.text

    def test_malformed_entries_skipped(self, resolved, prime_customer, caplog):
        results = rank(resolved, [None, {"name": "raw record"}, _priced("ok", "5.0")], prime_customer)
        assert [r.lender_id for r in results] == ["ok"]
        assert "malformed lender profile" in caplog.text

    def test_profiles_not_mutated(self, resolved, lender_catalog, prime_customer):
        before = list(lender_catalog)
        rank(resolved, lender_catalog, prime_customer)
        assert lender_catalog == before
