"""HTTP surface tests through FastAPI's TestClient."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from dealdesk.api.app import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def quote_payload() -> dict:
    return {
        "deal": {
            "price": "30000",
            "mileage": 30000,
            "model_year": 2021,
            "trade_book_value": "26000",
            "retail_book_value": "30000",
            "state_fees": "300",
            "sales_tax": "1800",
            "down_payment": "2000",
            "trade_in_value": "5000",
            "trade_in_payoff": "3000",
            "backend_products": "1500",
            "loan_term": 72,
            "interest_rate": "6.99",
        },
        "dealer_settings": {"doc_fee": "500", "cvr_fee": "200", "dealer_state": "MI"},
        "customer": {"credit_score": 720, "monthly_income": "6000"},
        "lenders": [
            {
                "id": "bank-1",
                "name": "Great Lakes Bank",
                "book_value_source": "Trade",
                "tiers": [{"name": "A", "min_fico": 700, "max_fico": 749, "max_ltv": 120, "min_rate": 5.9}],
            },
            {
                "id": "cu-1",
                "name": "Lakeshore Credit Union",
                "book_value_source": "Retail",
                "tiers": [{"name": "Tier 1", "min_fico": 720, "max_ltv": 125, "min_rate": 4.5}],
            },
        ],
    }


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestDealRoutes:
    def test_resolve(self, client, quote_payload):
        resp = client.post("/api/v1/deals/resolve", json=quote_payload)
        assert resp.status_code == 200
        body = resp.json()
        assert Decimal(body["out_the_door_price"]) == Decimal("32800")
        assert Decimal(body["amount_to_finance"]) == Decimal("30300")
        assert body["ltv_band"] == "warn"
        assert body["front_end_gross"] is None

    def test_eligibility_ranked(self, client, quote_payload):
        resp = client.post("/api/v1/deals/eligibility", json=quote_payload)
        assert resp.status_code == 200
        assert [r["lender_id"] for r in resp.json()] == ["cu-1", "bank-1"]

    def test_quote(self, client, quote_payload):
        resp = client.post("/api/v1/deals/quote", json=quote_payload)
        assert resp.status_code == 200
        body = resp.json()
        assert body["calculated_at"]
        assert body["eligibility"][0]["matched_tier"]["name"] == "Tier 1"
        assert body["eligibility"][1]["book_value_source"] == "Trade"

    def test_matched_tier_carries_all_bounds(self, client, quote_payload):
        tier = quote_payload["lenders"][1]["tiers"][0]
        tier.update({"min_year": 2019, "max_mileage": 60000, "max_amount_financed": "40000"})
        body = client.post("/api/v1/deals/quote", json=quote_payload).json()
        matched = body["eligibility"][0]["matched_tier"]
        assert matched["min_year"] == 2019
        assert matched["max_mileage"] == 60000
        assert Decimal(matched["max_amount_financed"]) == Decimal("40000")
        assert matched["min_term"] is None

    def test_quote_without_lenders(self, client, quote_payload):
        quote_payload["lenders"] = []
        resp = client.post("/api/v1/deals/quote", json=quote_payload)
        assert resp.status_code == 200
        assert resp.json()["eligibility"] == []

    def test_rejection_reasons_exposed(self, client, quote_payload):
        quote_payload["customer"]["credit_score"] = 650
        body = client.post("/api/v1/deals/eligibility", json=quote_payload).json()
        assert not body[0]["eligible"]
        assert body[0]["rejection_reasons"] == ["FICO 650 below tier min 700"]


class TestValidationBoundary:
    def test_negative_price_rejected(self, client, quote_payload):
        quote_payload["deal"]["price"] = "-1"
        assert client.post("/api/v1/deals/resolve", json=quote_payload).status_code == 422

    def test_term_out_of_range(self, client, quote_payload):
        quote_payload["deal"]["loan_term"] = 120
        assert client.post("/api/v1/deals/resolve", json=quote_payload).status_code == 422

    def test_inverted_fico_range(self, client, quote_payload):
        quote_payload["lenders"][0]["tiers"][0]["min_fico"] = 760
        assert client.post("/api/v1/deals/quote", json=quote_payload).status_code == 422

    def test_ltv_thresholds_out_of_order(self, client, quote_payload):
        quote_payload["dealer_settings"].update({"ltv_warn": "130", "ltv_danger": "120"})
        assert client.post("/api/v1/deals/resolve", json=quote_payload).status_code == 422

    def test_ltv_warn_above_default_danger(self, client, quote_payload):
        quote_payload["dealer_settings"]["ltv_warn"] = "130"
        assert client.post("/api/v1/deals/resolve", json=quote_payload).status_code == 422

    def test_ltv_thresholds_in_order(self, client, quote_payload):
        quote_payload["dealer_settings"].update({"ltv_warn": "110", "ltv_danger": "120", "ltv_critical": "130"})
        body = client.post("/api/v1/deals/resolve", json=quote_payload).json()
        assert body["ltv_band"] == "warn"

    def test_unknown_lender_field_rejected(self, client, quote_payload):
        quote_payload["lenders"][0]["favorite_color"] = "blue"
        assert client.post("/api/v1/deals/quote", json=quote_payload).status_code == 422

    def test_engine_error_mapped_to_422(self, client, quote_payload):
        # Passes the schema, but there is no tax table entry for the state
        del quote_payload["deal"]["sales_tax"]
        quote_payload["deal"]["registration_state"] = "ZZ"
        resp = client.post("/api/v1/deals/resolve", json=quote_payload)
        assert resp.status_code == 422
        assert resp.json()["error"] == "MalformedDealInputsError"


class TestPaymentRoutes:
    def test_monthly(self, client):
        resp = client.post(
            "/api/v1/payments/monthly",
            json={"principal": "30000", "annual_rate": "5", "term_months": 60},
        )
        assert Decimal(resp.json()["monthly_payment"]) == Decimal("566.14")

    def test_loan_amount(self, client):
        resp = client.post(
            "/api/v1/payments/loan-amount",
            json={"monthly_payment": "500", "annual_rate": "0", "term_months": 60},
        )
        assert Decimal(resp.json()["loan_amount"]) == Decimal("30000")

    def test_schedule(self, client):
        resp = client.post(
            "/api/v1/payments/schedule",
            json={"principal": "6000", "annual_rate": "0", "term_months": 12},
        )
        body = resp.json()
        assert len(body["payments"]) == 12
        assert Decimal(body["payments"][-1]["balance"]) == Decimal("0")
