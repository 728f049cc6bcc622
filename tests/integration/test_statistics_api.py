"""
Integration tests for the statement and statistics endpoints.

Seeds four transactions over two months through the API and reads them
back grouped, summarized and as a month list.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient

from ledger_data import ACCOUNT, GROCERIES, HEADERS, SALARY


@pytest_asyncio.fixture
async def seeded_client(client: AsyncClient) -> AsyncClient:
    rows = [
        (SALARY, 200, "2024-01-05", "salary"),
        (SALARY, 50, "2024-01-20", "refund"),
        (GROCERIES, 30, "2024-01-20", "market"),
        (GROCERIES, 90, "2024-02-01", "rent share"),
    ]
    for category_id, amount, day, description in rows:
        response = await client.post(
            "/v1/transactions",
            json={
                "account_token": ACCOUNT,
                "category_id": category_id,
                "amount": amount,
                "description": description,
                "date": day,
            },
            headers=HEADERS,
        )
        assert response.status_code == 201
    return client


class TestStatistics:
    """Tests for GET /v1/transactions/statistics/{account_token}."""

    @pytest.mark.asyncio
    async def test_all_time_statistics(self, seeded_client: AsyncClient):
        response = await seeded_client.get(f"/v1/transactions/statistics/{ACCOUNT}", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["total_transactions"] == 4
        assert data["largest_credit"] == 200.0
        assert data["largest_debit"] == 90.0
        assert data["totals"] == {"credit": 250.0, "debit": 120.0, "difference": 130.0}
        assert data["start_date"] == "2024-01-05"
        assert [d["date"] for d in data["daily_totals"]] == ["2024-01-05", "2024-01-20", "2024-02-01"]
        assert data["daily_totals"][1]["total"] == 20.0

        credit = data["credit_category_breakdown"]
        assert credit == [
            {"name": "Salary", "count": 2, "total": 250.0, "percentage": 100.0, "color": "#16a34a"}
        ]

    @pytest.mark.asyncio
    async def test_month_statistics(self, seeded_client: AsyncClient):
        response = await seeded_client.get(
            f"/v1/transactions/statistics/{ACCOUNT}",
            params={"month": 2, "year": 2024},
            headers=HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_transactions"] == 1
        assert data["totals"]["debit"] == 90.0
        assert data["start_date"] == "2024-02-01"
        assert data["end_date"] == "2024-02-29"

    @pytest.mark.asyncio
    async def test_empty_month_still_reports_its_range(self, seeded_client: AsyncClient):
        response = await seeded_client.get(
            f"/v1/transactions/statistics/{ACCOUNT}",
            params={"month": 6, "year": 2023},
            headers=HEADERS,
        )

        data = response.json()
        assert data["total_transactions"] == 0
        assert data["start_date"] == "2023-06-01"
        assert data["end_date"] == "2023-06-30"

    @pytest.mark.asyncio
    async def test_repeated_calls_are_identical(self, seeded_client: AsyncClient):
        url = f"/v1/transactions/statistics/{ACCOUNT}"

        first = await seeded_client.get(url, params={"month": 1, "year": 2024}, headers=HEADERS)
        second = await seeded_client.get(url, params={"month": 1, "year": 2024}, headers=HEADERS)

        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_month_without_year_is_rejected(self, seeded_client: AsyncClient):
        response = await seeded_client.get(
            f"/v1/transactions/statistics/{ACCOUNT}",
            params={"month": 2},
            headers=HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_FAILED"

    @pytest.mark.asyncio
    async def test_month_out_of_range_is_rejected(self, seeded_client: AsyncClient):
        response = await seeded_client.get(
            f"/v1/transactions/statistics/{ACCOUNT}",
            params={"month": 13, "year": 2024},
            headers=HEADERS,
        )

        assert response.status_code == 400


class TestGroupedStatement:
    """Tests for GET /v1/transactions/dto/{account_token}."""

    @pytest.mark.asyncio
    async def test_groups_newest_month_first(self, seeded_client: AsyncClient):
        response = await seeded_client.get(f"/v1/transactions/dto/{ACCOUNT}", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert [(g["year"], g["month"]) for g in data["groups"]] == [(2024, 2), (2024, 1)]

        january = data["groups"][1]["transactions"]
        assert [tx["date"] for tx in january] == ["2024-01-20", "2024-01-20", "2024-01-05"]
        # Same-day rows: most recently inserted first
        assert [tx["description"] for tx in january[:2]] == ["market", "refund"]
        assert data["totals"]["difference"] == 130.0

    @pytest.mark.asyncio
    async def test_month_filter(self, seeded_client: AsyncClient):
        response = await seeded_client.get(
            f"/v1/transactions/dto/{ACCOUNT}",
            params={"month": 1, "year": 2024},
            headers=HEADERS,
        )

        data = response.json()
        assert len(data["groups"]) == 1
        assert data["totals"] == {"credit": 250.0, "debit": 30.0, "difference": 220.0}


class TestAvailableMonths:
    """Tests for GET /v1/transactions/months/{account_token}."""

    @pytest.mark.asyncio
    async def test_months_with_counts(self, seeded_client: AsyncClient):
        response = await seeded_client.get(f"/v1/transactions/months/{ACCOUNT}", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["months"] == [
            {"year": 2024, "month": 2, "count": 1},
            {"year": 2024, "month": 1, "count": 3},
        ]

    @pytest.mark.asyncio
    async def test_no_transactions(self, client: AsyncClient):
        response = await client.get(f"/v1/transactions/months/{ACCOUNT}", headers=HEADERS)

        assert response.json()["months"] == []
