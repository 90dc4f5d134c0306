"""
Tests for the daily entry lifecycle.

Covers:
- POST /entries/: create, duplicate date -> 409
- GET  /entries/: newest first, pagination, owner scoping
- GET/PUT/DELETE /entries/{id}: 404 before 403, partial update
- GET  /entries/search: case-insensitive OR match, empty query, literal wildcards
- GET  /entries/filter: inclusive date range, inverted range -> 422
"""

from datetime import date
from uuid import uuid4

import pytest

from app.api.deps import MAX_PAGE
from app.errors import ConflictError
from app.schemas.entries import DailyEntryCreate
from app.schemas.pagination import PageParams
from app.services import entries as entry_service


async def _create(client, headers, entry_date: str, **fields):
    r = await client.post("/entries/", json={"entry_date": entry_date, **fields}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


# ---------------------------------------------------------------------------
# Create / list
# ---------------------------------------------------------------------------

class TestCreate:
    async def test_create_returns_entry(self, client, alice_id, alice_headers):
        r = await client.post(
            "/entries/",
            json={
                "entry_date": "2024-01-01",
                "yesterday_work": "wrote parser",
                "today_plan": "review",
            },
            headers=alice_headers,
        )
        assert r.status_code == 201
        body = r.json()
        assert body["entry_date"] == "2024-01-01"
        assert body["yesterday_work"] == "wrote parser"
        assert body["today_plan"] == "review"
        assert body["blockers"] is None
        assert body["user_id"] == str(alice_id)
        assert body["created_at"] is not None
        assert body["updated_at"] is not None

    async def test_duplicate_date_conflicts(self, client, alice_headers):
        await _create(client, alice_headers, "2024-01-01", yesterday_work="first")
        r = await client.post(
            "/entries/",
            json={"entry_date": "2024-01-01", "yesterday_work": "second"},
            headers=alice_headers,
        )
        assert r.status_code == 409
        body = r.json()
        assert body["code"] == "CONFLICT"
        assert body["details"]["entry_date"] == "2024-01-01"

        listing = await client.get("/entries/", headers=alice_headers)
        assert listing.json()["total"] == 1
        assert listing.json()["items"][0]["yesterday_work"] == "first"

    async def test_same_date_for_different_owners_is_allowed(self, client, alice_headers, bob_headers):
        await _create(client, alice_headers, "2024-01-01")
        await _create(client, bob_headers, "2024-01-01")

    async def test_missing_entry_date_rejected(self, client, alice_headers):
        r = await client.post("/entries/", json={"yesterday_work": "x"}, headers=alice_headers)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    async def test_service_translates_unique_violation(self, db, alice_id):
        data = DailyEntryCreate(entry_date=date(2024, 3, 4), blockers="none")
        await entry_service.create_entry(db, alice_id, data)
        with pytest.raises(ConflictError):
            await entry_service.create_entry(db, alice_id, data)


class TestList:
    async def test_newest_first(self, client, alice_headers):
        for d in ("2024-01-02", "2024-01-05", "2024-01-01"):
            await _create(client, alice_headers, d)
        r = await client.get("/entries/", headers=alice_headers)
        assert r.status_code == 200
        dates = [e["entry_date"] for e in r.json()["items"]]
        assert dates == ["2024-01-05", "2024-01-02", "2024-01-01"]

    async def test_pagination(self, client, alice_headers):
        for day in range(1, 6):
            await _create(client, alice_headers, f"2024-02-{day:02d}")
        r = await client.get("/entries/?page=1&size=2", headers=alice_headers)
        body = r.json()
        assert body["total"] == 5
        assert body["page"] == 1
        assert body["size"] == 2
        assert [e["entry_date"] for e in body["items"]] == ["2024-02-03", "2024-02-02"]

    async def test_size_capped_at_maximum(self, client, alice_headers):
        r = await client.get("/entries/?size=100000", headers=alice_headers)
        assert r.status_code == 200
        assert r.json()["size"] == 100

    @pytest.mark.parametrize(
        "path",
        ["/entries/", "/entries/search", "/summaries/weekly/", "/reports/monthly/"],
    )
    async def test_page_beyond_offset_range_rejected(self, client, alice_headers, path):
        r = await client.get(f"{path}?page=99999999999999999999", headers=alice_headers)
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert any("page" in e["field"] for e in body["details"]["errors"])

    async def test_last_page_index_is_accepted(self, client, alice_headers):
        await _create(client, alice_headers, "2024-01-01")
        r = await client.get(f"/entries/?page={MAX_PAGE}&size=100000", headers=alice_headers)
        assert r.status_code == 200
        assert r.json()["items"] == []
        assert r.json()["total"] == 1

    async def test_only_own_entries_listed(self, client, alice_headers, bob_headers):
        await _create(client, alice_headers, "2024-01-01")
        r = await client.get("/entries/", headers=bob_headers)
        assert r.json() == {"items": [], "total": 0, "page": 0, "size": 20}

    async def test_requires_authentication(self, client):
        r = await client.get("/entries/")
        assert r.status_code == 401
        assert r.json()["code"] == "UNAUTHENTICATED"


# ---------------------------------------------------------------------------
# Fetch by id: existence first, then ownership
# ---------------------------------------------------------------------------

class TestOwnership:
    async def test_owner_can_get(self, client, alice_headers):
        entry = await _create(client, alice_headers, "2024-01-01", blockers="none")
        r = await client.get(f"/entries/{entry['id']}", headers=alice_headers)
        assert r.status_code == 200
        assert r.json()["blockers"] == "none"

    async def test_unknown_id_is_not_found(self, client, alice_headers):
        r = await client.get(f"/entries/{uuid4()}", headers=alice_headers)
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    async def test_other_owner_is_denied(self, client, alice_headers, bob_headers, method):
        entry = await _create(client, alice_headers, "2024-01-01", yesterday_work="secret")
        url = f"/entries/{entry['id']}"
        if method == "put":
            r = await client.put(url, json={"yesterday_work": "hijacked"}, headers=bob_headers)
        else:
            r = await getattr(client, method)(url, headers=bob_headers)
        assert r.status_code == 403
        assert r.json()["code"] == "ACCESS_DENIED"

        # Untouched and still visible to the owner
        r = await client.get(url, headers=alice_headers)
        assert r.status_code == 200
        assert r.json()["yesterday_work"] == "secret"

    @pytest.mark.parametrize("method", ["put", "delete"])
    async def test_unknown_id_is_not_found_for_mutations(self, client, bob_headers, method):
        url = f"/entries/{uuid4()}"
        if method == "put":
            r = await client.put(url, json={"blockers": "x"}, headers=bob_headers)
        else:
            r = await client.delete(url, headers=bob_headers)
        assert r.status_code == 404


class TestUpdateDelete:
    async def test_update_applies_only_sent_fields(self, client, alice_headers):
        entry = await _create(
            client, alice_headers, "2024-01-01", yesterday_work="a", today_plan="b", blockers="c"
        )
        r = await client.put(
            f"/entries/{entry['id']}",
            json={"today_plan": "new plan", "blockers": None},
            headers=alice_headers,
        )
        assert r.status_code == 200
        body = r.json()
        assert body["yesterday_work"] == "a"
        assert body["today_plan"] == "new plan"
        assert body["blockers"] is None
        assert body["entry_date"] == "2024-01-01"
        assert body["updated_at"] >= entry["updated_at"]

    async def test_update_ignores_entry_date(self, client, alice_headers):
        entry = await _create(client, alice_headers, "2024-01-01")
        r = await client.put(
            f"/entries/{entry['id']}",
            json={"entry_date": "2024-06-01", "blockers": "x"},
            headers=alice_headers,
        )
        assert r.status_code == 200
        assert r.json()["entry_date"] == "2024-01-01"

    async def test_delete(self, client, alice_headers):
        entry = await _create(client, alice_headers, "2024-01-01")
        r = await client.delete(f"/entries/{entry['id']}", headers=alice_headers)
        assert r.status_code == 204
        r = await client.get(f"/entries/{entry['id']}", headers=alice_headers)
        assert r.status_code == 404

    async def test_date_reusable_after_delete(self, client, alice_headers):
        entry = await _create(client, alice_headers, "2024-01-01")
        await client.delete(f"/entries/{entry['id']}", headers=alice_headers)
        await _create(client, alice_headers, "2024-01-01")


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class TestSearch:
    @pytest.fixture
    async def seeded(self, client, alice_headers, bob_headers):
        await _create(client, alice_headers, "2024-01-01", yesterday_work="Fixed the LOGIN bug")
        await _create(client, alice_headers, "2024-01-02", today_plan="pair on login page")
        await _create(client, alice_headers, "2024-01-03", blockers="waiting on Login review")
        await _create(client, alice_headers, "2024-01-04", yesterday_work="docs")
        await _create(client, alice_headers, "2024-01-05")
        await _create(client, bob_headers, "2024-01-01", yesterday_work="login for bob")

    async def test_case_insensitive_across_all_fields(self, client, alice_headers, seeded):
        r = await client.get("/entries/search?query=login", headers=alice_headers)
        assert r.status_code == 200
        dates = [e["entry_date"] for e in r.json()["items"]]
        assert dates == ["2024-01-03", "2024-01-02", "2024-01-01"]

    async def test_empty_query_matches_everything(self, client, alice_headers, seeded):
        r = await client.get("/entries/search?query=", headers=alice_headers)
        assert r.json()["total"] == 5

    async def test_missing_query_matches_everything(self, client, alice_headers, seeded):
        r = await client.get("/entries/search", headers=alice_headers)
        assert r.json()["total"] == 5

    async def test_blank_query_matches_everything(self, client, alice_headers, seeded):
        r = await client.get("/entries/search", params={"query": "   "}, headers=alice_headers)
        assert r.json()["total"] == 5

    async def test_whitespace_is_part_of_the_match(self, client, alice_headers, seeded):
        r = await client.get("/entries/search", params={"query": "bug "}, headers=alice_headers)
        assert r.json()["items"] == []

        r = await client.get("/entries/search", params={"query": " bug"}, headers=alice_headers)
        assert [e["entry_date"] for e in r.json()["items"]] == ["2024-01-01"]

    async def test_no_match(self, client, alice_headers, seeded):
        r = await client.get("/entries/search?query=kubernetes", headers=alice_headers)
        assert r.json()["items"] == []

    async def test_wildcards_are_literal(self, client, alice_headers):
        await _create(client, alice_headers, "2024-01-01", yesterday_work="coverage at 100% now")
        await _create(client, alice_headers, "2024-01-02", yesterday_work="coverage at 1000 lines")
        r = await client.get("/entries/search", params={"query": "100%"}, headers=alice_headers)
        assert [e["entry_date"] for e in r.json()["items"]] == ["2024-01-01"]

        r = await client.get("/entries/search", params={"query": "at_1"}, headers=alice_headers)
        assert r.json()["items"] == []


# ---------------------------------------------------------------------------
# Date-range filter
# ---------------------------------------------------------------------------

class TestFilter:
    @pytest.fixture
    async def seeded(self, client, alice_headers):
        for d in ("2024-01-01", "2024-01-05", "2024-01-10"):
            await _create(client, alice_headers, d)

    async def test_range_constrains_results(self, client, alice_headers, seeded):
        r = await client.get(
            "/entries/filter?start_date=2024-01-02&end_date=2024-01-09", headers=alice_headers
        )
        assert r.status_code == 200
        assert [e["entry_date"] for e in r.json()["items"]] == ["2024-01-05"]
        assert r.json()["total"] == 1

    async def test_bounds_are_inclusive(self, client, alice_headers, seeded):
        r = await client.get(
            "/entries/filter?start_date=2024-01-01&end_date=2024-01-05", headers=alice_headers
        )
        assert [e["entry_date"] for e in r.json()["items"]] == ["2024-01-05", "2024-01-01"]

    async def test_inverted_range_rejected(self, client, alice_headers, seeded):
        r = await client.get(
            "/entries/filter?start_date=2024-01-10&end_date=2024-01-01", headers=alice_headers
        )
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    async def test_malformed_date_rejected(self, client, alice_headers):
        r = await client.get(
            "/entries/filter?start_date=yesterday&end_date=2024-01-01", headers=alice_headers
        )
        assert r.status_code == 422
        fields = [e["field"] for e in r.json()["details"]["errors"]]
        assert any("start_date" in f for f in fields)

    async def test_service_filter(self, db, alice_id):
        for day in (1, 15, 31):
            await entry_service.create_entry(
                db, alice_id, DailyEntryCreate(entry_date=date(2024, 1, day))
            )
        items, total = await entry_service.filter_entries(
            db, alice_id, date(2024, 1, 2), date(2024, 1, 31), PageParams(page=0, size=10)
        )
        assert total == 2
        assert [e.entry_date for e in items] == [date(2024, 1, 31), date(2024, 1, 15)]
