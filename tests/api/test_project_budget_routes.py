"""Project Budget CRUD — route-level behavior against an in-memory database.

Invariants:
    - Non-numeric or out-of-range (int32) path ids → 400 on every id-bearing endpoint
    - Create: missing fields → 400 naming them; wrong types → 400; duplicate id → 409
    - Update/delete of unknown ids → 404
    - Full lifecycle: create → read → replace → read → delete → read (404)
"""

import pytest

ID_ENDPOINTS = [
    ("GET", None),
    ("PUT", {"projectName": "X", "year": 2025, "currency": "USD"}),
    ("DELETE", None),
]


# -- Status --------------------------------------------------------------------

async def test_ok_returns_true(client):
    res = await client.get("/api/ok")
    assert res.status_code == 200
    assert res.json() == {"ok": True}


async def test_unknown_route_returns_404(client):
    res = await client.get("/nonexistent")
    assert res.status_code == 404


# -- Identifier parsing --------------------------------------------------------

@pytest.mark.parametrize("method,body", ID_ENDPOINTS)
@pytest.mark.parametrize("raw_id", ["abc", "invalid-id", "1.5", "12abc"])
async def test_non_numeric_id_returns_400(client, method, body, raw_id):
    res = await client.request(
        method, f"/api/project/budget/{raw_id}", json=body,
    )
    assert res.status_code == 400
    payload = res.json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "INVALID_IDENTIFIER"


@pytest.mark.parametrize("method,body", ID_ENDPOINTS)
async def test_id_outside_int32_returns_400(client, method, body):
    res = await client.request(
        method, "/api/project/budget/99999999999999999999", json=body,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_IDENTIFIER"


# -- Read ----------------------------------------------------------------------

async def test_get_returns_full_row(client, make_payload):
    await client.post("/api/project/budget", json=make_payload())

    res = await client.get("/api/project/budget/10001")

    assert res.status_code == 200
    assert res.json() == make_payload()


async def test_get_unknown_id_returns_404(client):
    res = await client.get("/api/project/budget/999999")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


# -- Create --------------------------------------------------------------------

async def test_create_returns_201_with_project_id(client, make_payload):
    res = await client.post("/api/project/budget", json=make_payload())
    assert res.status_code == 201
    assert res.json() == {
        "success": True,
        "message": "Project created successfully",
        "projectId": 10001,
    }


async def test_create_missing_field_returns_400_naming_it(client, make_payload):
    body = make_payload(projectId=10002)
    del body["projectName"]

    res = await client.post("/api/project/budget", json=body)

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "MISSING_FIELDS"
    assert [d["field"] for d in error["details"]] == ["projectName"]


async def test_create_lists_every_missing_field(client):
    res = await client.post(
        "/api/project/budget", json={"projectId": 1, "year": 2024},
    )
    assert res.status_code == 400
    fields = [d["field"] for d in res.json()["error"]["details"]]
    assert fields == [
        "projectName", "currency", "initialBudgetLocal", "budgetUsd",
        "initialScheduleEstimateMonths", "adjustedScheduleEstimateMonths",
        "contingencyRate", "escalationRate", "finalBudgetUsd",
    ]


@pytest.mark.parametrize("field,value", [
    ("projectId", "not-a-number"),
    ("projectId", 2**31),
    ("year", "2024"),
    ("year", 99999999999999999999),
    ("budgetUsd", "lots"),
])
async def test_create_wrong_type_returns_400(client, make_payload, field, value):
    res = await client.post(
        "/api/project/budget", json=make_payload(**{field: value}),
    )
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "TYPE_MISMATCH"
    assert field in [d["field"] for d in error["details"]]


async def test_create_duplicate_returns_201_then_409(client, make_payload):
    first = await client.post("/api/project/budget", json=make_payload())
    second = await client.post(
        "/api/project/budget",
        json=make_payload(projectName="Duplicate Test Project", year=2025),
    )
    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "CONFLICT"


async def test_create_allows_null_budget_fields(client, make_payload):
    res = await client.post(
        "/api/project/budget", json=make_payload(budgetUsd=None),
    )
    assert res.status_code == 201
    got = await client.get("/api/project/budget/10001")
    assert got.json()["budgetUsd"] is None


async def test_create_normalizes_currency(client, make_payload):
    await client.post("/api/project/budget", json=make_payload(currency="eur"))
    got = await client.get("/api/project/budget/10001")
    assert got.json()["currency"] == "EUR"


async def test_create_non_object_body_returns_400(client):
    res = await client.post("/api/project/budget", json=[1, 2, 3])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "TYPE_MISMATCH"


async def test_create_invalid_json_returns_400(client):
    res = await client.post(
        "/api/project/budget", content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["success"] is False


# -- Replace -------------------------------------------------------------------

async def test_put_replaces_all_fields(client, make_payload):
    await client.post("/api/project/budget", json=make_payload())
    body = make_payload(year=2025)
    del body["projectId"]

    res = await client.put("/api/project/budget/10001", json=body)

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "message": "Project updated successfully",
        "projectId": 10001,
    }
    got = await client.get("/api/project/budget/10001")
    assert got.json()["year"] == 2025


async def test_put_omitted_optional_fields_become_null(client, make_payload):
    await client.post("/api/project/budget", json=make_payload())

    await client.put(
        "/api/project/budget/10001",
        json={"projectName": "Renamed", "year": 2024, "currency": "GBP"},
    )

    got = (await client.get("/api/project/budget/10001")).json()
    assert got["projectName"] == "Renamed"
    assert got["finalBudgetUsd"] is None
    assert got["budgetUsd"] is None


async def test_put_ignores_project_id_in_body(client, make_payload):
    await client.post("/api/project/budget", json=make_payload())

    res = await client.put(
        "/api/project/budget/10001", json=make_payload(projectId=555),
    )

    assert res.status_code == 200
    assert res.json()["projectId"] == 10001
    assert (await client.get("/api/project/budget/555")).status_code == 404


async def test_put_unknown_id_returns_404(client, make_payload):
    body = make_payload()
    del body["projectId"]
    res = await client.put("/api/project/budget/999999", json=body)
    assert res.status_code == 404


async def test_put_missing_field_returns_400(client, make_payload):
    await client.post("/api/project/budget", json=make_payload())
    body = make_payload()
    del body["projectName"]

    res = await client.put("/api/project/budget/10001", json=body)

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MISSING_FIELDS"


async def test_put_checks_year_type(client, make_payload):
    await client.post("/api/project/budget", json=make_payload())
    res = await client.put(
        "/api/project/budget/10001",
        json={"projectName": "X", "year": "next year", "currency": "EUR"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "TYPE_MISMATCH"


# -- Delete --------------------------------------------------------------------

async def test_delete_returns_200_then_get_404(client, make_payload):
    await client.post("/api/project/budget", json=make_payload())

    res = await client.delete("/api/project/budget/10001")

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "message": "Project deleted successfully",
        "projectId": 10001,
    }
    assert (await client.get("/api/project/budget/10001")).status_code == 404


async def test_delete_unknown_id_returns_404(client):
    res = await client.delete("/api/project/budget/999999")
    assert res.status_code == 404
    assert res.json()["error"]


async def test_recreate_after_delete_succeeds(client, make_payload):
    await client.post("/api/project/budget", json=make_payload())
    await client.delete("/api/project/budget/10001")

    res = await client.post("/api/project/budget", json=make_payload())

    assert res.status_code == 201


# -- Lifecycle -----------------------------------------------------------------

async def test_full_lifecycle(client):
    body = {
        "projectId": 10001, "projectName": "X", "year": 2024, "currency": "EUR",
        "initialBudgetLocal": 1000, "budgetUsd": 900,
        "initialScheduleEstimateMonths": 6, "adjustedScheduleEstimateMonths": 5,
        "contingencyRate": 1.2, "escalationRate": 1.3, "finalBudgetUsd": 950,
    }
    created = await client.post("/api/project/budget", json=body)
    assert created.status_code == 201
    assert created.json()["projectId"] == 10001

    got = await client.get("/api/project/budget/10001")
    assert got.status_code == 200
    assert got.json()["projectName"] == "X"

    update = {k: v for k, v in body.items() if k != "projectId"}
    update["year"] = 2025
    assert (await client.put("/api/project/budget/10001", json=update)).status_code == 200
    assert (await client.get("/api/project/budget/10001")).json()["year"] == 2025

    assert (await client.delete("/api/project/budget/10001")).status_code == 200
    assert (await client.get("/api/project/budget/10001")).status_code == 404
