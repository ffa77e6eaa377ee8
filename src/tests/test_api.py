from datetime import date

import pytest

from core.services import expiry
from notifications.models import Notification
from stock.models import GroceryBatch


def test_branch_crud_and_envelope(api):
    resp = api.post("/api/branches/", {"name": "BranchX", "address": "Main St 1", "manager": "Ana"})
    assert resp.status_code == 201
    assert resp.json()["success"] is True
    assert resp.json()["branch"]["name"] == "BranchX"

    resp = api.post("/api/branches/", {"name": "BranchX", "address": "Other", "manager": "Luis"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Branch already exists"}

    resp = api.get("/api/branches/Nowhere/")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_invalid_json_body(api):
    resp = api.client.post("/api/branches/", "{nope", content_type="application/json")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Request body must be valid JSON"


def test_daily_cycle_over_http(api, day, branch_x, bread):
    d = day.isoformat()
    assert api.post("/api/stocks/add/", {"date": d, "branch": "BranchX",
                                          "items": [{"itemCode": bread.code, "quantity": 10}]}).status_code == 200
    assert api.post("/api/stocks/returns/", {"date": d, "branch": "BranchX",
                                              "itemCode": bread.code, "quantity": 2}).status_code == 200

    # sin cerrar el día no hay arqueo
    resp = api.post("/api/cash/", {"branch": "BranchX", "date": d, "actualCash": 800})
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    resp = api.post("/api/stocks/finish/", {"date": d, "branch": "BranchX"})
    assert resp.json()["isFinished"] is True

    resp = api.post("/api/stocks/add/", {"date": d, "branch": "BranchX", "itemCode": bread.code, "quantity": 1})
    assert resp.status_code == 400

    assert api.get("/api/cash/expected/", {"branch": "BranchX", "date": d}).json()["expected"] == 800.0

    resp = api.post("/api/cash/", {"branch": "BranchX", "date": d, "actualCash": 800})
    assert resp.status_code == 201
    assert resp.json()["entry"]["status"] == "Match"

    resp = api.post("/api/cash/", {"branch": "BranchX", "date": d, "actualCash": 800})
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    stocks = api.get("/api/stocks/", {"date": d, "branch": "BranchX"}).json()
    assert stocks["isFinished"] is True
    assert stocks["stocks"][0]["sold"] == 8


def test_report_and_export(api, day, branch_x, bread):
    d = day.isoformat()
    api.post("/api/stocks/add/", {"date": d, "branch": "BranchX", "itemCode": bread.code, "quantity": 3})
    api.post("/api/stocks/finish/", {"date": d, "branch": "BranchX"})

    body = api.post("/api/reports/generate/", {"type": "branch", "branch": "All Branches"}).json()
    assert body["grouped"] == [{"branch": "BranchX", "returned": 0, "sold": 3, "sales": 300.0}]

    resp = api.post("/api/reports/export/", {"report": "sales", "format": "csv", "type": "item"})
    assert resp.status_code == 200
    assert resp["Content-Type"] == "text/csv"
    assert resp["Content-Disposition"].startswith('attachment; filename="sales_report_')
    assert b"Bread" in resp.content

    resp = api.post("/api/reports/export/", {"report": "sales", "format": "pdf", "type": "item"})
    assert resp.status_code == 400


def test_check_expiring_endpoint(api, branch_x, milk):
    GroceryBatch.objects.create(item=milk, branch=branch_x, quantity=4, remaining=4,
                                expiry_date=date(2024, 1, 11), added_date=date(2024, 1, 1))

    body = api.post("/api/notifications/check-expiring/", {"date": "2024-01-10"}).json()
    assert body == {"success": True, "message": "Checked 1 items, created 1 notifications",
                    "checked": 1, "created": 1}

    notif = Notification.objects.get()
    resp = api.post(f"/api/notifications/{notif.id}/read/", {"userId": "U001"})
    assert resp.status_code == 200
    listed = api.get("/api/notifications/", {"branch": "BranchX"}).json()["notifications"]
    assert [n["id"] for n in listed] == [notif.id]


def test_user_endpoints(api, branch_x):
    resp = api.post("/api/users/", {"username": "ana", "fullName": "Ana", "password": "pw",
                                    "accesses": ["Reports"], "assignedBranches": ["BranchX"]})
    assert resp.status_code == 201
    code = resp.json()["user"]["id"]

    resp = api.post("/api/auth/login/", {"username": "ANA", "password": "pw"})
    assert resp.json()["user"]["assignedBranches"] == ["BranchX"]

    resp = api.patch(f"/api/users/{code}/", {"status": "Inactive"})
    assert resp.json()["user"]["status"] == "Inactive"
    assert api.post("/api/auth/login/", {"username": "ana", "password": "pw"}).status_code == 400

    assert api.delete(f"/api/users/{code}/").status_code == 200
    assert api.get(f"/api/users/{code}/").status_code == 404


@pytest.mark.parametrize("method", ["put", "delete"])
def test_method_not_allowed(api, method):
    resp = getattr(api, method)("/api/cash/")
    assert resp.status_code == 405
    assert resp.json() == {"success": False, "message": f"Method {method.upper()} not allowed"}
    assert "POST" in resp["Allow"]


def test_check_expiring_reports_failure(api, monkeypatch):
    def boom(today):
        raise RuntimeError("db down")

    monkeypatch.setattr(expiry, "_scan", boom)
    resp = api.post("/api/notifications/check-expiring/", {"date": "2024-01-10"})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Expiry check failed", "error": "db down"}
