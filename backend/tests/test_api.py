from decimal import Decimal

from app.services.etl.parsers.wbs_csv import generate_csv_template, parse_wbs_csv


def _project(client, **kw):
    payload = {"name": "Harbour Bridge", "start_date": "2024-01-01", "end_date": "2024-12-31", "budget": 250000}
    payload.update(kw)
    r = client.post("/projects", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def _wbs(client, project_id, **kw):
    return client.post("/wbs", json={"project_id": project_id, "name": "Item", **kw})


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_project_crud(client):
    p = _project(client, currency="SAR")
    assert p["currency"] == "SAR"
    r = client.put(f"/projects/{p['id']}", json={"name": "Harbour Bridge II"})
    assert r.json()["name"] == "Harbour Bridge II"
    assert client.get("/projects/999").status_code == 404
    r = client.put(f"/projects/{p['id']}", json={"end_date": "2023-01-01"})
    assert r.status_code == 422
    assert client.delete(f"/projects/{p['id']}").status_code == 204
    assert client.get("/projects").json() == []


def test_wbs_validation_errors_list_every_field(client):
    p = _project(client)
    r = _wbs(client, p["id"], type="Summary", start_date="2024-01-01")
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert {tuple(d["loc"]) for d in detail} == {("budgeted_cost",), ("start_date",)}


def test_wbs_patch_rejects_null_name_and_type(client):
    p = _project(client)
    top = _wbs(client, p["id"], type="Summary", budgeted_cost=1000).json()
    for field in ("name", "type"):
        r = client.patch(f"/wbs/{top['id']}", json={field: None})
        assert r.status_code == 422, r.text
        assert r.json()["detail"] == [{"loc": [field], "msg": f"{field} cannot be empty"}]
    r = client.patch(f"/wbs/{top['id']}", json={"name": None, "type": None})
    assert [d["loc"] for d in r.json()["detail"]] == [["name"], ["type"]]
    assert client.get(f"/wbs/{top['id']}").json()["name"] == "Item"


def test_wbs_hierarchy_flow(client):
    p = _project(client)
    top = _wbs(client, p["id"], type="Summary", budgeted_cost=10000).json()
    assert (top["code"], top["level"], top["is_top_level"]) == ("1", 1, True)

    r = _wbs(client, p["id"], type="WorkPackage")
    assert r.status_code == 422

    wp = _wbs(client, p["id"], type="WorkPackage", parent_id=top["id"], budgeted_cost=4000).json()
    assert wp["code"] == "1.1"

    r = _wbs(client, p["id"], type="WorkPackage", parent_id=top["id"], budgeted_cost=7000)
    assert r.status_code == 422
    assert "Sum of all child budgets" in r.json()["detail"][0]["msg"]

    act = _wbs(
        client, p["id"], type="Activity", parent_id=wp["id"], budgeted_cost=0,
        start_date="2024-02-01", end_date="2024-02-10", duration=10,
    ).json()
    assert act["code"] == "1.1.1"

    r = _wbs(client, p["id"], type="Summary", parent_id=act["id"], budgeted_cost=1)
    assert r.status_code == 422

    r = client.patch(f"/wbs/{wp['id']}", json={"budgeted_cost": 12000})
    assert r.status_code == 422

    r = client.patch(f"/wbs/{act['id']}/progress", json={"percent_complete": 50, "actual_start_date": "2024-02-02"})
    assert Decimal(r.json()["percent_complete"]) == 50
    r = client.patch(f"/wbs/{act['id']}/progress", json={"percent_complete": 120})
    assert r.status_code == 422

    r = client.post("/costs", json={"wbs_item_id": wp["id"], "amount": 900, "entry_date": "2024-02-05"})
    assert r.status_code == 201
    assert len(client.get(f"/wbs/{wp['id']}/costs").json()) == 1

    tree = client.get(f"/projects/{p['id']}/wbs/tree").json()
    assert len(tree) == 1
    assert Decimal(tree[0]["rolled_up_budget"]) == 4000
    assert Decimal(tree[0]["rolled_up_actual"]) == 900
    assert tree[0]["children"][0]["children"][0]["code"] == "1.1.1"

    assert [w["code"] for w in client.get(f"/projects/{p['id']}/work-packages").json()] == ["1.1"]
    assert [w["code"] for w in client.get(f"/wbs/{top['id']}/work-packages").json()] == ["1.1"]

    assert client.delete(f"/wbs/{top['id']}").status_code == 409
    assert client.delete(f"/wbs/{wp['id']}").status_code == 204
    assert [i["code"] for i in client.get(f"/projects/{p['id']}/wbs").json()] == ["1"]
    assert client.get(f"/wbs/{act['id']}").status_code == 404


def test_dependencies_and_tasks(client):
    p = _project(client)
    client.post(f"/imports/wbs?project_id={p['id']}", files={"file": ("t.csv", generate_csv_template().encode(), "text/csv")})
    items = {i["code"]: i for i in client.get(f"/projects/{p['id']}/wbs").json()}
    a, b = items["1.1.1"]["id"], items["2.1.1"]["id"]

    r = client.post("/dependencies", json={"predecessor_id": a, "successor_id": b, "lag": 2})
    assert r.status_code == 201
    assert r.json()["type"] == "FinishToStart"
    assert client.post("/dependencies", json={"predecessor_id": a, "successor_id": b}).status_code == 409
    r = client.post("/dependencies", json={"predecessor_id": b, "successor_id": a})
    assert r.status_code == 422
    assert "cycle" in r.json()["detail"][0]["msg"]
    r = client.post("/dependencies", json={"predecessor_id": a, "successor_id": items["1.1"]["id"]})
    assert r.status_code == 422
    assert len(client.get(f"/wbs/{a}/dependencies").json()) == 1

    t = client.post("/tasks", json={"activity_id": a, "name": "Site survey"}).json()
    assert t["project_id"] == p["id"]
    assert client.patch(f"/tasks/{t['id']}", json={"duration": 0}).status_code == 422
    assert len(client.get(f"/projects/{p['id']}/tasks").json()) == 1
    assert client.delete(f"/tasks/{t['id']}").status_code == 204


def test_import_endpoints(client):
    p = _project(client)
    template = client.get("/imports/template")
    assert template.headers["content-type"].startswith("text/csv")
    assert template.text == generate_csv_template()

    r = client.post("/imports/wbs/parse", files={"file": ("t.csv", template.content, "text/csv")})
    assert r.json()["errors"] == []
    assert len(r.json()["rows"]) == 7

    r = client.post(
        f"/imports/wbs?project_id={p['id']}",
        files={"file": ("wbs.csv", b"wbsCode,wbsName,wbsType,amount\n1,Site,Summary,100\n1.1,Bad,Phase,1\n", "text/csv")},
    )
    body = r.json()
    assert (body["created"], body["errors"]) == (1, ["Line 3: Invalid WBS type - must be Summary, WorkPackage, or Activity"])
    run_id = body["run"]["id"]
    assert body["run"]["status"] == "success_with_errors"

    runs = client.get("/imports", params={"project_id": p["id"]}).json()
    assert [r["id"] for r in runs] == [run_id]
    errors = client.get(f"/imports/{run_id}/errors").json()
    assert errors[0]["row_num"] == 3

    r = client.post(f"/imports/wbs?project_id={p['id']}", files={"file": ("wbs.pdf", b"%PDF", "application/pdf")})
    assert r.status_code == 400
    assert client.delete(f"/imports/{run_id}").status_code == 204


def test_cost_import_endpoint(client):
    p = _project(client)
    client.post(f"/imports/wbs?project_id={p['id']}", files={"file": ("t.csv", generate_csv_template().encode(), "text/csv")})
    r = client.post(
        f"/costs/import?project_id={p['id']}",
        files={"file": ("costs.csv", b"wbsCode,amount,description,entryDate\n2.1,500,Rebar,2024-02-01\n", "text/csv")},
    )
    assert len(r.json()["created"]) == 1
    summary = client.get("/reports/cost-summary", params={"project_id": p["id"]}).json()
    assert Decimal(summary["total_actual"]) == 500
    assert summary["rows"][1]["code"] == "2"


def test_exports(client):
    p = _project(client)
    client.post(f"/imports/wbs?project_id={p['id']}", files={"file": ("t.csv", generate_csv_template().encode(), "text/csv")})

    r = client.get("/exports/wbs.csv", params={"project_id": p["id"]})
    parsed = parse_wbs_csv(r.text)
    assert parsed.errors == []
    assert len(parsed.rows) == 7

    r = client.get("/exports/wbs.xlsx", params={"project_id": p["id"]})
    assert r.status_code == 200
    assert r.content[:2] == b"PK"

    r = client.get("/exports/cost-summary.pdf", params={"project_id": p["id"]})
    assert r.content.startswith(b"%PDF")
    assert client.get("/exports/wbs.csv", params={"project_id": 999}).status_code == 404
