from __future__ import annotations

from flask.testing import FlaskClient

from sipswp.app import create_app


def test_simulation_defaults(client: FlaskClient):
    resp = client.post("/api/calc/simulation", json={})

    assert resp.status_code == 200
    body = resp.get_json()
    ledger = body["ledger"]
    assert len(ledger) == 30
    assert ledger[0]["monthlyContribution"] == 1000.0
    assert ledger[0]["monthlyWithdrawal"] is None
    assert ledger[10]["monthlyContribution"] is None
    assert ledger[10]["monthlyWithdrawal"] == 10000.0
    assert body["summary"]["finalBalance"] == ledger[-1]["endBalance"]


def test_simulation_without_body_uses_defaults(client: FlaskClient):
    resp = client.post("/api/calc/simulation")

    assert resp.status_code == 200
    assert len(resp.get_json()["ledger"]) == 30


def test_simulation_with_withdrawals_disabled(client: FlaskClient):
    resp = client.post("/api/calc/simulation", json={"years": 5, "enableSwp": False})

    assert resp.status_code == 200
    ledger = resp.get_json()["ledger"]
    assert len(ledger) == 5
    assert all(row["annualWithdrawal"] is None for row in ledger)


def test_empty_horizon_is_a_config_error(client: FlaskClient):
    resp = client.post("/api/calc/simulation", json={"years": 0, "enableSwp": False})

    assert resp.status_code == 400
    body = resp.get_json()
    assert any("at least 1" in message for message in body["error"])


def test_malformed_fields_return_422(client: FlaskClient):
    bad_type = client.post("/api/calc/simulation", json={"years": "ten"})
    unknown = client.post("/api/calc/simulation", json={"colour": "blue"})

    assert bad_type.status_code == 422
    assert "detail" in bad_type.get_json()
    assert unknown.status_code == 422


def test_simulation_csv_download(client: FlaskClient):
    resp = client.post("/api/calc/simulation/csv", json={"years": 2, "swpYears": 1})

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert 'filename="SIP_SWP_Report.csv"' in resp.headers["Content-Disposition"]
    lines = resp.get_data(as_text=True).splitlines()
    # note, blank, header, then one line per year
    assert len(lines) == 3 + 3


def test_csv_filename_is_configurable():
    app = create_app({"TESTING": True, "CSV_FILENAME": "plan.csv"})
    with app.test_client() as client:
        resp = client.post("/api/calc/simulation/csv", json={})

    assert 'filename="plan.csv"' in resp.headers["Content-Disposition"]


def test_goal_already_met(client: FlaskClient):
    resp = client.post("/api/calc/goal", json={"target": 0})

    assert resp.status_code == 200
    assert resp.get_json() == {"stepUpPercent": 0.0}


def test_goal_search(client: FlaskClient):
    resp = client.post("/api/calc/goal", json={"target": 2_000_000, "initialContribution": 5000})

    assert resp.status_code == 200
    assert 0 < resp.get_json()["stepUpPercent"] < 100


def test_goal_unachievable_is_not_an_http_error(client: FlaskClient):
    resp = client.post("/api/calc/goal", json={"target": 1e15, "initialContribution": 100})

    assert resp.status_code == 200
    assert resp.get_json() == {"error": "unachievable"}


def test_required_contribution(client: FlaskClient):
    resp = client.post("/api/calc/required-contribution", json={"investmentPeriod": 5})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["initialContribution"] > 0
    assert [step["year"] for step in body["staircase"]] == [1, 2, 3, 4, 5]


def test_sequence_risk_defaults(client: FlaskClient):
    resp = client.post("/api/calc/sequence-risk", json={})

    assert resp.status_code == 200
    body = resp.get_json()
    assert set(body) == {"labels", "bear", "flat", "bull"}
    assert body["labels"] == list(range(31))
    assert len(body["bear"]) == len(body["flat"]) == len(body["bull"]) == 31


def test_survival_grid_defaults(client: FlaskClient):
    resp = client.post("/api/calc/survival-grid", json={})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["rates"] == [3, 4, 5, 6, 7]
    assert body["durations"] == [10, 15, 20, 25, 30]
    assert len(body["cells"]) == 5
    assert {"withdrawalRatePercent", "durationYears", "finalBalance", "survived"} == set(body["cells"][0][0])


def test_survival_grid_custom_axes(client: FlaskClient):
    resp = client.post("/api/calc/survival-grid", json={"rates": [4], "durations": [30]})

    assert resp.status_code == 200
    assert len(resp.get_json()["cells"]) == 1
