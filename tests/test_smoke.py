import pytest

from app.portal import create_app
from app.portal.constants import PENDING_HIGHLIGHT_KEY

PACKAGE = {
    "Functions_Details": {
        "EntAdm": {"FunctionID": 1, "Name": "Company Administration", "Name_Regional": "", "Default_Order": 1},
        "HR": {"FunctionID": 2, "Name": "Human Resources", "Name_Regional": "Ressources humaines", "Default_Order": 2},
    },
    "Modules_Details": {
        "ENTDT": {"ModuleID": 11, "FunctionID": 1, "Name": "Entities", "Name_Regional": "", "Default_Order": 1, "URL": "company-administration/entities"},
        "PAY": {"ModuleID": 21, "FunctionID": 2, "Name": "Payroll", "Name_Regional": "Paie", "Default_Order": 1, "URL": "/hr/payroll"},
        "TS": {"ModuleID": 22, "FunctionID": 2, "Name": "Timesheets", "Name_Regional": "", "Default_Order": 2, "URL": ""},
    },
    "Account_Settings": {"Language": "English", "Theme": "light"},
}


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("ENV", "test")
    for k in ("CATALOG_OVERLAP_POLICY", "HIGHLIGHT_DURATION_MS", "HEADER_CLEARANCE_PX"):
        monkeypatch.delenv(k, raising=False)

    app = create_app()
    return app.test_client()


def _load_records(client, package=PACKAGE):
    with client.session_transaction() as sess:
        sess["csrf_token"] = "tok"
    return client.post("/account/status", json=package, headers={"X-CSRF-Token": "tok"})


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json["ok"] is True
    assert client.get("/healthz").status_code == 200


def test_dashboard_before_login_is_empty(client):
    r = client.get("/")
    assert r.status_code == 200
    assert b"No modules available." in r.data
    assert client.get("/catalog.json").json == {"functions": []}


def test_status_requires_csrf(client):
    r = client.post("/account/status", json=PACKAGE)
    assert r.status_code == 400


def test_status_rejects_non_object(client):
    with client.session_transaction() as sess:
        sess["csrf_token"] = "tok"
    r = client.post("/account/status", json=[1, 2], headers={"X-CSRF-Token": "tok"})
    assert r.status_code == 400


def test_status_accepts_token_in_json_body(client):
    with client.session_transaction() as sess:
        sess["csrf_token"] = "tok"
    r = client.post("/account/status", json=dict(PACKAGE, csrf_token="tok"))
    assert r.status_code == 200
    r = client.post("/account/status", json=dict(PACKAGE, csrf_token="wrong"))
    assert r.status_code == 400


def test_second_login_replaces_account_settings(client):
    _load_records(client, dict(PACKAGE, Account_Settings={"Language": "French"}))
    package = {k: v for k, v in PACKAGE.items() if k != "Account_Settings"}
    r = _load_records(client, package)
    assert r.json["stored"] == ["Functions_Details", "Modules_Details"]
    with client.session_transaction() as sess:
        assert "Account_Settings" not in sess


def test_load_records_and_render_dashboard(client):
    r = _load_records(client)
    assert r.status_code == 200
    assert r.json["ok"] is True
    assert r.json["functions"] == 2
    assert r.json["stored"] == ["Functions_Details", "Modules_Details", "Account_Settings"]

    r = client.get("/")
    assert r.status_code == 200
    assert b"Company Administration" in r.data
    assert b'id="module-PAY"' in r.data
    # Unimplemented modules get no dashboard card but stay in the sidebar (disabled).
    assert b'id="module-TS"' not in r.data
    assert b"menu-item disabled" in r.data


def test_catalog_json(client):
    _load_records(client)
    data = client.get("/catalog.json").json
    assert [f["code"] for f in data["functions"]] == ["EntAdm", "HR"]
    hr_modules = data["functions"][1]["modules"]
    assert [m["code"] for m in hr_modules] == ["PAY", "TS"]
    assert hr_modules[0]["is_implemented"] is True
    assert hr_modules[1]["is_implemented"] is False


def test_logout_clears_records(client):
    _load_records(client)
    r = client.get("/account/logout")
    assert r.status_code == 302
    with client.session_transaction() as sess:
        assert "Functions_Details" not in sess
        assert "Modules_Details" not in sess
    assert client.get("/catalog.json").json == {"functions": []}


def test_strict_policy_rejects_overlapping_urls(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("CATALOG_OVERLAP_POLICY", "strict")
    client = create_app().test_client()

    package = {
        "Functions_Details": {"HR": {"FunctionID": 2, "Name": "HR", "Default_Order": 1}},
        "Modules_Details": {
            "PAY": {"ModuleID": 1, "FunctionID": 2, "Name": "Payroll", "Default_Order": 1, "URL": "hr/payroll"},
            "RUNS": {"ModuleID": 2, "FunctionID": 2, "Name": "Runs", "Default_Order": 2, "URL": "hr/payroll/runs"},
        },
    }
    r = _load_records(client, package)
    assert r.status_code == 422
    assert r.json["ok"] is False
    with client.session_transaction() as sess:
        assert "Modules_Details" not in sess


def test_production_requires_secret_key(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("SECRET_KEY", "change-me")
    with pytest.raises(RuntimeError):
        create_app()


def test_breadcrumb_click_on_module_goes_to_dashboard(client):
    _load_records(client)
    r = client.get("/navigate", query_string={"to": "/hr/payroll"})
    assert r.status_code == 302
    location = r.headers["Location"]
    assert "moduleUrl=" in location
    assert "payroll" in location


def test_breadcrumb_click_on_other_page_follows_link(client):
    _load_records(client)
    r = client.get("/navigate", query_string={"to": "/reports/misc"})
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/reports/misc")


def test_breadcrumb_click_rejects_external_targets(client):
    r = client.get("/navigate", query_string={"to": "//evil.example.com"})
    assert r.status_code == 302
    assert "evil" not in r.headers["Location"]


def test_deep_link_redirect_clears_marker_then_highlights(client):
    _load_records(client)
    r = client.get("/", query_string={"moduleUrl": "/hr/payroll/5/edit"})
    assert r.status_code == 303
    assert "moduleUrl" not in r.headers["Location"]
    with client.session_transaction() as sess:
        assert sess[PENDING_HIGHLIGHT_KEY] == "PAY"

    r = client.get("/")
    assert r.status_code == 200
    assert b"card highlighted" in r.data
    assert b'getElementById("module-PAY")' in r.data

    # Refresh does not highlight again.
    r = client.get("/")
    assert b"card highlighted" not in r.data


def test_deep_link_to_unknown_url_is_noop(client):
    _load_records(client)
    r = client.get("/", query_string={"moduleUrl": "does/not/exist"}, follow_redirects=True)
    assert r.status_code == 200
    assert b"card highlighted" not in r.data


def test_deep_link_to_filtered_out_card_is_noop(client):
    _load_records(client)
    r = client.get("/", query_string={"moduleUrl": "hr/payroll", "q": "entities"})
    assert r.status_code == 303
    r = client.get(r.headers["Location"])
    assert r.status_code == 200
    assert b'id="module-PAY"' not in r.data
    assert b"card highlighted" not in r.data


def test_module_page_shows_breadcrumb_trail(client):
    _load_records(client)
    r = client.get("/hr/payroll/5/edit")
    assert r.status_code == 200
    assert b"<h1>Payroll</h1>" in r.data
    # "Payroll" is the second entry, rendered disabled (plain text).
    assert b'<span class="crumb">Payroll</span>' in r.data
    assert b'href="/navigate?to=' in r.data


def test_unknown_page_is_coming_soon(client):
    r = client.get("/some/where")
    assert r.status_code == 200
    assert b"Coming soon" in r.data
