import http.client
import importlib.util
import json
import threading
from http.server import HTTPServer
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fuel_backend.app import gateway
from fuel_backend.main import app

REPO_ROOT = Path(__file__).resolve().parent.parent

COAL = {"hp": "5", "cp": "50", "sp": "1", "np": "1", "op": "5", "wp": "8", "ap": "30"}


@pytest.fixture
def client():
    return TestClient(app)


# === gateway ===

def test_parse_form_body():
    form = gateway.parse_form_body(b"hp=5&cp=50.5&sp=&extra=1&hp=7")
    assert form == {"hp": "5", "cp": "50.5", "sp": "", "extra": "1"}


def test_parse_form_body_malformed_is_none():
    assert gateway.parse_form_body(b"\xff\xfe\xfd") is None


def test_handle_malformed_post_skips_calculator(monkeypatch):
    calls = []
    monkeypatch.setattr(gateway, "calculate", lambda ms: calls.append(ms))
    view = gateway.handle("POST", gateway.parse_form_body(b"\xff\xfe"))
    assert calls == []
    assert view.error is None
    assert view.results == []
    assert all(m.value == "" for m in view.measurements)


def test_handle_get_is_blank():
    view = gateway.handle("GET")
    assert len(view.measurements) == 7
    assert all(m.value == "" for m in view.measurements)
    assert view.results == []
    assert view.error is None


def test_handle_post_success_echoes_inputs():
    view = gateway.handle("POST", dict(COAL, extra="ignored"))
    assert [m.value for m in view.measurements] == list(COAL.values())
    assert len(view.results) == 16
    assert view.error is None


def test_handle_post_empty_submission():
    view = gateway.handle("POST", {})
    assert view.results == []
    assert view.error == 'поле "Hp" не заповнене'


def test_render_shows_error():
    html = gateway.render(gateway.handle("POST", dict(COAL, wp="abc")))
    assert "містить невірне значення" in html
    assert 'value="abc"' in html
    assert 'id="results"' not in html


# === FastAPI ===

def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "System Online"


def test_form_get(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert 'name="hp"' in res.text
    assert 'id="error"' not in res.text
    assert 'id="results"' not in res.text


def test_form_post_success(client):
    res = client.post("/", data=COAL)
    assert res.status_code == 200
    assert '<td id="qrn">21464.80</td>' in res.text
    assert '<td id="kpg">1.61</td>' in res.text
    assert 'id="error"' not in res.text


def test_form_post_sum_mismatch(client):
    res = client.post("/", data=dict(COAL, hp="4.5"))
    assert res.status_code == 200
    assert "сума введених значень повинна дорівнювати 100" in res.text
    assert 'id="results"' not in res.text


def test_form_post_malformed_body(client):
    res = client.post(
        "/",
        content=b"\xff\xfe",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert res.status_code == 200
    assert 'name="hp"' in res.text
    assert 'id="error"' not in res.text
    assert 'id="results"' not in res.text


def test_json_api_success(client):
    res = client.post("/calculate/fuel", json={**COAL, "hp": 5, "cp": 50.0})
    assert res.status_code == 200
    body = res.json()
    assert body["input_echo"]["hp"] == "5"
    assert body["input_echo"]["cp"] == "50.0"
    assert [r["name"] for r in body["results"]][:3] == ["kpc", "kpg", "hc"]
    assert body["results"][13] == {"name": "qrn", "label": "Qрн", "units": "КДж/кг", "value": "21464.80"}


def test_json_api_validation_error(client):
    res = client.post("/calculate/fuel", json={"hp": "5"})
    assert res.status_code == 422
    assert res.json()["kind"] == "missing_field"
    assert res.json()["error"] == 'поле "Cp" не заповнене'


def test_json_api_null_field_keeps_error_shape(client):
    res = client.post("/calculate/fuel", json={**COAL, "sp": None})
    assert res.status_code == 422
    body = res.json()
    assert body["kind"] == "invalid_number"
    assert body["error"] == 'поле "Sp" містить невірне значення'
    assert body["input_echo"]["hp"] == "5"
    assert body["input_echo"]["sp"] == ""


def test_json_api_non_object_body(client):
    res = client.post("/calculate/fuel", json=[1, 2, 3])
    assert res.status_code == 422
    assert res.json()["kind"] == "invalid_request"
    assert res.json()["input_echo"] == {name: "" for name in COAL}


# === Vercel handlers ===

def _load_handler(relative):
    path = REPO_ROOT / relative
    spec = importlib.util.spec_from_file_location(path.stem + "_handler", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.handler


@pytest.fixture
def serve():
    servers = []

    def _serve(relative):
        server = HTTPServer(("127.0.0.1", 0), _load_handler(relative))
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return http.client.HTTPConnection("127.0.0.1", server.server_address[1], timeout=5)

    yield _serve
    for server in servers:
        server.shutdown()
        server.server_close()


def test_vercel_form_handler(serve):
    conn = serve("api/index.py")
    body = "&".join(f"{k}={v}" for k, v in COAL.items())
    conn.request("POST", "/", body=body,
                 headers={"Content-Type": "application/x-www-form-urlencoded"})
    res = conn.getresponse()
    assert res.status == 200
    assert '<td id="qgn">34943.23</td>' in res.read().decode("utf-8")


def test_vercel_json_handler(serve):
    conn = serve("api/calculate/fuel.py")
    conn.request("POST", "/", body=json.dumps(dict(COAL, hp="4.5")),
                 headers={"Content-Type": "application/json"})
    res = conn.getresponse()
    assert res.status == 422
    assert json.loads(res.read())["kind"] == "sum_mismatch"

    conn.request("POST", "/", body=b"{not json")
    res = conn.getresponse()
    assert res.status == 400
    res.read()


def test_vercel_json_handler_object_field(serve):
    conn = serve("api/calculate/fuel.py")
    conn.request("POST", "/", body=json.dumps(dict(COAL, wp={"value": 8})),
                 headers={"Content-Type": "application/json"})
    res = conn.getresponse()
    assert res.status == 422
    body = json.loads(res.read())
    assert body["kind"] == "invalid_number"
    assert body["error"] == 'поле "Wp" містить невірне значення'
