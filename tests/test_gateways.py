from __future__ import annotations

import pytest
import requests

from conftest import wire_plot

from plotmap.mapping import loader
from plotmap.mapping.loader import DiagramLoadError, fetch_diagram, parse_diagram
from plotmap.services.edit_session import PlotDeleteError, PlotEditSession
from plotmap.services.gateways import HttpPlotGateway, LocalPlotGateway, PlotGatewayError
from plotmap.services.plot_service import PlotService


class FakeResponse:
    def __init__(self, status_code=200, body=None, content=b""):
        self.status_code = status_code
        self._body = body
        self.content = content

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeHttp:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def test_http_gateway_lists_plots():
    http = FakeHttp(FakeResponse(body=[wire_plot()]))
    gateway = HttpPlotGateway("http://plots.local/", http=http, timeout=5)
    assert gateway.list_plots() == [wire_plot()]
    assert http.calls == [("GET", "http://plots.local/api/plots", {"timeout": 5})]


def test_http_gateway_upserts_and_deletes():
    http = FakeHttp(FakeResponse(body=[wire_plot()]), FakeResponse(body={"success": True}))
    gateway = HttpPlotGateway("http://plots.local", http=http)
    payload = {"signature": "rect-0-0-100-50"}
    assert gateway.upsert(payload) == [wire_plot()]
    gateway.delete(7)
    assert http.calls[0][2]["json"] == payload
    assert http.calls[1][0] == "DELETE"
    assert http.calls[1][2]["params"] == {"id": 7}


def test_http_gateway_surfaces_server_message():
    http = FakeHttp(FakeResponse(status_code=404, body={"message": "Plot with id 9 not found."}))
    gateway = HttpPlotGateway("http://plots.local", http=http)
    with pytest.raises(PlotGatewayError, match="not found"):
        gateway.delete(9)


def test_http_gateway_wraps_transport_errors():
    http = FakeHttp(requests.ConnectionError("refused"))
    gateway = HttpPlotGateway("http://plots.local", http=http)
    with pytest.raises(PlotGatewayError):
        gateway.list_plots()


def test_http_gateway_rejects_invalid_json():
    gateway = HttpPlotGateway("http://plots.local", http=FakeHttp(FakeResponse(body=None)))
    with pytest.raises(PlotGatewayError):
        gateway.list_plots()


def test_edit_session_over_local_gateway(app):
    with app.app_context():
        session = PlotEditSession(LocalPlotGateway(PlotService()))
        session.load()
        placeholder = session.create_from_signature("rect-0-0-100-50")
        session.update_field(placeholder.id, "status", "SOLD")
        saved = session.save(placeholder.id)
        assert saved.id == 1
        assert saved.status.value == "SOLD"

        assert session.delete(saved.id)
        assert PlotService().list_plots() == []
        with pytest.raises(PlotDeleteError, match="not found"):
            session.delete(saved.id)


def test_parse_diagram_errors():
    with pytest.raises(DiagramLoadError):
        parse_diagram(b"")
    with pytest.raises(DiagramLoadError):
        parse_diagram("<svg>")


def test_fetch_diagram(monkeypatch):
    svg = b'<svg xmlns="http://www.w3.org/2000/svg"><rect x="0" y="0" width="1" height="1"/></svg>'
    monkeypatch.setattr(loader.requests, "get", lambda url, timeout=None: FakeResponse(content=svg))
    root = fetch_diagram("http://plots.local/plan.svg")
    assert root.tag == "{http://www.w3.org/2000/svg}svg"


def test_fetch_diagram_http_error(monkeypatch):
    monkeypatch.setattr(loader.requests, "get", lambda url, timeout=None: FakeResponse(status_code=500))
    with pytest.raises(DiagramLoadError):
        fetch_diagram("http://plots.local/plan.svg")


def test_http_gateway_login_posts_password():
    http = FakeHttp(FakeResponse(body={"message": "Logged in successfully!"}))
    gateway = HttpPlotGateway("http://plots.local/", http=http)
    gateway.login("secret")
    assert http.calls == [
        ("POST", "http://plots.local/api/auth/login", {"timeout": None, "json": {"password": "secret"}})
    ]


def test_http_gateway_login_rejected():
    http = FakeHttp(FakeResponse(status_code=401, body={"message": "Invalid password."}))
    gateway = HttpPlotGateway("http://plots.local", http=http)
    with pytest.raises(PlotGatewayError, match="Invalid password"):
        gateway.login("wrong")
