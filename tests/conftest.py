from __future__ import annotations

import io
from typing import Any, Dict, List

import pytest
from werkzeug.security import generate_password_hash

from plotmap.app import create_app
from plotmap.services.gateways import PlotGatewayError

ADMIN_PASSWORD = "correct horse battery staple"

SIMPLE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 3000 2000">'
    '<rect x="0" y="0" width="3000" height="2000" fill="white"/>'
    '<g id="plots">'
    '<rect x="0" y="0" width="100" height="50" stroke="#333"/>'
    '<polygon points="0,0 100,0 100,100 0,100"/>'
    '<text x="5" y="5">Legend</text>'
    '</g>'
    '</svg>'
)


@pytest.fixture
def app(tmp_path):
    app = create_app(
        "testing",
        overrides={
            "DIAGRAM_DIR": tmp_path / "diagrams",
            "ADMIN_PASSWORD_HASH": generate_password_hash(ADMIN_PASSWORD),
            "SECRET_KEY": "test-secret",
        },
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    response = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def uploaded_diagram(admin_client):
    response = admin_client.post(
        "/api/diagram",
        data={"diagram": (io.BytesIO(SIMPLE_SVG.encode("utf-8")), "blueprint.svg")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 201
    return response.get_json()


def wire_plot(**overrides: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": 7,
        "signature": "rect-0-0-100-50",
        "plotNumber": "A1",
        "status": "SOLD",
        "area_sqyds": 120,
        "dim_top": "",
        "dim_right": "",
        "dim_bottom": "",
        "dim_left": "",
        "facing": "",
        "price_per_sqyd": None,
        "show_price_publicly": True,
        "show_info_publicly": False,
        "contact_role": "",
        "contact_name": "",
        "contact_number": "",
        "notes": "",
        "createdAt": "2024-01-01T00:00:00+00:00",
        "updatedAt": "2024-01-01T00:00:00+00:00",
    }
    data.update(overrides)
    return data


class FakeGateway:
    """In-memory persistence collaborator that assigns ids like the API does."""

    def __init__(self, plots: List[Dict[str, Any]] | None = None) -> None:
        self.rows: Dict[str, Dict[str, Any]] = {p["signature"]: dict(p) for p in plots or []}
        self.next_id = max([p["id"] for p in plots or []] + [0]) + 1
        self.upserts: List[Any] = []
        self.deletes: List[int] = []
        self.fail_upsert = False
        self.fail_delete = False

    def list_plots(self):
        return sorted(self.rows.values(), key=lambda p: p["plotNumber"])

    def upsert(self, payload):
        self.upserts.append(payload)
        if self.fail_upsert:
            raise PlotGatewayError("Failed to save plot")
        payloads = payload if isinstance(payload, list) else [payload]
        saved = []
        for item in payloads:
            row = self.rows.get(item["signature"])
            if row is None:
                row = {"id": self.next_id, "createdAt": "2024-02-01T00:00:00+00:00"}
                self.next_id += 1
            row.update(item)
            row["updatedAt"] = "2024-02-02T00:00:00+00:00"
            self.rows[item["signature"]] = row
            saved.append(dict(row))
        return saved

    def delete(self, plot_id):
        self.deletes.append(plot_id)
        if self.fail_delete:
            raise PlotGatewayError("Failed to delete plot")
        for signature, row in list(self.rows.items()):
            if row["id"] == plot_id:
                del self.rows[signature]
                return
        raise PlotGatewayError(f"Plot with id {plot_id} not found.")
