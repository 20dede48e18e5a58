from __future__ import annotations

import pytest

from conftest import FakeGateway, wire_plot

from plotmap.domain.plots import Pending, Persisted, PlotStatus
from plotmap.services.edit_session import (
    PlotDeleteError,
    PlotEditSession,
    PlotSaveError,
    PlotSessionError,
)
from plotmap.services.gateways import PlotGatewayError


@pytest.fixture
def gateway():
    return FakeGateway([wire_plot()])


@pytest.fixture
def session(gateway):
    session = PlotEditSession(gateway)
    session.load()
    return session


def test_load_replaces_local_state(session):
    assert [plot.id for plot in session.plots] == [7]
    assert session.dirty_ids == set()
    assert session.selected_id is None


def test_load_failure_is_reported():
    class Broken(FakeGateway):
        def list_plots(self):
            raise PlotGatewayError("offline")

    with pytest.raises(PlotSessionError):
        PlotEditSession(Broken()).load()


def test_create_from_signature_adds_selected_dirty_placeholder(session):
    plot = session.create_from_signature("poly-0_0-1_0-1_1")
    assert plot.is_pending
    assert plot.id < 0
    assert plot.status is PlotStatus.AVAILABLE
    assert plot.plot_number.startswith("Plot-")
    assert session.selected_id == plot.id
    assert session.is_dirty(plot.id)


def test_create_for_bound_signature_selects_existing(session):
    plot = session.create_from_signature("rect-0-0-100-50")
    assert plot.id == 7
    assert len(session.plots) == 1
    assert session.selected_id == 7


def test_temp_keys_are_unique(session):
    first = session.create_from_signature("circle-1-1-1")
    second = session.create_from_signature("circle-2-2-2")
    assert first.key != second.key


def test_update_field_marks_plot_dirty(session):
    assert session.update_field(7, "plotNumber", "B2")
    assert session.get(7).plot_number == "B2"
    assert session.dirty_ids == {7}


def test_update_field_on_unknown_id_is_ignored(session):
    assert session.update_field(99, "status", "SOLD") is False
    assert session.dirty_ids == set()


def test_update_field_rejects_bad_values(session):
    with pytest.raises(ValueError):
        session.update_field(7, "status", "LEASED")


def test_saving_a_placeholder_strips_server_managed_fields(session, gateway):
    placeholder = session.create_from_signature("poly-0_0-1_0-1_1")
    session.update_field(placeholder.id, "area_sqyds", "150")

    saved = session.save(placeholder.id)

    payload = gateway.upserts[-1]
    assert "id" not in payload
    assert "createdAt" not in payload
    assert "updatedAt" not in payload
    assert payload["signature"] == "poly-0_0-1_0-1_1"
    assert payload["area_sqyds"] == 150.0

    assert saved.key == Persisted(8)
    assert session.get(placeholder.key) is None
    assert session.get(8) is saved
    assert session.selected_id == 8
    assert session.dirty_ids == set()


def test_save_of_existing_plot_upserts_by_signature(session, gateway):
    session.update_field(7, "status", "HOLD")
    saved = session.save(7)
    assert saved.id == 7
    assert saved.status is PlotStatus.HOLD
    assert len(session.plots) == 1
    assert gateway.rows["rect-0-0-100-50"]["status"] == "HOLD"


def test_save_failure_keeps_local_state(session, gateway):
    placeholder = session.create_from_signature("poly-0_0-1_0-1_1")
    gateway.fail_upsert = True
    with pytest.raises(PlotSaveError):
        session.save(placeholder)
    assert session.get(placeholder.id) is placeholder
    assert session.is_dirty(placeholder.id)
    assert session.selected_id == placeholder.id


def test_discard_placeholder(session):
    placeholder = session.create_from_signature("poly-0_0-1_0-1_1")
    assert session.discard_placeholder(placeholder.id)
    assert session.get(placeholder.id) is None
    assert session.selected_id is None
    assert session.dirty_ids == set()


def test_discard_does_not_touch_saved_plots(session):
    assert session.discard_placeholder(7) is False
    assert session.get(7) is not None


def test_delete_removes_plot(session, gateway):
    session.select(7)
    assert session.delete(7)
    assert gateway.deletes == [7]
    assert session.get(7) is None
    assert session.selected_id is None


def test_delete_failure_keeps_plot(session, gateway):
    session.select(7)
    session.update_field(7, "notes", "call back")
    gateway.fail_delete = True
    with pytest.raises(PlotDeleteError):
        session.delete(7)
    assert session.get(7) is not None
    assert session.selected_id == 7
    assert session.is_dirty(7)


def test_delete_of_placeholder_is_a_no_op(session, gateway):
    placeholder = session.create_from_signature("poly-0_0-1_0-1_1")
    assert session.delete(placeholder.id) is False
    assert gateway.deletes == []
    assert session.get(Pending(-placeholder.id)) is placeholder


def test_shape_select_handler_binds_unmatched_shapes(session):
    plot = session.handle_shape_select("circle-1-1-1", {"signature": "circle-1-1-1"})
    assert plot.is_pending
    existing = session.handle_shape_select("rect-0-0-100-50", session.get(7))
    assert existing.id == 7
    assert session.selected_id == 7


def test_delete_of_non_positive_id_is_refused(session, gateway):
    assert session.delete(0) is False
    assert gateway.deletes == []
