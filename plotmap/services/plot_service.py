from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from plotmap.domain.plots import (
    LOCAL_NAMES,
    SERVER_MANAGED_FIELDS,
    WIRE_NAMES,
    parse_facing,
    parse_status,
)
from plotmap.extensions import db
from plotmap.models import PlotRecord, utcnow

# Wire fields a client may write; everything else in a payload is ignored.
_WRITABLE_FIELDS = tuple(
    wire for wire in WIRE_NAMES.values() if wire not in SERVER_MANAGED_FIELDS
)


class PlotError(Exception):
    """Base exception raised for plot persistence issues."""


class PlotNotFoundError(PlotError):
    """Raised when a plot is not found."""


class PlotValidationError(PlotError):
    """Raised when a plot payload is malformed."""


class PlotStorageError(PlotError):
    """Raised when the database rejects an operation."""


class PlotService:
    """Persist plot records: listing, upsert by signature and deletion."""

    def __init__(self, session=None) -> None:
        self._session = session

    @classmethod
    def from_app_config(cls) -> "PlotService":
        return cls()

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def list_plots(self) -> List[dict]:
        """All plots ordered by plot number."""
        try:
            records = (
                self.session.query(PlotRecord)
                .order_by(PlotRecord.plot_number.asc(), PlotRecord.id.asc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise PlotStorageError(f"Failed to load plots: {exc}") from exc
        return [serialize_record(record) for record in records]

    def get_plot(self, plot_id: int) -> dict:
        record = self.session.get(PlotRecord, plot_id)
        if record is None:
            raise PlotNotFoundError(f"Plot with id {plot_id} not found.")
        return serialize_record(record)

    def upsert_plots(self, payloads: Iterable[Dict[str, Any]]) -> List[dict]:
        """
        Insert or update plots keyed on their signature.

        ``id``, ``createdAt`` and ``updatedAt`` in the payloads are ignored.
        Either every payload is stored or none is.

        Returns the stored plots in payload order.
        """
        cleaned = [self._clean_payload(payload) for payload in payloads]
        if not cleaned:
            raise PlotValidationError("No plots were provided.")

        records: List[PlotRecord] = []
        try:
            for values in cleaned:
                record = (
                    self.session.query(PlotRecord)
                    .filter_by(signature=values["signature"])
                    .one_or_none()
                )
                now = utcnow()
                if record is None:
                    record = PlotRecord(created_at=now)
                    self.session.add(record)
                for name, value in values.items():
                    setattr(record, name, value)
                record.updated_at = now
                records.append(record)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            current_app.logger.error(f"Error saving plots: {exc}", exc_info=True)
            raise PlotStorageError(f"Failed to save plots: {exc}") from exc

        current_app.logger.info(
            f"Upserted {len(records)} plot(s): {', '.join(r.signature for r in records)}"
        )
        return [serialize_record(record) for record in records]

    def delete_plot(self, plot_id: int) -> None:
        record = self.session.get(PlotRecord, plot_id)
        if record is None:
            raise PlotNotFoundError(f"Plot with id {plot_id} not found.")
        try:
            self.session.delete(record)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PlotStorageError(f"Failed to delete plot {plot_id}: {exc}") from exc
        current_app.logger.info(f"Deleted plot {plot_id} ({record.signature})")

    @staticmethod
    def _clean_payload(payload: Any) -> Dict[str, Any]:
        """Validate a wire payload and map it onto record column names."""
        if not isinstance(payload, dict):
            raise PlotValidationError("Each plot must be a JSON object.")

        signature = payload.get("signature")
        if not isinstance(signature, str) or not signature:
            raise PlotValidationError("Plot signature is required.")

        values: Dict[str, Any] = {}
        for wire in _WRITABLE_FIELDS:
            if wire not in payload:
                continue
            values[LOCAL_NAMES[wire]] = payload[wire]

        try:
            if "status" in values:
                values["status"] = parse_status(values["status"]).value
            if "facing" in values:
                facing = parse_facing(values["facing"])
                values["facing"] = facing.value if facing else None
            if "area_sqyds" in values:
                values["area_sqyds"] = float(values["area_sqyds"] or 0)
            if "price_per_sqyd" in values:
                price = values["price_per_sqyd"]
                values["price_per_sqyd"] = None if price in (None, "") else float(price)
        except (TypeError, ValueError) as exc:
            raise PlotValidationError(str(exc)) from exc

        for flag in ("show_price_publicly", "show_info_publicly"):
            if flag in values:
                values[flag] = bool(values[flag])
        if "plot_number" in values and values["plot_number"] is None:
            values["plot_number"] = ""
        return values


def serialize_record(record: PlotRecord) -> dict:
    """Convert a record to the wire JSON format."""
    data: Dict[str, Any] = {"id": record.id}
    for local, wire in WIRE_NAMES.items():
        value = getattr(record, local)
        if isinstance(value, datetime):
            value = _isoformat(value)
        data[wire] = value
    if data["facing"] is None:
        data["facing"] = ""
    return data


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
