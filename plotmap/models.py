from __future__ import annotations

from datetime import datetime, timezone

from plotmap.extensions import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlotRecord(db.Model):
    """A plot row; ``signature`` joins it to one diagram shape."""

    __tablename__ = "plots"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    signature = db.Column(db.String(512), nullable=False, unique=True, index=True)
    plot_number = db.Column(db.String(64), nullable=False, default="")
    status = db.Column(db.String(16), nullable=False, default="AVAILABLE")
    area_sqyds = db.Column(db.Float, nullable=False, default=0.0)

    dim_top = db.Column(db.String(64), nullable=True)
    dim_right = db.Column(db.String(64), nullable=True)
    dim_bottom = db.Column(db.String(64), nullable=True)
    dim_left = db.Column(db.String(64), nullable=True)
    facing = db.Column(db.String(16), nullable=True)
    price_per_sqyd = db.Column(db.Float, nullable=True)

    show_price_publicly = db.Column(db.Boolean, nullable=False, default=True)
    show_info_publicly = db.Column(db.Boolean, nullable=False, default=False)

    contact_role = db.Column(db.String(64), nullable=True)
    contact_name = db.Column(db.String(128), nullable=True)
    contact_number = db.Column(db.String(32), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<PlotRecord id={self.id} signature={self.signature!r}>"
