from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def init_extensions(app) -> None:
    """Initialize Flask extensions and make sure the schema exists."""
    db.init_app(app)

    from plotmap import models  # noqa: F401  registers the tables

    with app.app_context():
        db.create_all()
