from datetime import datetime, UTC
import uuid

from web.extensions import db


class MachineProfile(db.Model):
    """Default coating settings and work area (singleton - one row)."""

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100))

    # Work area in canvas units
    work_area_width = db.Column(db.Float)
    work_area_height = db.Column(db.Float)

    # CoatingSettings stored as camelCase JSON, e.g.
    # {"coatingSpeed": 1000, "moveSpeed": 2000, "safeHeight": 80, "coatingHeight": 20, ...}
    coating_settings = db.Column(db.JSON, nullable=False, default=dict)


class GCodeSnippet(db.Model):
    """User-authored G-code text injected at a generation hook."""

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), nullable=False)
    hook = db.Column(db.String(20), nullable=False)  # 'beforeAll', 'beforePath', 'afterPath', 'afterAll', ...
    enabled = db.Column(db.Boolean, nullable=False, default=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    template = db.Column(db.Text, nullable=False, default='')
    description = db.Column(db.String(200))


class Project(db.Model):
    """Coating project saved from the editor."""

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    version = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC))
    modified_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    # Editor shape configs stored as JSON (camelCase keys, canvas units)
    shapes = db.Column(db.JSON, nullable=False, default=list)

    # Optional per-project overrides of the machine profile
    coating_settings = db.Column(db.JSON, nullable=True)
    work_area_width = db.Column(db.Float, nullable=True)
    work_area_height = db.Column(db.Float, nullable=True)
