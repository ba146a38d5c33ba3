"""SQLAlchemy models for the printers domain."""

from datetime import datetime

from extensions import db

DEFAULT_COLOR = "#3b82f6"


class Printer(db.Model):
    """A tracked device with a running page/copy counter."""

    __tablename__ = "printers"

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    counter = db.Column(db.BigInteger, nullable=False, default=0)
    color = db.Column(db.String(16), nullable=False, default=DEFAULT_COLOR)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.owner_id,
            "name": self.name,
            "counter": self.counter,
            "color": self.color,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Printer {self.name}: {self.counter}>"
