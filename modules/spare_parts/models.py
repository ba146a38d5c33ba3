"""SQLAlchemy models for the spare parts domain."""

from datetime import datetime

from sqlalchemy import UniqueConstraint

from extensions import db


class SparePart(db.Model):
    """Catalog item that can be replaced in a printer."""

    __tablename__ = "spare_parts"

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    code = db.Column(db.String(64), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    high_rotation = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("owner_id", "code", name="uq_spare_parts_owner_code"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.owner_id,
            "code": self.code,
            "description": self.description,
            "high_rotation": bool(self.high_rotation),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<SparePart {self.code}: {self.description}>"
