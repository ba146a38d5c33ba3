"""SQLAlchemy models for spare-part replacement events."""

from datetime import datetime

from extensions import db


class Change(db.Model):
    """One spare-part replacement on a printer, with the counter at that moment.

    Changes are never edited; they are created by the add-change form and
    removed individually, in bulk, or together with their printer.
    """

    __tablename__ = "spare_part_changes"

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    printer_id = db.Column(db.Integer, db.ForeignKey("printers.id"), nullable=False, index=True)
    spare_part_id = db.Column(
        db.Integer,
        db.ForeignKey("spare_parts.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    change_date = db.Column(db.Date, nullable=False)
    printer_counter = db.Column(db.BigInteger, nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    detail = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # read-only navigation; deletes always go through the store by id
    printer = db.relationship("Printer", lazy="joined", viewonly=True)
    spare_part = db.relationship("SparePart", lazy="joined", viewonly=True)

    @property
    def high_rotation(self) -> bool:
        return bool(self.spare_part is not None and self.spare_part.high_rotation)

    def to_dict(self, enrich: bool = False) -> dict:
        data = {
            "id": self.id,
            "user_id": self.owner_id,
            "printer_id": self.printer_id,
            "spare_part_id": self.spare_part_id,
            "change_date": self.change_date.isoformat() if self.change_date else None,
            "printer_counter": self.printer_counter,
            "quantity": self.quantity,
            "detail": self.detail,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if enrich:
            data["printers"] = {"name": self.printer.name} if self.printer else None
            data["spare_parts"] = (
                {"code": self.spare_part.code, "description": self.spare_part.description}
                if self.spare_part else None
            )
        return data

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Change printer={self.printer_id} part={self.spare_part_id} {self.change_date}>"
