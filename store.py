"""Record store gateway.

Collection-style access to printers, spare parts and changes, scoped to the
signed-in owner. Every mutation is one transaction; database constraint
failures come back as ``StoreError`` carrying a Postgres-style error code so
callers can tell a duplicate code (``23505``) from a referenced row
(``23503``) or anything else.
"""

from typing import Any, Iterable, Mapping, Sequence

from flask_login import current_user, logout_user
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
INSUFFICIENT_PRIVILEGE = "42501"
NO_ROWS = "PGRST116"


class StoreError(Exception):
    """A rejected store request."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION

    @property
    def is_foreign_key_violation(self) -> bool:
        return self.code == FOREIGN_KEY_VIOLATION


def _integrity_code(exc: IntegrityError) -> str | None:
    pgcode = getattr(exc.orig, "pgcode", None)
    if pgcode:
        return pgcode
    text = str(exc.orig).lower()
    if "unique" in text:
        return UNIQUE_VIOLATION
    if "foreign key" in text:
        return FOREIGN_KEY_VIOLATION
    if "not null" in text:
        return NOT_NULL_VIOLATION
    return None


class RecordStore:
    def __init__(self, user=None) -> None:
        self._user = user

    @classmethod
    def for_request(cls) -> "RecordStore":
        """Bind the store to the Flask-Login user of the current request."""
        if current_user and current_user.is_authenticated:
            return cls(current_user._get_current_object())
        return cls(None)

    # ---------- session ----------
    def get_current_user(self):
        return self._user

    def sign_out(self) -> None:
        logout_user()
        self._user = None

    # ---------- helpers ----------
    def _model(self, collection: str):
        # imported lazily: the blueprint packages import this module
        from modules.changes.models import Change
        from modules.printers.models import Printer
        from modules.spare_parts.models import SparePart

        models = {"printers": Printer, "spare_parts": SparePart, "spare_part_changes": Change}
        if collection not in models:
            raise StoreError(f"Unknown collection '{collection}'")
        return models[collection]

    def _owner_id(self) -> int:
        if self._user is None:
            raise StoreError("Not authenticated", code=INSUFFICIENT_PRIVILEGE)
        return self._user.id

    def _scoped(self, stmt, model, filters: Mapping[str, Any] | None):
        stmt = stmt.where(model.owner_id == self._owner_id())
        for field, value in (filters or {}).items():
            column = getattr(model, field)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        return stmt

    def _commit(self) -> None:
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise StoreError(str(exc.orig), code=_integrity_code(exc)) from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StoreError(str(exc)) from exc

    # ---------- reads ----------
    def list_records(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order: Sequence[tuple[str, bool]] | None = None,
        limit: int | None = None,
    ) -> list:
        """Rows of ``collection``; ``order`` is a list of ``(field, descending)``."""
        model = self._model(collection)
        stmt = self._scoped(select(model), model, filters)
        for field, descending in order or ():
            column = getattr(model, field)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            return list(db.session.execute(stmt).unique().scalars())
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def get_record(self, collection: str, record_id: int):
        rows = self.list_records(collection, filters={"id": record_id})
        return rows[0] if rows else None

    def count(self, collection: str) -> int:
        model = self._model(collection)
        stmt = self._scoped(select(func.count()).select_from(model), model, None)
        try:
            return db.session.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    # ---------- writes ----------
    def insert_record(self, collection: str, fields: Mapping[str, Any]):
        model = self._model(collection)
        record = model(**fields)
        record.owner_id = self._owner_id()
        db.session.add(record)
        self._commit()
        return record

    def update_record(self, collection: str, record_id: int, fields: Mapping[str, Any]):
        record = self.get_record(collection, record_id)
        if record is None:
            raise StoreError("The result contains 0 rows", code=NO_ROWS)
        for field, value in fields.items():
            setattr(record, field, value)
        self._commit()
        return record

    def delete_record(self, collection: str, ids: int | Iterable[int]) -> int:
        """Delete one id or a set of ids in a single request."""
        if isinstance(ids, int):
            ids = [ids]
        return self.delete_matching(collection, {"id": list(ids)})

    def delete_matching(self, collection: str, filters: Mapping[str, Any]) -> int:
        model = self._model(collection)
        stmt = self._scoped(delete(model), model, filters)
        try:
            result = db.session.execute(stmt.execution_options(synchronize_session=False))
        except IntegrityError as exc:
            db.session.rollback()
            raise StoreError(str(exc.orig), code=_integrity_code(exc)) from exc
        self._commit()
        db.session.expire_all()
        return result.rowcount
