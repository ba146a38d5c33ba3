"""CSV / Excel import of printers and spare parts.

The text is parsed into rows of string fields, the header row is matched
against a set of accepted column names, and each data row becomes one insert
request. A bad row never stops the import: it is reported in
``ImportResult.errors`` with its row number in the file (header = row 1).
Only file-level problems raise ``ImportStructureError``.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from openpyxl import load_workbook

from store import StoreError

DEFAULT_COLOR = "#3b82f6"
AFFIRMATIVE = {"si", "sí", "yes", "true", "1", "x"}
SEPARATORS = {",", ";"}


class ImportStructureError(Exception):
    """The file cannot be imported at all."""


class RowError(Exception):
    """A single data row was rejected before reaching the store."""


@dataclass
class ImportResult:
    success_count: int = 0
    errors: list[str] = field(default_factory=list)


# ---------- parsing ----------
def parse_csv(text: str) -> list[list[str]]:
    """Split ``text`` into rows of trimmed fields.

    Fields are separated by ``,`` or ``;`` outside of double quotes. A quote
    character only toggles the quoted state; ``""`` is not unescaped.
    """
    text = text.strip()
    if not text:
        return []

    rows = []
    for line in text.replace("\r\n", "\n").split("\n"):
        values = []
        current = []
        in_quotes = False
        for char in line:
            if char == '"':
                in_quotes = not in_quotes
            elif char in SEPARATORS and not in_quotes:
                values.append("".join(current).strip())
                current = []
            else:
                current.append(char)
        values.append("".join(current).strip())
        rows.append(values)
    return rows


def decode_upload(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ImportStructureError("The file is not valid UTF-8 text") from None


def rows_from_xlsx(stream) -> list[list[str]]:
    """Read the active worksheet into the same shape ``parse_csv`` returns."""
    try:
        wb = load_workbook(stream, read_only=True, data_only=True)
    except Exception as exc:  # openpyxl raises several unrelated types
        raise ImportStructureError(f"Could not read the Excel file: {exc}") from exc

    rows = []
    try:
        for row in wb.active.iter_rows(values_only=True):
            cells = []
            for value in row:
                if value is None:
                    cells.append("")
                elif isinstance(value, float) and value.is_integer():
                    cells.append(str(int(value)))
                elif isinstance(value, bool):
                    cells.append("1" if value else "0")
                else:
                    cells.append(str(value).strip())
            rows.append(cells)
    finally:
        wb.close()

    while rows and not any(rows[-1]):
        rows.pop()
    return rows


# ---------- targets ----------
def _cell(row: list[str], idx: Optional[int]) -> str:
    if idx is None or idx >= len(row):
        return ""
    return row[idx].strip()


def _build_printer(row: list[str], columns: dict) -> dict:
    name = _cell(row, columns["name"])
    if not name:
        raise RowError("empty name, skipped")

    counter = 0
    if columns["counter"] is not None:
        digits = "".join(ch for ch in _cell(row, columns["counter"]) if ch.isdigit())
        counter = int(digits) if digits else 0

    color = DEFAULT_COLOR
    if columns["color"] is not None:
        value = _cell(row, columns["color"])
        if value.startswith("#"):
            color = value

    return {"name": name, "counter": counter, "color": color}


def _build_spare_part(row: list[str], columns: dict) -> dict:
    code = _cell(row, columns["code"]).upper()
    description = _cell(row, columns["description"])
    if not code or not description:
        raise RowError("empty code or description, skipped")

    high_rotation = False
    if columns["high_rotation"] is not None:
        high_rotation = _cell(row, columns["high_rotation"]).lower() in AFFIRMATIVE

    return {"code": code, "description": description, "high_rotation": high_rotation}


def _printer_rejection(fields: dict, err: StoreError) -> str:
    return err.message


def _spare_part_rejection(fields: dict, err: StoreError) -> str:
    if err.is_unique_violation:
        return f"code '{fields['code']}' already exists"
    return err.message


@dataclass(frozen=True)
class ImportTarget:
    """One kind of import: where rows go and how a row is read."""

    kind: str
    collection: str
    synonyms: dict[str, tuple[str, ...]]
    required: tuple[str, ...]
    build: Callable[[list[str], dict], dict]
    rejection: Callable[[dict, StoreError], str]

    def locate_columns(self, header: Iterable[str]) -> dict[str, Optional[int]]:
        headers = [h.lower().strip() for h in header]
        columns = {}
        for column, names in self.synonyms.items():
            columns[column] = next(
                (i for i, h in enumerate(headers) if any(n in h for n in names)),
                None,
            )
        for column in self.required:
            if columns[column] is None:
                names = "' or '".join(self.synonyms[column][:2])
                raise ImportStructureError(f"Column '{names}' was not found in the file")
        return columns


PRINTERS = ImportTarget(
    kind="printers",
    collection="printers",
    synonyms={
        "name": ("nombre", "name", "impresora", "printer"),
        "counter": ("contador", "counter", "copias", "copies"),
        "color": ("color",),
    },
    required=("name",),
    build=_build_printer,
    rejection=_printer_rejection,
)

SPARE_PARTS = ImportTarget(
    kind="spare_parts",
    collection="spare_parts",
    synonyms={
        "code": ("codigo", "code", "código"),
        "description": ("descripcion", "description", "nombre", "name", "descripción"),
        "high_rotation": ("rotacion", "rotation", "alta", "high"),
    },
    required=("code", "description"),
    build=_build_spare_part,
    rejection=_spare_part_rejection,
)

TARGETS = {t.kind: t for t in (PRINTERS, SPARE_PARTS)}


# ---------- import ----------
def run_import(rows: list[list[str]], kind: str, store) -> ImportResult:
    """Insert every data row of ``rows`` into the collection for ``kind``.

    Rows are sent one at a time, in file order; a store rejection is recorded
    and the next row is processed.
    """
    target = TARGETS.get(kind)
    if target is None:
        raise ImportStructureError(f"Unknown import type '{kind}'")
    if store.get_current_user() is None:
        raise ImportStructureError("You must be signed in to import")
    if len(rows) < 2:
        raise ImportStructureError("The file needs a header row and at least one data row")

    columns = target.locate_columns(rows[0])
    result = ImportResult()

    for row_number, row in enumerate(rows[1:], start=2):
        if not any(cell.strip() for cell in row):
            continue
        try:
            fields = target.build(row, columns)
        except RowError as err:
            result.errors.append(f"Row {row_number}: {err}")
            continue
        try:
            store.insert_record(target.collection, fields)
        except StoreError as err:
            result.errors.append(f"Row {row_number}: {target.rejection(fields, err)}")
            continue
        result.success_count += 1

    return result


def preview_errors(errors: list[str], limit: int = 10) -> tuple[list[str], int]:
    """First ``limit`` errors and how many were left out."""
    return errors[:limit], max(len(errors) - limit, 0)


# ---------- templates ----------
TEMPLATES = {
    "printers": (
        "plantilla_impresoras.csv",
        "nombre,contador,color\n"
        "Impresora Oficina 1,50000,#3b82f6\n"
        "Impresora Producción,120000,#22c55e",
    ),
    "spare_parts": (
        "plantilla_repuestos.csv",
        "codigo,descripcion,alta_rotacion\n"
        "TONER-001,Toner Negro Primera Marca,si\n"
        "DRUM-001,Drum Original,no\n"
        "FUSER-001,Fusor Compatible,si",
    ),
}
