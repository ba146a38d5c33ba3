"""Printer operations that span more than one store request."""

import re

from store import StoreError

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
DIGITS = re.compile(r"[0-9]+")


class CascadeDeleteError(Exception):
    """Deleting a printer together with its history failed."""


def parse_counter(value: str | None) -> int:
    value = (value or "").strip()
    if not DIGITS.fullmatch(value):
        raise ValueError("Please enter a valid number")
    return int(value)


def is_hex_color(value: str | None) -> bool:
    return bool(value and HEX_COLOR.match(value))


def delete_printer(store, printer_id: int) -> None:
    """Delete the printer's changes, then the printer.

    There is no transaction across the two requests. If the changes cannot be
    deleted the printer is left untouched.
    """
    try:
        store.delete_matching("spare_part_changes", {"printer_id": printer_id})
    except StoreError as err:
        raise CascadeDeleteError(
            f"Could not delete the printer history, the printer was kept: {err.message}"
        ) from err

    try:
        deleted = store.delete_record("printers", printer_id)
    except StoreError as err:
        raise CascadeDeleteError(
            f"The history was deleted but the printer could not be: {err.message}"
        ) from err
    if not deleted:
        raise CascadeDeleteError("Printer not found")
