"""Per-printer change history: filtering, ordering, deltas and selection.

Everything here is a pure function over plain values. The view state is an
immutable ``HistoryState``; each user action returns a new one, which the
route stores in the Flask session between requests.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Sequence

SORT_ORDERS = ("desc", "asc")
ROTATION_FILTERS = ("all", "high", "normal")


@dataclass(frozen=True)
class HistoryState:
    sort_order: str = "desc"
    rotation: str = "all"
    selecting: bool = False
    selected: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_dict(cls, data: dict | None) -> "HistoryState":
        data = data or {}
        sort_order = data.get("sort_order")
        rotation = data.get("rotation")
        return cls(
            sort_order=sort_order if sort_order in SORT_ORDERS else "desc",
            rotation=rotation if rotation in ROTATION_FILTERS else "all",
            selecting=bool(data.get("selecting", False)),
            selected=frozenset(int(i) for i in data.get("selected", ())),
        )

    def to_dict(self) -> dict:
        return {
            "sort_order": self.sort_order,
            "rotation": self.rotation,
            "selecting": self.selecting,
            "selected": sorted(self.selected),
        }


@dataclass(frozen=True)
class HistoryEntry:
    change: Any
    delta: int

    @property
    def id(self):
        return self.change.id


def counter_delta(printer_counter: int, change_counter: int) -> int:
    """Copies printed since the change. Negative when the counter went back."""
    return (printer_counter or 0) - (change_counter or 0)


def filter_changes(changes: Iterable, rotation: str) -> list:
    if rotation == "high":
        return [c for c in changes if c.high_rotation]
    if rotation == "normal":
        return [c for c in changes if not c.high_rotation]
    return list(changes)


def sort_changes(changes: Iterable, sort_order: str) -> list:
    return sorted(changes, key=lambda c: c.change_date, reverse=(sort_order == "desc"))


def build_history(changes: Iterable, printer_counter: int, state: HistoryState) -> list[HistoryEntry]:
    visible = sort_changes(filter_changes(changes, state.rotation), state.sort_order)
    return [HistoryEntry(c, counter_delta(printer_counter, c.printer_counter)) for c in visible]


# ---------- state transitions ----------
def with_view(state: HistoryState, sort_order: str | None = None, rotation: str | None = None) -> HistoryState:
    if sort_order not in SORT_ORDERS:
        sort_order = state.sort_order
    if rotation not in ROTATION_FILTERS:
        rotation = state.rotation
    return replace(state, sort_order=sort_order, rotation=rotation)


def start_selection(state: HistoryState) -> HistoryState:
    return replace(state, selecting=True, selected=frozenset())


def cancel_selection(state: HistoryState) -> HistoryState:
    return replace(state, selecting=False, selected=frozenset())


def toggle_selection(state: HistoryState, change_id: int) -> HistoryState:
    return replace(state, selected=state.selected ^ {change_id})


def all_selected(state: HistoryState, visible_ids: Sequence[int]) -> bool:
    """True when the view has rows and every one of them is selected."""
    return bool(visible_ids) and frozenset(visible_ids) <= state.selected


def toggle_select_all(state: HistoryState, visible_ids: Sequence[int]) -> HistoryState:
    """Empty the selection if every visible row is selected, otherwise select them all."""
    if all_selected(state, visible_ids):
        return replace(state, selected=frozenset())
    return replace(state, selected=frozenset(visible_ids))


def apply_bulk_delete(change_ids: Iterable[int], state: HistoryState, deleted_ids: Iterable[int]):
    """Remaining ids and the local state once the store confirmed the deletion."""
    deleted = frozenset(deleted_ids)
    remaining = [i for i in change_ids if i not in deleted]
    return remaining, cancel_selection(state)


def restrict_selection(state: HistoryState, visible_ids: Iterable[int]) -> HistoryState:
    """Drop selected ids that the current filter hides."""
    return replace(state, selected=state.selected & frozenset(visible_ids))
