"""HTTP routes for spare-part changes and the per-printer history."""

from datetime import date

from flask import abort, current_app, flash, redirect, render_template, request, session, url_for
from flask_login import login_required

from store import RecordStore, StoreError

from . import bp
from .history import (
    HistoryState,
    all_selected,
    apply_bulk_delete,
    build_history,
    cancel_selection,
    restrict_selection,
    start_selection,
    toggle_select_all,
    toggle_selection,
    with_view,
)


# ---------- Утилиты ----------
def _parse_int(value: str | None, default: int) -> int:
    try:
        return int((value or "").strip())
    except ValueError:
        return default


def _parse_date(value: str | None) -> date | None:
    value = (value or "").strip()
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _state_key(printer_id: int) -> str:
    return f"history:{printer_id}"


def _load_state(printer_id: int) -> HistoryState:
    return HistoryState.from_dict(session.get(_state_key(printer_id)))


def _save_state(printer_id: int, state: HistoryState) -> None:
    session[_state_key(printer_id)] = state.to_dict()


def _history_context(store: RecordStore, printer_id: int):
    printer = store.get_record("printers", printer_id)
    if printer is None:
        abort(404)
    changes = store.list_records(
        "spare_part_changes", filters={"printer_id": printer_id}, order=[("change_date", True)]
    )
    return printer, changes


def _visible_ids(changes, printer, state: HistoryState) -> list[int]:
    return [e.id for e in build_history(changes, printer.counter, state)]


# ---------- Новая замена ----------
@bp.route('/new', methods=['GET', 'POST'])
@login_required
def new_change():
    store = RecordStore.for_request()
    printers = store.list_records("printers", order=[("name", False)])
    parts = store.list_records("spare_parts", order=[("high_rotation", True), ("code", False)])

    keyword = request.args.get('q', '').strip().lower()
    if keyword:
        parts = [p for p in parts if keyword in p.code.lower() or keyword in p.description.lower()]

    if request.method == 'POST':
        printer_id = _parse_int(request.form.get('printer_id'), 0)
        part_id = _parse_int(request.form.get('spare_part_id'), 0)
        printer = store.get_record("printers", printer_id) if printer_id else None
        part = store.get_record("spare_parts", part_id) if part_id else None

        if printer is None or part is None:
            flash('Select a printer and a spare part.', 'warning')
            return redirect(url_for('changes.new_change', printer=printer_id or None))

        change_date = _parse_date(request.form.get('change_date'))
        if change_date is None:
            flash('Invalid date.', 'warning')
            return redirect(url_for('changes.new_change', printer=printer.id))

        quantity = _parse_int(request.form.get('quantity'), 1)
        try:
            store.insert_record("spare_part_changes", {
                "printer_id": printer.id,
                "spare_part_id": part.id,
                "change_date": change_date,
                "printer_counter": _parse_int(request.form.get('printer_counter'), 0),
                "quantity": quantity if quantity > 0 else 1,
                "detail": (request.form.get('detail') or '').strip() or None,
            })
        except StoreError as err:
            flash(err.message, 'danger')
            return redirect(url_for('changes.new_change', printer=printer.id))

        flash(f'Change of "{part.code}" added to {printer.name}.', 'success')
        return redirect(url_for('changes.new_change', printer=printer.id))

    selected = _parse_int(request.args.get('printer'), 0)
    selected_printer = next((p for p in printers if p.id == selected), None)
    return render_template(
        'changes/new.html',
        printers=printers,
        parts=parts,
        selected_printer=selected_printer,
        today=date.today().isoformat(),
        q=keyword,
    )


@bp.route('/<int:change_id>/delete', methods=['POST'])
@login_required
def delete_change(change_id):
    store = RecordStore.for_request()
    change = store.get_record("spare_part_changes", change_id)
    if change is None:
        abort(404)
    printer_id = change.printer_id
    try:
        store.delete_record("spare_part_changes", change_id)
    except StoreError as err:
        flash(err.message, 'danger')
    else:
        flash('Change deleted.', 'success')
    return redirect(url_for('changes.history', printer_id=printer_id))


# ---------- История по принтеру ----------
@bp.route('/printer/<int:printer_id>/history')
@login_required
def history(printer_id):
    store = RecordStore.for_request()
    printer, changes = _history_context(store, printer_id)

    state = with_view(_load_state(printer_id), request.args.get('sort'), request.args.get('rotation'))
    entries = build_history(changes, printer.counter, state)
    visible_ids = [e.id for e in entries]
    state = restrict_selection(state, visible_ids)
    _save_state(printer_id, state)

    return render_template(
        'changes/history.html',
        printer=printer,
        entries=entries,
        state=state,
        everything_selected=bool(visible_ids) and all_selected(state, visible_ids),
    )


@bp.route('/printer/<int:printer_id>/history/select', methods=['POST'])
@login_required
def history_select(printer_id):
    """Selection actions: start, cancel, toggle one row, toggle all visible rows."""
    store = RecordStore.for_request()
    printer, changes = _history_context(store, printer_id)
    state = _load_state(printer_id)
    action = request.form.get('action')

    if action == 'start':
        state = start_selection(state)
    elif action == 'cancel':
        state = cancel_selection(state)
    elif action == 'toggle':
        change_id = _parse_int(request.form.get('change_id'), 0)
        if change_id in _visible_ids(changes, printer, state):
            state = toggle_selection(state, change_id)
    elif action == 'all':
        state = toggle_select_all(state, _visible_ids(changes, printer, state))
    else:
        abort(400)

    _save_state(printer_id, state)
    return redirect(url_for('changes.history', printer_id=printer_id))


@bp.route('/printer/<int:printer_id>/history/delete', methods=['POST'])
@login_required
def history_delete(printer_id):
    store = RecordStore.for_request()
    printer, changes = _history_context(store, printer_id)
    # plain ids: the ORM rows are expired once the delete commits
    change_ids = [c.id for c in changes]
    state = _load_state(printer_id)
    state = restrict_selection(state, _visible_ids(changes, printer, state))
    if not state.selected:
        flash('Nothing selected.', 'warning')
        return redirect(url_for('changes.history', printer_id=printer_id))

    ids = sorted(state.selected)
    try:
        store.delete_record("spare_part_changes", ids)
    except StoreError as err:
        # selection is kept so the user can try again
        current_app.logger.warning("Bulk delete on printer %s failed: %s", printer_id, err.message)
        flash(err.message, 'danger')
        return redirect(url_for('changes.history', printer_id=printer_id))

    _, state = apply_bulk_delete(change_ids, state, ids)
    _save_state(printer_id, state)
    flash(f'{len(ids)} change(s) deleted.', 'success')
    return redirect(url_for('changes.history', printer_id=printer_id))
