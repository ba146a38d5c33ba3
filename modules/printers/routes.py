"""HTTP routes for the printers domain."""

from datetime import datetime

from flask import abort, current_app, flash, redirect, render_template, request, url_for
from flask_login import login_required

from modules.changes.history import counter_delta
from store import RecordStore, StoreError

from . import bp
from .services import CascadeDeleteError, delete_printer, is_hex_color, parse_counter

PRESET_COLORS = [
    "#3b82f6", "#ef4444", "#22c55e", "#f59e0b", "#8b5cf6",
    "#ec4899", "#06b6d4", "#f97316", "#6366f1", "#84cc16",
]


def _get_printer_or_404(store: RecordStore, printer_id: int):
    printer = store.get_record("printers", printer_id)
    if printer is None:
        abort(404)
    return printer


@bp.route('/')
@login_required
def list_printers():
    printers = RecordStore.for_request().list_records("printers", order=[("name", False)])
    return render_template('printers/list.html', printers=printers)


@bp.route('/new', methods=['GET', 'POST'])
@login_required
def new_printer():
    default_color = current_app.config.get("DEFAULT_PRINTER_COLOR", "#3b82f6")
    if request.method == 'POST':
        name = (request.form.get('name') or '').strip()
        counter_raw = (request.form.get('counter') or '0').strip() or '0'
        color = (request.form.get('color') or default_color).strip()

        if not name:
            flash('Name is required.', 'warning')
            return render_template('printers/new.html', form=request.form, colors=PRESET_COLORS), 400
        try:
            counter = parse_counter(counter_raw)
        except ValueError as err:
            flash(str(err), 'warning')
            return render_template('printers/new.html', form=request.form, colors=PRESET_COLORS), 400
        if not is_hex_color(color):
            color = default_color

        try:
            printer = RecordStore.for_request().insert_record(
                "printers", {"name": name, "counter": counter, "color": color}
            )
        except StoreError as err:
            flash(err.message, 'danger')
            return render_template('printers/new.html', form=request.form, colors=PRESET_COLORS), 400

        flash('✅ Printer added successfully.', 'success')
        return redirect(url_for('printers.view_printer', printer_id=printer.id))

    return render_template('printers/new.html', form={"color": default_color}, colors=PRESET_COLORS)


@bp.route('/<int:printer_id>')
@login_required
def view_printer(printer_id):
    store = RecordStore.for_request()
    printer = _get_printer_or_404(store, printer_id)
    recent = store.list_records(
        "spare_part_changes",
        filters={"printer_id": printer.id},
        order=[("change_date", True)],
        limit=current_app.config.get("RECENT_CHANGES_LIMIT", 5),
    )
    rows = [(c, counter_delta(printer.counter, c.printer_counter)) for c in recent]
    return render_template('printers/detail.html', printer=printer, rows=rows, colors=PRESET_COLORS)


@bp.route('/<int:printer_id>/counter', methods=['POST'])
@login_required
def update_counter(printer_id):
    store = RecordStore.for_request()
    _get_printer_or_404(store, printer_id)
    try:
        counter = parse_counter(request.form.get('counter'))
        store.update_record("printers", printer_id, {"counter": counter, "updated_at": datetime.utcnow()})
    except ValueError as err:
        flash(str(err), 'warning')
    except StoreError as err:
        flash(err.message, 'danger')
    else:
        flash('Counter updated.', 'success')
    return redirect(url_for('printers.view_printer', printer_id=printer_id))


@bp.route('/<int:printer_id>/name', methods=['POST'])
@login_required
def rename_printer(printer_id):
    store = RecordStore.for_request()
    printer = _get_printer_or_404(store, printer_id)
    name = (request.form.get('name') or '').strip()
    if not name:
        flash('Name is required.', 'warning')
    elif name != printer.name:
        try:
            store.update_record("printers", printer_id, {"name": name})
        except StoreError as err:
            flash(err.message, 'danger')
        else:
            flash('Name updated.', 'success')
    return redirect(url_for('printers.view_printer', printer_id=printer_id))


@bp.route('/<int:printer_id>/color', methods=['POST'])
@login_required
def recolor_printer(printer_id):
    store = RecordStore.for_request()
    printer = _get_printer_or_404(store, printer_id)
    color = (request.form.get('color') or '').strip()
    if not is_hex_color(color):
        flash('Color must look like #rrggbb.', 'warning')
    elif color != printer.color:
        try:
            store.update_record("printers", printer_id, {"color": color})
        except StoreError as err:
            flash(err.message, 'danger')
    return redirect(url_for('printers.view_printer', printer_id=printer_id))


@bp.route('/<int:printer_id>/delete', methods=['POST'])
@login_required
def remove_printer(printer_id):
    store = RecordStore.for_request()
    printer = _get_printer_or_404(store, printer_id)
    name = printer.name
    try:
        delete_printer(store, printer_id)
    except CascadeDeleteError as err:
        current_app.logger.warning("Printer %s delete aborted: %s", printer_id, err)
        flash(f'❌ {err}', 'danger')
        return redirect(url_for('printers.view_printer', printer_id=printer_id))

    flash(f'✅ Printer "{name}" and its history were deleted.', 'success')
    return redirect(url_for('printers.list_printers'))
