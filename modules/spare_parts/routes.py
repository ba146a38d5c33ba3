"""HTTP routes for the spare parts domain."""

from flask import abort, current_app, flash, redirect, render_template, request, url_for
from flask_login import login_required

from store import RecordStore, StoreError

from . import bp


def _already_exists(code: str) -> str:
    return f"A spare part with code '{code}' already exists."


@bp.route('/')
@login_required
def list_parts():
    keyword = request.args.get('q', '').strip()
    parts = RecordStore.for_request().list_records(
        "spare_parts", order=[("high_rotation", True), ("code", False)]
    )
    if keyword:
        needle = keyword.lower()
        parts = [p for p in parts if needle in p.code.lower() or needle in p.description.lower()]
    return render_template('spare_parts/list.html', parts=parts, q=keyword, count=len(parts))


@bp.route('/new', methods=['GET', 'POST'])
@login_required
def new_part():
    if request.method == 'POST':
        code = (request.form.get('code') or '').strip().upper()
        description = (request.form.get('description') or '').strip()
        high_rotation = request.form.get('high_rotation') in ('on', '1', 'true')

        if not code or not description:
            flash('Code and description are required.', 'warning')
            return render_template('spare_parts/new.html', form=request.form), 400

        try:
            RecordStore.for_request().insert_record(
                "spare_parts",
                {"code": code, "description": description, "high_rotation": high_rotation},
            )
        except StoreError as err:
            flash(_already_exists(code) if err.is_unique_violation else err.message, 'danger')
            return render_template('spare_parts/new.html', form=request.form), 400

        flash('✅ Spare part added successfully.', 'success')
        return redirect(url_for('spare_parts.list_parts'))

    return render_template('spare_parts/new.html', form={})


@bp.route('/<int:part_id>/edit', methods=['POST'])
@login_required
def edit_part(part_id):
    store = RecordStore.for_request()
    if store.get_record("spare_parts", part_id) is None:
        abort(404)

    code = (request.form.get('code') or '').strip()
    description = (request.form.get('description') or '').strip()
    high_rotation = request.form.get('high_rotation') in ('on', '1', 'true')
    if not code or not description:
        flash('Code and description are required.', 'warning')
        return redirect(url_for('spare_parts.list_parts'))

    try:
        store.update_record(
            "spare_parts", part_id,
            {"code": code, "description": description, "high_rotation": high_rotation},
        )
    except StoreError as err:
        flash(_already_exists(code) if err.is_unique_violation else err.message, 'danger')
    else:
        flash('Spare part updated successfully.', 'success')
    return redirect(url_for('spare_parts.list_parts'))


@bp.route('/<int:part_id>/delete', methods=['POST'])
@login_required
def delete_part(part_id):
    store = RecordStore.for_request()
    part = store.get_record("spare_parts", part_id)
    if part is None:
        abort(404)

    code = part.code
    try:
        store.delete_record("spare_parts", part_id)
    except StoreError as err:
        # referenced by changes: the store's message is shown as is
        current_app.logger.warning("Spare part %s not deleted: %s", code, err.message)
        flash(f'❌ {err.message}', 'danger')
    else:
        flash(f'✅ Spare part {code} deleted.', 'success')
    return redirect(url_for('spare_parts.list_parts'))
