"""Import from CSV/Excel, template downloads and JSON backup."""

import io
import json
from datetime import datetime, timezone

from flask import abort, current_app, flash, make_response, redirect, render_template, request, url_for
from flask_login import login_required

from store import RecordStore, StoreError

from . import bp
from .backup import backup_filename, build_backup
from .importer import (
    TARGETS,
    TEMPLATES,
    ImportStructureError,
    decode_upload,
    parse_csv,
    preview_errors,
    rows_from_xlsx,
    run_import,
)


@bp.route('/')
@login_required
def index():
    return render_template('settings/index.html', kinds=list(TARGETS))


@bp.route('/import', methods=['POST'])
@login_required
def import_file():
    kind = request.form.get('kind', 'printers')
    file = request.files.get('file')
    if not file or not file.filename:
        flash("No file uploaded.", 'warning')
        return redirect(url_for('settings.index'))

    filename = file.filename.lower()
    try:
        if filename.endswith('.xlsx'):
            rows = rows_from_xlsx(io.BytesIO(file.stream.read()))
        else:
            rows = parse_csv(decode_upload(file.stream.read()))
        result = run_import(rows, kind, RecordStore.for_request())
    except ImportStructureError as err:
        flash(f"❌ {err}", 'danger')
        return redirect(url_for('settings.index'))

    current_app.logger.info(
        "Imported %s %s from %s, %s row errors", result.success_count, kind, filename, len(result.errors)
    )
    shown, hidden = preview_errors(result.errors, current_app.config.get("IMPORT_ERROR_PREVIEW", 10))
    return render_template(
        'settings/index.html',
        kinds=list(TARGETS),
        kind=kind,
        result=result,
        shown_errors=shown,
        hidden_errors=hidden,
    )


@bp.route('/templates/<kind>.csv')
@login_required
def download_template(kind):
    if kind not in TEMPLATES:
        abort(404)
    filename, content = TEMPLATES[kind]
    resp = make_response(content.encode("utf-8"))
    resp.headers["Content-Type"] = "text/csv; charset=utf-8"
    resp.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return resp


@bp.route('/backup')
@login_required
def backup():
    now = datetime.now(timezone.utc)
    try:
        document = build_backup(RecordStore.for_request(), now=now)
    except StoreError as err:
        current_app.logger.warning("Backup aborted: %s", err.message)
        flash(f"❌ Backup failed: {err.message}", 'danger')
        return redirect(url_for('settings.index'))

    current_app.logger.info("Backup exported: %s", document["summary"])
    data = json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")
    resp = make_response(data)
    resp.headers["Content-Type"] = "application/json; charset=utf-8"
    resp.headers["Content-Disposition"] = f"attachment; filename={backup_filename(now)}"
    return resp
