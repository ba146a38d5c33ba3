# ui_routes.py: дашборд, счётчики и последние замены
from flask import Blueprint, current_app, flash, render_template
from flask_login import login_required

from store import RecordStore, StoreError

ui = Blueprint("ui", __name__)

@ui.route("/")
@login_required
def home():
    store = RecordStore.for_request()
    limit = current_app.config.get("RECENT_CHANGES_LIMIT", 5)
    try:
        printers_count = store.count("printers")
        parts_count = store.count("spare_parts")
        changes_count = store.count("spare_part_changes")
        recent = store.list_records(
            "spare_part_changes",
            order=[("change_date", True), ("created_at", True)],
            limit=limit,
        )
    except StoreError as err:
        flash(err.message, "danger")
        printers_count = parts_count = changes_count = 0
        recent = []

    return render_template(
        "home.html",
        printers_count=printers_count,
        parts_count=parts_count,
        changes_count=changes_count,
        recent=recent,
    )
