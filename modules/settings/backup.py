"""Full JSON backup of the signed-in user's data."""

from datetime import datetime, timezone

from utils import format_date

BACKUP_VERSION = "1.0"


def build_backup(store, now: datetime | None = None) -> dict:
    """Collect printers, spare parts and changes into one document.

    A failing read raises ``StoreError``; nothing partial is returned.
    """
    now = now or datetime.now(timezone.utc)

    printers = store.list_records("printers", order=[("name", False)])
    spare_parts = store.list_records("spare_parts", order=[("code", False)])
    changes = store.list_records("spare_part_changes", order=[("change_date", True)])

    return {
        "exportDate": now.isoformat(),
        "exportDateFormatted": format_date(now),
        "version": BACKUP_VERSION,
        "data": {
            "printers": [p.to_dict() for p in printers],
            "spareParts": [s.to_dict() for s in spare_parts],
            "sparePartChanges": [c.to_dict(enrich=True) for c in changes],
        },
        "summary": {
            "totalPrinters": len(printers),
            "totalSpareParts": len(spare_parts),
            "totalChanges": len(changes),
        },
    }


def backup_filename(now: datetime) -> str:
    return f"printermanager-backup-{now:%Y%m%d}.json"
