from datetime import date

import pytest

from store import RecordStore


def _authenticate(client, user_id: int) -> None:
    with client.session_transaction() as s:
        s["_user_id"] = str(user_id)
        s["_fresh"] = True


@pytest.fixture()
def catalog(app, user):
    with app.app_context():
        store = RecordStore(user)
        printer = store.insert_record("printers", {"name": "Oficina", "counter": 1500})
        toner = store.insert_record("spare_parts", {"code": "TONER-1", "description": "Toner", "high_rotation": True})
        drum = store.insert_record("spare_parts", {"code": "DRUM-1", "description": "Drum"})
        return {"printer": printer.id, "toner": toner.id, "drum": drum.id}


def _add(app, user, catalog, part, day, counter):
    with app.app_context():
        return RecordStore(user).insert_record("spare_part_changes", {
            "printer_id": catalog["printer"],
            "spare_part_id": catalog[part],
            "change_date": date(2024, 6, day),
            "printer_counter": counter,
        }).id


def test_add_change_form_prefills_counter(client, user, catalog):
    _authenticate(client, user.id)
    body = client.get(f"/changes/new?printer={catalog['printer']}").get_data(as_text=True)
    assert 'value="1500"' in body


def test_add_change(client, app, user, catalog):
    _authenticate(client, user.id)
    resp = client.post("/changes/new", data={
        "printer_id": catalog["printer"],
        "spare_part_id": catalog["toner"],
        "change_date": "2024-06-01",
        "printer_counter": "1400",
        "quantity": "2",
        "detail": "Cambio preventivo",
    })
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith(f"/changes/new?printer={catalog['printer']}")

    with app.app_context():
        (change,) = RecordStore(user).list_records("spare_part_changes")
        assert change.change_date == date(2024, 6, 1)
        assert (change.printer_counter, change.quantity, change.detail) == (1400, 2, "Cambio preventivo")


def test_add_change_defaults(client, app, user, catalog):
    _authenticate(client, user.id)
    client.post("/changes/new", data={
        "printer_id": catalog["printer"],
        "spare_part_id": catalog["drum"],
        "change_date": "",
        "printer_counter": "",
        "quantity": "",
    })
    with app.app_context():
        (change,) = RecordStore(user).list_records("spare_part_changes")
        assert change.change_date == date.today()
        assert (change.printer_counter, change.quantity, change.detail) == (0, 1, None)


def test_add_change_requires_printer_and_part(client, app, user, catalog):
    _authenticate(client, user.id)
    client.post("/changes/new", data={"printer_id": catalog["printer"], "spare_part_id": ""})
    with app.app_context():
        assert RecordStore(user).count("spare_part_changes") == 0


def test_history_filter_sort_and_delta(client, app, user, catalog):
    _add(app, user, catalog, "toner", 1, 1000)
    _add(app, user, catalog, "drum", 10, 1600)

    _authenticate(client, user.id)
    body = client.get(f"/changes/printer/{catalog['printer']}/history?sort=asc").get_data(as_text=True)
    assert "2 changes found" in body
    assert body.index("TONER-1</strong>") < body.index("DRUM-1</strong>")
    assert "Difference +500" in body
    assert "Difference -100" in body

    body = client.get(f"/changes/printer/{catalog['printer']}/history?rotation=normal").get_data(as_text=True)
    assert "1 changes found" in body
    assert "TONER-1</strong>" not in body


def _select(client, printer_id, action, **extra):
    return client.post(
        f"/changes/printer/{printer_id}/history/select",
        data={"action": action, **extra},
    )


def test_select_all_in_filter_and_bulk_delete(client, app, user, catalog):
    toner_ids = [_add(app, user, catalog, "toner", d, 1000) for d in (1, 2)]
    drum_id = _add(app, user, catalog, "drum", 3, 1000)
    printer_id = catalog["printer"]

    _authenticate(client, user.id)
    client.get(f"/changes/printer/{printer_id}/history?rotation=high")
    _select(client, printer_id, "start")
    _select(client, printer_id, "all")

    with client.session_transaction() as s:
        assert sorted(s[f"history:{printer_id}"]["selected"]) == sorted(toner_ids)

    resp = client.post(f"/changes/printer/{printer_id}/history/delete")
    assert resp.status_code == 302

    body = client.get(f"/changes/printer/{printer_id}/history").get_data(as_text=True)
    assert "0 changes found" in body
    with client.session_transaction() as s:
        assert s[f"history:{printer_id}"]["selected"] == []
        assert s[f"history:{printer_id}"]["selecting"] is False

    with app.app_context():
        remaining = RecordStore(user).list_records("spare_part_changes")
        assert [c.id for c in remaining] == [drum_id]


def test_select_all_twice_clears_selection(client, user, catalog, app):
    _add(app, user, catalog, "toner", 1, 1000)
    printer_id = catalog["printer"]

    _authenticate(client, user.id)
    _select(client, printer_id, "start")
    _select(client, printer_id, "all")
    _select(client, printer_id, "all")
    with client.session_transaction() as s:
        assert s[f"history:{printer_id}"]["selected"] == []


def test_toggle_one_and_cancel(client, user, catalog, app):
    change_id = _add(app, user, catalog, "drum", 1, 1000)
    printer_id = catalog["printer"]

    _authenticate(client, user.id)
    _select(client, printer_id, "start")
    _select(client, printer_id, "toggle", change_id=change_id)
    with client.session_transaction() as s:
        assert s[f"history:{printer_id}"]["selected"] == [change_id]

    _select(client, printer_id, "cancel")
    with client.session_transaction() as s:
        assert s[f"history:{printer_id}"]["selected"] == []


def test_delete_with_empty_selection_does_nothing(client, user, catalog, app):
    _add(app, user, catalog, "drum", 1, 1000)
    _authenticate(client, user.id)
    client.post(f"/changes/printer/{catalog['printer']}/history/delete")
    with app.app_context():
        assert RecordStore(user).count("spare_part_changes") == 1


def test_delete_single_change(client, user, catalog, app):
    change_id = _add(app, user, catalog, "drum", 1, 1000)
    _authenticate(client, user.id)
    resp = client.post(f"/changes/{change_id}/delete")
    assert resp.headers["Location"].endswith(f"/changes/printer/{catalog['printer']}/history")
    with app.app_context():
        assert RecordStore(user).count("spare_part_changes") == 0


def test_toggle_ignores_rows_hidden_by_filter(client, user, catalog, app):
    _add(app, user, catalog, "toner", 1, 1000)
    drum_id = _add(app, user, catalog, "drum", 2, 1000)
    printer_id = catalog["printer"]

    _authenticate(client, user.id)
    client.get(f"/changes/printer/{printer_id}/history?rotation=high")
    _select(client, printer_id, "start")
    _select(client, printer_id, "toggle", change_id=drum_id)
    with client.session_transaction() as s:
        assert s[f"history:{printer_id}"]["selected"] == []

    client.post(f"/changes/printer/{printer_id}/history/delete")
    with app.app_context():
        assert RecordStore(user).count("spare_part_changes") == 2


def test_bulk_delete_only_touches_visible_rows(client, user, catalog, app):
    toner_id = _add(app, user, catalog, "toner", 1, 1000)
    drum_id = _add(app, user, catalog, "drum", 2, 1000)
    printer_id = catalog["printer"]

    _authenticate(client, user.id)
    with client.session_transaction() as s:
        s[f"history:{printer_id}"] = {
            "sort_order": "desc",
            "rotation": "high",
            "selecting": True,
            "selected": [toner_id, drum_id],
        }

    resp = client.post(f"/changes/printer/{printer_id}/history/delete")
    assert resp.status_code == 302
    with client.session_transaction() as s:
        assert s[f"history:{printer_id}"]["selected"] == []

    with app.app_context():
        remaining = RecordStore(user).list_records("spare_part_changes")
        assert [c.id for c in remaining] == [drum_id]
