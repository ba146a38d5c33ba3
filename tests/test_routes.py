def _authenticate(client, user_id: int) -> None:
    with client.session_transaction() as s:
        s["_user_id"] = str(user_id)
        s["_fresh"] = True


def test_dashboard_requires_login(client):
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code == 302
    assert "/auth/login" in resp.headers["Location"]


def test_every_dashboard_section_requires_login(client):
    for url in ("/printers/", "/spare-parts/", "/changes/new", "/settings/", "/settings/backup"):
        resp = client.get(url, follow_redirects=False)
        assert resp.status_code == 302, url
        assert "/auth/login" in resp.headers["Location"]


def test_login_page_available(client):
    assert client.get("/auth/login").status_code == 200


def test_login_with_password(client, user):
    resp = client.post("/auth/login", data={"username": "maria", "password": "secret"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/")
    assert client.get("/").status_code == 200


def test_wrong_password_stays_on_login(client, user):
    resp = client.post("/auth/login", data={"username": "maria", "password": "nope"})
    assert resp.status_code == 200
    assert "Invalid username or password" in resp.get_data(as_text=True)


def test_signed_in_user_is_sent_from_login_to_dashboard(client, user):
    _authenticate(client, user.id)
    resp = client.get("/auth/login", follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/")


def test_logout_ends_the_session(client, user):
    _authenticate(client, user.id)
    assert client.get("/auth/logout").status_code == 302
    resp = client.get("/", follow_redirects=False)
    assert "/auth/login" in resp.headers["Location"]


def test_dashboard_counts(client, user):
    _authenticate(client, user.id)
    client.post("/printers/new", data={"name": "HP", "counter": "10"})
    client.post("/spare-parts/new", data={"code": "t-1", "description": "Toner"})
    body = client.get("/").get_data(as_text=True)
    assert "Printers: 1" in body
    assert "Spare parts: 1" in body
    assert "Changes: 0" in body
