from mouna.users.models import User


def test_create_user_never_returns_password(client, session_factory):
    response = client.post(
        "/api/users",
        json={"username": "navid", "password": "123", "name": "مساعد مدير", "role": "supervisor"},
    )

    assert response.status_code == 201
    body = response.json()
    assert "password" not in body
    assert body["role"] == "supervisor"

    with session_factory() as db:
        assert db.query(User).one().password != "123"


def test_duplicate_username_conflicts(client, admin):
    response = client.post("/api/users", json={"username": "admin", "password": "x", "name": "Other"})
    assert response.status_code == 409


def test_unknown_role_is_rejected(client):
    response = client.post("/api/users", json={"username": "u", "password": "x", "name": "U", "role": "owner"})
    assert response.status_code == 422


def test_login(client, admin):
    ok = client.post("/api/login", json={"username": "admin", "password": "admin-pass"})
    wrong = client.post("/api/login", json={"username": "admin", "password": "nope"})
    unknown = client.post("/api/login", json={"username": "ghost", "password": "admin-pass"})

    assert ok.status_code == 200
    assert ok.json()["username"] == "admin"
    assert "password" not in ok.json()
    assert wrong.status_code == 401
    assert unknown.status_code == 401


def test_login_is_audited(client, admin):
    client.post("/api/login", json={"username": "admin", "password": "admin-pass"})

    logs = client.get("/api/audit-logs").json()
    assert logs[0]["action"] == "LOGIN"
    assert logs[0]["user"] == {"name": "المدير العام", "role": "admin"}


def test_update_user_blank_password_keeps_old_one(client, admin):
    response = client.put(f"/api/users/{admin['id']}", json={"name": "مدير", "password": "  "})

    assert response.status_code == 200
    assert response.json()["name"] == "مدير"
    assert client.post("/api/login", json={"username": "admin", "password": "admin-pass"}).status_code == 200


def test_update_user_password_and_role(client, admin):
    created = client.post("/api/users", json={"username": "navid", "password": "123", "name": "N"}).json()

    client.put(f"/api/users/{created['id']}", json={"password": "new-secret", "role": "supervisor"})

    login = client.post("/api/login", json={"username": "navid", "password": "new-secret"})
    assert login.status_code == 200
    assert login.json()["role"] == "supervisor"


def test_update_and_delete_missing_user(client):
    assert client.put("/api/users/77", json={"name": "x"}).status_code == 404
    assert client.delete("/api/users/77").status_code == 404


def test_delete_user_keeps_their_products(client, add_product, admin):
    product = add_product().json()

    assert client.delete(f"/api/users/{admin['id']}").status_code == 200

    row = client.get(f"/api/products/{product['id']}").json()
    assert row["addedByUserId"] is None
    assert client.get("/api/users").json() == []
