from mouna.seed import DEFAULT_CATEGORIES, seed
from mouna.stock.category.models import Category
from mouna.users.models import User


def test_seed_is_idempotent(client, session_factory):
    with session_factory() as db:
        first = seed(db)
        second = seed(db)
        roles = {u.username: u.role for u in db.query(User)}
        category_count = db.query(Category).count()

    assert first == {"users": 2, "categories": len(DEFAULT_CATEGORIES)}
    assert second == {"users": 0, "categories": 0}
    assert roles == {"admin": "admin", "navid": "supervisor"}
    assert category_count == len(DEFAULT_CATEGORIES)


def test_seeded_admin_can_log_in(client, session_factory):
    with session_factory() as db:
        seed(db)

    response = client.post("/api/login", json={"username": "admin", "password": "admin"})
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
