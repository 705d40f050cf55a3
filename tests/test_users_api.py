from app.core.auth.security import verify_password
from app.shared.database.models import User
from conftest import auth_headers, make_affiliation

NEW_USER = {
    "full_name": "Fabián Vendedor",
    "email": "Fabian@Fichas.com",
    "password": "secreto1",
    "codigo": "V010",
    "role": "VENDEDOR",
}


def test_create_user(client, db_session, admin):
    response = client.post("/api/users", json=NEW_USER, headers=auth_headers(admin))

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "fabian@fichas.com"
    assert body["role"] == "VENDEDOR"
    assert "password" not in body
    assert "password_hash" not in body

    db_session.expire_all()
    stored = db_session.get(User, body["id"])
    assert verify_password("secreto1", stored.password_hash)


def test_created_user_can_log_in(client, admin):
    client.post("/api/users", json=NEW_USER, headers=auth_headers(admin))

    response = client.post("/api/login", json={"email": "fabian@fichas.com", "password": "secreto1"})
    assert response.status_code == 200
    assert response.json()["user"]["codigo"] == "V010"


def test_duplicate_email_conflicts(client, admin, vendedor):
    response = client.post(
        "/api/users",
        json={**NEW_USER, "email": "VENDEDOR@fichas.com", "codigo": "V999"},
        headers=auth_headers(admin)
    )

    assert response.status_code == 409
    assert response.json()["message"] == "El correo electrónico o el código ya existen."


def test_duplicate_codigo_conflicts(client, admin, vendedor):
    response = client.post("/api/users", json={**NEW_USER, "codigo": "V001"}, headers=auth_headers(admin))
    assert response.status_code == 409


def test_invalid_user_payload(client, admin):
    response = client.post(
        "/api/users",
        json={**NEW_USER, "password": "123", "role": "JEFE"},
        headers=auth_headers(admin)
    )
    assert response.status_code == 400


def test_list_users_ordered_by_name(client, admin, vendedor, supervisor):
    response = client.get("/api/users", headers=auth_headers(admin))

    assert response.status_code == 200
    assert [u["full_name"] for u in response.json()] == ["Ana Vendedora", "Carla Supervisora", "Elena Admin"]


def test_update_user_role_and_password(client, db_session, admin, vendedor):
    response = client.put(
        f"/api/users/{vendedor.id}",
        json={"role": "SUPERVISOR", "password": "nueva-clave"},
        headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["role"] == "SUPERVISOR"

    db_session.expire_all()
    stored = db_session.get(User, vendedor.id)
    assert verify_password("nueva-clave", stored.password_hash)
    assert stored.full_name == "Ana Vendedora"


def test_update_missing_user(client, admin):
    response = client.put("/api/users/999", json={"full_name": "Nadie"}, headers=auth_headers(admin))
    assert response.status_code == 404


def test_delete_user(client, db_session, admin, otro_vendedor):
    response = client.delete(f"/api/users/{otro_vendedor.id}", headers=auth_headers(admin))

    assert response.status_code == 204
    db_session.expire_all()
    assert db_session.get(User, otro_vendedor.id) is None


def test_delete_user_with_affiliations_conflicts(client, db_session, admin, vendedor):
    make_affiliation(db_session, vendedor)

    response = client.delete(f"/api/users/{vendedor.id}", headers=auth_headers(admin))
    assert response.status_code == 409


def test_admin_cannot_delete_self(client, admin):
    response = client.delete(f"/api/users/{admin.id}", headers=auth_headers(admin))
    assert response.status_code == 400


def test_only_admin_manages_users(client, supervisor):
    assert client.get("/api/users", headers=auth_headers(supervisor)).status_code == 403
