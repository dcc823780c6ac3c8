from messenger.config.settings import settings
from messenger.infrastructure.database.session import db_session
from messenger.main import API_PREFIX
from messenger.repositories.user_repository import UserRepository


def _register(client, **overrides):
    data = {"name": "Ana Souza", "email": "ana@acme.com.br", "password": "SenhaForte123"}
    data.update(overrides)
    return client.post("/api/users", json=data)


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}
    assert client.get("/health/db").get_json() == {"db": "ok"}


def test_register_and_login(client):
    created = _register(client, email="Ana@Acme.com.br")
    assert created.status_code == 201
    assert created.get_json()["email"] == "ana@acme.com.br"

    login = client.post("/api/auth/login", json={"email": "ana@acme.com.br", "password": "SenhaForte123"})
    assert login.status_code == 200
    token = login.get_json()["access_token"]

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.get_json()["name"] == "Ana Souza"


def test_duplicate_email_is_conflict(client):
    _register(client)
    response = _register(client, name="Outra Ana")

    assert response.status_code == 409
    assert response.get_json()["error"] == "Email já cadastrado."


def test_register_with_unknown_company(client):
    response = _register(client, company_id=99)
    assert response.status_code == 404


def test_register_linked_to_company(client, make_company):
    acme = make_company()
    response = _register(client, company_id=acme)

    assert response.status_code == 201
    assert response.get_json()["company_id"] == acme


def test_login_with_wrong_password(client):
    _register(client)
    response = client.post("/api/auth/login", json={"email": "ana@acme.com.br", "password": "errada12345"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "Credenciais inválidas."


def test_list_users_requires_auth(client, make_user, auth_headers):
    ana = make_user("Ana")
    make_user("Bia")

    assert client.get("/api/users").status_code == 401

    users = client.get("/api/users", headers=auth_headers(ana)).get_json()
    assert [u["name"] for u in users] == ["Ana", "Bia"]


def test_login_upgrades_password_iterations(client, monkeypatch):
    _register(client)
    monkeypatch.setattr(settings, "password_iterations", 1200)

    login = client.post("/api/auth/login", json={"email": "ana@acme.com.br", "password": "SenhaForte123"})
    assert login.status_code == 200

    with db_session() as session:
        user = UserRepository(session).get_by_email("ana@acme.com.br")
        assert user.password_iterations == 1200
        assert user.last_login is not None

    # a senha continua valendo com o novo hash
    again = client.post("/api/auth/login", json={"email": "ana@acme.com.br", "password": "SenhaForte123"})
    assert again.status_code == 200


def test_routes_are_mounted_under_api_prefix(app):
    assert API_PREFIX == settings.api_prefix == "/api"
    rules = {r.rule for r in app.url_map.iter_rules()}
    assert {"/api/messages", "/api/users/me", "/api/auth/login", "/health"} <= rules
