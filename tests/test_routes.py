import pytest
from fastapi.testclient import TestClient
from polinpin.core import config
from polinpin.main import create_app

STUDY = {
    "name": "Checkout Study",
    "tasks": [{"text": "Pay for the order.", "correctAnswer": ["pay"]}],
    "tree": {
        "id": "root",
        "label": "Root",
        "children": [
            {"id": "cart", "label": "Cart", "children": [
                {"id": "pay", "label": "Pay", "children": []},
            ]},
            {"id": "help", "label": "Help", "children": []},
        ],
    },
}


def make_client(monkeypatch, **overrides):
    monkeypatch.setattr(config, "BCRYPT_ROUNDS", 4)
    for key, value in overrides.items():
        monkeypatch.setattr(config, key, value)
    return TestClient(create_app())


@pytest.fixture
def client(monkeypatch):
    return make_client(monkeypatch)


@pytest.fixture
def locked_client(monkeypatch):
    return make_client(monkeypatch, REQUIRE_EDITOR_AUTH=True)


def observation_body(answer="pay", selections=("cart", "pay")):
    return {"observations": [{
        "question": {"task": STUDY["tasks"][0], "answer": answer},
        "pastSelections": [{"node": n, "at": i} for i, n in enumerate(selections)],
        "startedAt": 0,
        "endedAt": 6,
    }]}


def test_demo_study_is_served(client):
    response = client.get("/tree-test/demo")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Example Study"
    assert data["tree"]["id"] == "homepage"
    assert data["tree"]["label"] == "Homepage"
    assert [c["id"] for c in data["tree"]["children"]] == ["shop", "settings", "account"]
    assert data["tasks"][0] == {"text": "Buy a jar.", "correctAnswer": ["shop"]}


def test_demo_seed_can_be_disabled(monkeypatch):
    client = make_client(monkeypatch, SEED_DEMO=False)
    assert client.get("/tree-test/demo").status_code == 404


def test_missing_study_is_404(client):
    response = client.get("/tree-test/missing")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
    assert client.get("/editor/tree-test/missing").status_code == 404


def test_editor_round_trip(client):
    assert client.post("/editor/tree-test/checkout", json=STUDY).status_code == 200
    assert client.get("/editor/tree-test/checkout").json() == STUDY
    assert client.get("/tree-test/checkout").json() == STUDY


def test_editor_overwrite(client):
    client.post("/editor/tree-test/checkout", json=STUDY)
    replacement = {"name": "Other", "tasks": [], "tree": {"id": "r", "label": "R", "children": []}}
    client.post("/editor/tree-test/checkout", json=replacement)
    assert client.get("/tree-test/checkout").json() == replacement


def test_malformed_study_is_400(client):
    response = client.post("/editor/tree-test/bad", json={"name": "No tree"})
    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"
    assert client.get("/tree-test/bad").status_code == 404


def test_legacy_node_shape_is_rejected(client):
    legacy = {"name": "Old", "tasks": [], "tree": {"id": "r", "content": {"text": "R"}, "children": []}}
    assert client.post("/editor/tree-test/old", json=legacy).status_code == 400


def test_complete_without_body(client):
    response = client.post("/completed/tree-test/demo")
    assert response.status_code == 200
    assert response.content == b""


def test_complete_records_results_and_statistics(client):
    client.post("/editor/tree-test/checkout", json=STUDY)
    client.post("/completed/tree-test/checkout", json=observation_body())
    client.post("/completed/tree-test/checkout", json=observation_body())

    assert client.get("/editor/tree-test/checkout/statistics").status_code == 409

    client.post("/completed/tree-test/checkout", json=observation_body("help", ("help",)))
    results = client.get("/editor/tree-test/checkout/results").json()
    assert len(results["observations"]) == 3

    stats = client.get("/editor/tree-test/checkout/statistics").json()
    assert stats["medianTime"] == 6.0
    assert stats["percentCorrect"] == pytest.approx(2 / 3)
    assert stats["percentDirect"] == 1.0


def test_complete_with_observation_for_unknown_study(client):
    response = client.post("/completed/tree-test/missing", json=observation_body())
    assert response.status_code == 404


def test_register_and_login(client):
    response = client.post("/register", json={"name": "A", "username": "a", "password": "p"})
    assert response.status_code == 200
    registered = response.json()
    assert registered["name"] == "A"
    assert len(registered["token"]) >= 30

    response = client.post("/login", json={"username": "a", "password": "p"})
    assert response.status_code == 200
    assert response.json()["name"] == "A"
    assert response.json()["token"] != registered["token"]


def test_login_bad_credentials_is_401(client):
    client.post("/register", json={"name": "A", "username": "a", "password": "p"})
    assert client.post("/login", json={"username": "a", "password": "wrong"}).status_code == 401
    assert client.post("/login", json={"username": "nobody", "password": "p"}).status_code == 401


def test_malformed_register_is_400(client):
    assert client.post("/register", json={"username": "a"}).status_code == 400
    assert client.post("/login", content=b"not json", headers={"Content-Type": "application/json"}).status_code == 400


def test_duplicate_register_rejected_when_configured(monkeypatch):
    client = make_client(monkeypatch, REGISTRATION_POLICY="reject")
    client.post("/register", json={"name": "A", "username": "a", "password": "p"})
    response = client.post("/register", json={"name": "B", "username": "a", "password": "q"})
    assert response.status_code == 409
    assert response.json()["code"] == "USERNAME_TAKEN"


def test_me_and_logout(client):
    token = client.post("/register", json={"name": "A", "username": "a", "password": "p"}).json()["token"]

    response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json() == {"name": "A", "username": "a"}

    # Bare token without the scheme is accepted too
    assert client.get("/me", headers={"Authorization": token}).status_code == 200

    assert client.post("/logout", headers={"Authorization": f"Bearer {token}"}).status_code == 200
    assert client.get("/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_me_without_token(client):
    response = client.get("/me")
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHENTICATED"


def test_editor_routes_open_by_default(client):
    assert client.get("/editor/tree-test/demo").status_code == 200


def test_editor_routes_require_token_when_locked(locked_client):
    assert locked_client.get("/editor/tree-test/demo").status_code == 401
    assert locked_client.post("/editor/tree-test/demo", json=STUDY).status_code == 401
    assert locked_client.get("/editor/tree-test/demo", headers={"Authorization": "Bearer nope"}).status_code == 401

    # Viewing and completing stay public
    assert locked_client.get("/tree-test/demo").status_code == 200
    assert locked_client.post("/completed/tree-test/demo").status_code == 200

    token = locked_client.post("/register", json={"name": "A", "username": "a", "password": "p"}).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}
    assert locked_client.post("/editor/tree-test/demo", json=STUDY, headers=headers).status_code == 200
    assert locked_client.get("/editor/tree-test/demo", headers=headers).json() == STUDY


def test_editor_token_superseded_by_new_login(locked_client):
    old = locked_client.post("/register", json={"name": "A", "username": "a", "password": "p"}).json()["token"]
    new = locked_client.post("/login", json={"username": "a", "password": "p"}).json()["token"]
    assert locked_client.get("/editor/tree-test/demo", headers={"Authorization": f"Bearer {old}"}).status_code == 401
    assert locked_client.get("/editor/tree-test/demo", headers={"Authorization": f"Bearer {new}"}).status_code == 200


def test_expired_session_is_401(monkeypatch):
    client = make_client(monkeypatch, REQUIRE_EDITOR_AUTH=True, SESSION_TTL_SECONDS=60)
    token = client.post("/register", json={"name": "A", "username": "a", "password": "p"}).json()["token"]
    sessions = client.app.state.session_manager
    sessions.clock = lambda: 10 ** 12

    response = client.get("/editor/tree-test/demo", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["code"] == "SESSION_EXPIRED"


def test_state_is_isolated_per_app(monkeypatch):
    first = make_client(monkeypatch)
    second = make_client(monkeypatch)
    first.post("/editor/tree-test/only-here", json=STUDY)
    assert second.get("/tree-test/only-here").status_code == 404
