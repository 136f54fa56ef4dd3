from tests.helpers import USER_EMAIL, make_token

def test_login_opens_session(client, services):
    res = client.post("/api/v1/session/login", json={"email": USER_EMAIL, "password": "secret123"})
    assert res.status_code == 200
    data = res.json()
    assert data["user"] == {"email": USER_EMAIL, "id": 42, "mobileNumber": None, "isAdmin": False}
    assert data["checkout"] is None
    assert "token" not in data

    me = client.get("/api/v1/session/me").json()
    assert me["isAuthenticated"] is True
    assert me["user"]["email"] == USER_EMAIL
    sent = services.calls_to("POST", "/api/v1/signin")[0]
    assert b"secret123" in sent.content

def test_login_failure_shows_collaborator_message(client, services):
    services.set("POST", "/api/v1/signin", status=401, json={"success": False, "message": "Invalid email or password"})
    res = client.post("/api/v1/session/login", json={"email": USER_EMAIL, "password": "nope"})
    assert res.status_code == 401
    assert res.json() == {"detail": "Invalid email or password"}
    assert client.get("/api/v1/session/me").json() == {"isAuthenticated": False, "user": None}
    notice = client.get("/api/v1/notifications").json()["notification"]
    assert notice["message"] == "Invalid email or password" and notice["type"] == "error"

def test_login_network_failure_is_502(client, services):
    import httpx

    def down(request):
        raise httpx.ConnectError("refused", request=request)

    services.set("POST", "/api/v1/signin", handler=down)
    res = client.post("/api/v1/session/login", json={"email": USER_EMAIL, "password": "pw"})
    assert res.status_code == 502
    assert res.json()["detail"] == "Network error. Please check your connection."

def test_login_validation_happens_before_network(client, services):
    res = client.post("/api/v1/session/login", json={"email": "not-an-email", "password": ""})
    assert res.status_code == 422
    body = res.json()
    assert body["errors"] == {"email": "Please enter a valid email address", "password": "password is required"}
    assert services.calls_to("POST", "/api/v1/signin") == []

def test_login_rejects_malformed_domain(client, services):
    res = client.post("/api/v1/session/login", json={"email": "jane@example..com", "password": "secret123"})
    assert res.status_code == 422
    assert res.json()["errors"] == {"email": "Please enter a valid email address"}
    assert services.calls_to("POST", "/api/v1/signin") == []

def test_register_then_login(client, services):
    services.set("POST", "/api/v1/signup", json={"success": True, "message": "User registered"})
    services.set("POST", "/api/v1/signin", json={"success": True, "data": make_token({"id": 77})})
    res = client.post(
        "/api/v1/session/register",
        json={"email": "new@example.com", "password": "secret123", "mobileNumber": "+1 555 123 4567"},
    )
    assert res.status_code == 200, res.text
    assert res.json()["message"] == "User registered"
    assert res.json()["user"]["id"] == 77
    signup = services.calls_to("POST", "/api/v1/signup")[0]
    assert b'"mobileNumber"' in signup.content

def test_register_failure_is_400(client, services):
    services.set("POST", "/api/v1/signup", status=400, json={"success": False, "message": "Email already exists"})
    res = client.post(
        "/api/v1/session/register",
        json={"email": "new@example.com", "password": "secret123", "mobileNumber": "0123456789"},
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Email already exists"
    assert services.calls_to("POST", "/api/v1/signin") == []

def test_logout_clears_identity(user_client):
    assert user_client.post("/api/v1/session/logout").json() == {"message": "Logged out"}
    assert user_client.get("/api/v1/session/me").json()["user"] is None
