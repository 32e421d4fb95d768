API = "/api/v1/user"

PASSWORD = "TestPassword123"


def register(client, name="alice", value="alice@example.com", type="email", password=PASSWORD):
    return client.post(f"{API}/register", json={
        "name": name,
        "password": password,
        "confirmPassword": password,
        "type": type,
        "value": value,
    })


def login(client, value="alice@example.com", password=PASSWORD):
    return client.post(f"{API}/login", json={"value": value, "password": password})


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
