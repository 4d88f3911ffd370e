from conftest import login, make_user


def test_admin_lists_users(client, admin_headers, op_headers):
    data = client.get("/api/users", headers=admin_headers).json()["data"]
    assert [u["id"] for u in data] == ["admin", "operator1"]
    assert data[1] == {"id": "operator1", "name": "Operator1", "role": "op", "is_super": False}


def test_non_admin_cannot_manage_users(client, op_headers):
    assert client.get("/api/users", headers=op_headers).status_code == 403
    res = client.post("/api/users", headers=op_headers, json={"id": "x", "password": "y"})
    assert res.status_code == 403


def test_user_ids_are_case_insensitive(client, admin_headers):
    make_user(client, admin_headers, "Mixed", "view")
    assert login(client, "MIXED", "secret")
    res = client.post("/api/users", headers=admin_headers, json={"id": "mixed", "password": "p"})
    assert res.status_code == 409


def test_invalid_role_rejected(client, admin_headers):
    res = client.post("/api/users", headers=admin_headers, json={"id": "bob", "password": "p", "role": "root"})
    assert res.status_code == 400


def test_update_permission(client, admin_headers, op_headers):
    res = client.put("/api/users/operator1/permission", headers=admin_headers,
                     json={"role": "admin", "is_super": True})
    assert res.status_code == 200
    assert res.json()["data"]["is_super"] is True

    # the operator's existing token picks up the new rights
    assert client.get("/api/users", headers=op_headers).status_code == 200


def test_reset_password(client, admin_headers, op_headers):
    res = client.put("/api/users/operator1/password", headers=admin_headers, json={"password": "new-pass"})
    assert res.status_code == 200
    assert client.post("/api/auth/login", json={"user_id": "operator1", "password": "secret"}).status_code == 401
    assert login(client, "operator1", "new-pass")


def test_delete_user(client, admin_headers, op_headers):
    assert client.delete("/api/users/operator1", headers=admin_headers).status_code == 200
    assert client.delete("/api/users/operator1", headers=admin_headers).status_code == 404
    # tokens of a deleted user stop working
    assert client.get("/api/zones", headers=op_headers).status_code == 401


def test_admin_cannot_delete_self(client, admin_headers):
    res = client.delete("/api/users/admin", headers=admin_headers)
    assert res.status_code == 400
