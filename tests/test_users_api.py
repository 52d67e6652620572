from datetime import timedelta

from src.linkbio.models.user_session import UserSession

API = "/api/v1"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def login(client, identifier="alice", password="pw123"):
    return client.post(
        f"{API}/users/login",
        json={"email_or_username": identifier, "password": password},
    )


def test_register_login_logout_scenario(client, register, db):
    t1 = register("alice", "a@x.com", "pw123")

    resp = login(client)
    assert resp.status_code == 200
    body = resp.json()
    t2 = body["token"]
    assert t2 != t1
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "a@x.com"
    assert set(body["user"]) == {"id", "username", "email"}

    for token in (t1, t2):
        assert client.get(f"{API}/users/me", headers=auth_header(token)).status_code == 200

    resp = client.post(f"{API}/users/logout", headers=auth_header(t1))
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out successfully"}

    remaining = {row.token for row in db.query(UserSession).all()}
    assert remaining == {t2}

    me = client.get(f"{API}/users/me", headers=auth_header(t2))
    assert me.status_code == 200
    assert me.json()["user"]["username"] == "alice"
    assert me.json()["profile"]["theme"] == "light"


def test_register_duplicate_email(client, register):
    register("alice", "a@x.com", "pw123")
    resp = client.post(
        f"{API}/users/register",
        json={"username": "other", "email": "a@x.com", "password": "pw"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


def test_register_validates_email(client):
    resp = client.post(
        f"{API}/users/register",
        json={"username": "alice", "email": "not-an-email", "password": "pw"},
    )
    assert resp.status_code == 422


def test_login_failures_look_the_same(client, register):
    register()
    wrong_password = login(client, "alice", "nope")
    unknown_user = login(client, "mallory", "pw123")

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"detail": "Invalid credentials"}


def test_logout_without_token_and_twice(client, register):
    token = register()
    assert client.post(f"{API}/users/logout").status_code == 200
    assert client.post(f"{API}/users/logout", headers=auth_header(token)).status_code == 200
    assert client.post(f"{API}/users/logout", headers=auth_header(token)).status_code == 200


def test_me_requires_valid_token(client, register, tokens):
    token = register()
    user_id = tokens.user_id_from(token)

    assert client.get(f"{API}/users/me").status_code == 401
    assert client.get(f"{API}/users/me", headers=auth_header("garbage")).status_code == 401

    expired, _ = tokens.sign_for_user(user_id, timedelta(seconds=-1))
    resp = client.get(f"{API}/users/me", headers=auth_header(expired))
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_refresh(client, register):
    token = register()
    resp = client.post(f"{API}/users/refresh", json={"token": token})
    assert resp.status_code == 200
    new_token = resp.json()["token"]
    assert new_token != token
    assert client.get(f"{API}/users/me", headers=auth_header(new_token)).status_code == 200

    bad = client.post(f"{API}/users/refresh", json={"token": "garbage"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid or expired token"


def test_password_reset_scenario(client, register, mailer):
    register("alice", "a@x.com", "pw123")

    resp = client.post(f"{API}/users/reset-password", json={"email": "a@x.com"})
    assert resp.status_code == 200
    assert len(mailer.reset_emails) == 1
    _, reset_token = mailer.reset_emails[0]

    resp = client.post(
        f"{API}/users/update-password", json={"token": reset_token, "password": "newpw"}
    )
    assert resp.status_code == 200

    assert login(client, "alice", "pw123").status_code == 401
    assert login(client, "alice", "newpw").status_code == 200


def test_password_reset_unknown_email(client):
    resp = client.post(f"{API}/users/reset-password", json={"email": "nobody@x.com"})
    assert resp.status_code == 404


def test_password_reset_delivery_failure(client, register, mailer):
    register()
    mailer.succeed = False
    resp = client.post(f"{API}/users/reset-password", json={"email": "a@x.com"})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to send password reset email"


def test_update_password_bad_token(client):
    resp = client.post(
        f"{API}/users/update-password", json={"token": "garbage", "password": "newpw"}
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid or expired token"


def test_verify_email(client, register):
    token = register()
    assert client.get(f"{API}/users/verify/{token}").status_code == 200

    public = client.get(f"{API}/users/by-username/alice").json()
    assert public["user"]["email_verified"] is True

    assert client.get(f"{API}/users/verify/garbage").status_code == 400


def test_update_me(client, register):
    token = register()
    resp = client.put(
        f"{API}/users/me",
        headers=auth_header(token),
        json={"username": "alice2", "bio": "hello", "theme": "dark", "gradient_enabled": True},
    )
    assert resp.status_code == 200

    me = client.get(f"{API}/users/me", headers=auth_header(token)).json()
    assert me["user"]["username"] == "alice2"
    assert me["user"]["bio"] == "hello"
    assert me["user"]["email"] == "a@x.com"
    assert me["profile"]["theme"] == "dark"
    assert me["profile"]["gradient_enabled"] is True
    assert me["profile"]["font_family"] == "Arial"


def test_update_me_conflict(client, register):
    register("bob", "b@x.com", "pw")
    token = register("alice", "a@x.com", "pw123")
    resp = client.put(
        f"{API}/users/me", headers=auth_header(token), json={"email": "b@x.com"}
    )
    assert resp.status_code == 400


def test_delete_me(client, register):
    token = register()
    resp = client.delete(f"{API}/users/me", headers=auth_header(token))
    assert resp.status_code == 200

    assert client.get(f"{API}/users/me", headers=auth_header(token)).status_code == 401
    assert client.get(f"{API}/users/by-username/alice").status_code == 404
    assert login(client).status_code == 401


def test_public_lookups(client, register, tokens):
    token = register()
    user_id = tokens.user_id_from(token)

    by_name = client.get(f"{API}/users/by-username/alice")
    assert by_name.status_code == 200
    assert by_name.json()["user"] == {
        "username": "alice",
        "email": "a@x.com",
        "email_verified": False,
    }
    assert by_name.json()["profile"]["user_id"] == user_id

    by_id = client.get(f"{API}/users/{user_id}")
    assert by_id.status_code == 200
    assert by_id.json()["username"] == "alice"
    assert "hashed_password" not in by_id.json()

    assert client.get(f"{API}/users/by-username/nobody").status_code == 404
    assert client.get(f"{API}/users/999").status_code == 404


def test_login_with_mixed_case_email(client, register):
    register("alice", "Alice@Example.COM", "pw123")

    assert login(client, "Alice@Example.COM", "pw123").status_code == 200
    assert login(client, "alice@example.com", "pw123").status_code == 200

    resp = client.post(f"{API}/users/reset-password", json={"email": "ALICE@example.com"})
    assert resp.status_code == 200


def test_register_email_differing_only_in_case(client, register):
    register("alice", "alice@x.com", "pw123")
    resp = client.post(
        f"{API}/users/register",
        json={"username": "other", "email": "ALICE@X.COM", "password": "pw"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


def test_passwords_longer_than_bcrypt_limit_rejected(client, register):
    resp = client.post(
        f"{API}/users/register",
        json={"username": "alice", "email": "a@x.com", "password": "p" * 73},
    )
    assert resp.status_code == 422

    register("alice", "a@x.com", "p" * 72)
    assert login(client, "alice", "p" * 72).status_code == 200

    resp = client.post(
        f"{API}/users/update-password", json={"token": "garbage", "password": "é" * 37}
    )
    assert resp.status_code == 422


def test_update_me_can_clear_bio(client, register):
    token = register()
    client.put(f"{API}/users/me", headers=auth_header(token), json={"bio": "hello"})

    resp = client.put(
        f"{API}/users/me", headers=auth_header(token), json={"bio": None, "username": None}
    )
    assert resp.status_code == 200

    me = client.get(f"{API}/users/me", headers=auth_header(token)).json()
    assert me["user"]["bio"] is None
    assert me["user"]["username"] == "alice"
