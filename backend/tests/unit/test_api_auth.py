# -*- coding: utf-8 -*-
"""
Member signup/login, e-mail verification and operator login over HTTP.
"""

import re

from webgate.models.accounts import MemberAccount

SIGNUP = {"email": "new.player@example.com", "password": "pw-123456"}


def _verification_token(notifier, address):
    body = notifier.sent_to(address)[-1]["body"]
    return re.search(r"token=([A-Za-z0-9]{32})", body).group(1)


def test_signup_sends_verification_mail(client, notifier):
    response = client.post("/auth/signup", json=SIGNUP)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Account created. Please check your email."}
    mail = notifier.sent_to(SIGNUP["email"])
    assert len(mail) == 1
    assert mail[0]["subject"] == "Verify your email address"
    assert "http://localhost:8080/verify?token=" in mail[0]["body"]


def test_signup_requires_both_fields(client):
    response = client.post("/auth/signup", json={"email": "x@example.com"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Email and password are required"
    assert "requestId" in body


def test_signup_duplicate_email(client):
    client.post("/auth/signup", json=SIGNUP)

    response = client.post("/auth/signup", json=SIGNUP)

    assert response.status_code == 409
    assert response.json()["message"] == "Email already exists"


def test_full_member_flow(client, notifier, db_session):
    client.post("/auth/signup", json=SIGNUP)

    response = client.post("/auth/login", json=SIGNUP)
    assert response.status_code == 401
    assert response.json()["message"] == "Please verify your email before logging in"

    token = _verification_token(notifier, SIGNUP["email"])
    response = client.get("/verify", params={"token": token}, follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/login/verification-success.html?status=success"

    db_session.expire_all()
    member = db_session.query(MemberAccount).filter(MemberAccount.email == SIGNUP["email"]).one()
    assert member.verified is True

    response = client.post("/auth/login", json=SIGNUP)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["email"] == SIGNUP["email"]
    assert len(body["token"]) == 32

    response = client.get("/auth/verify-token", headers={"Authorization": f"Bearer {body['token']}"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "principal": "member"}


def test_verification_link_is_single_use(client, notifier):
    client.post("/auth/signup", json=SIGNUP)
    token = _verification_token(notifier, SIGNUP["email"])

    client.get("/verify", params={"token": token}, follow_redirects=False)
    response = client.get("/verify", params={"token": token}, follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"].endswith("?error=invalid_token")


def test_verify_without_token(client):
    response = client.get("/verify", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/login/verification-success.html?error=token_required"


def test_login_wrong_password(client, verified_member):
    response = client.post("/auth/login", json={"email": verified_member.email, "password": "nope"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_unknown_email(client):
    response = client.post("/auth/login", json={"email": "ghost@example.com", "password": "pw"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_malformed_body_is_400(client):
    response = client.post("/auth/login", content=b"not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_verify_token_rejects_missing_or_bad_token(client):
    assert client.get("/auth/verify-token").status_code == 401

    response = client.get("/auth/verify-token", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_verify_token_for_operator(client, operator_headers):
    response = client.get("/auth/verify-token", headers=operator_headers)

    assert response.json()["principal"] == "operator"


def test_admin_login(client, operator):
    response = client.post(
        "/admin/login", json={"email": operator.email, "password": "Adm1n!Passw0rd"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["isAdmin"] is True
    assert body["email"] == operator.email
    assert len(body["token"]) == 32


def test_admin_login_rejects_bad_password(client, operator):
    response = client.post("/admin/login", json={"email": operator.email, "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid admin credentials"


def test_member_cannot_use_admin_login(client, verified_member):
    response = client.post(
        "/admin/login", json={"email": verified_member.email, "password": "member-pass-123"}
    )

    assert response.status_code == 401


def test_admin_login_requires_fields(client):
    response = client.post("/admin/login", json={"password": "x"})

    assert response.status_code == 400
    assert response.json()["message"] == "Email and password are required"


def test_signup_succeeds_when_mail_fails(client, failing_notifier, db_session):
    response = client.post("/auth/signup", json=SIGNUP)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Account created. Please check your email."}
    assert failing_notifier.attempts == 1
    assert db_session.query(MemberAccount).filter(MemberAccount.email == SIGNUP["email"]).count() == 1


def test_signup_stores_lower_cased_email(client, notifier, db_session):
    response = client.post("/auth/signup", json={"email": "  New.Player@Example.COM ", "password": "pw-123456"})

    assert response.status_code == 200
    assert db_session.query(MemberAccount).filter(MemberAccount.email == SIGNUP["email"]).count() == 1
    assert len(notifier.sent_to(SIGNUP["email"])) == 1


def test_admin_login_ignores_email_case(client, operator):
    response = client.post(
        "/admin/login", json={"email": "ADMIN@Example.com", "password": "Adm1n!Passw0rd"}
    )

    assert response.status_code == 200
    assert response.json()["email"] == "admin@example.com"
