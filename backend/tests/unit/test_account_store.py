from datetime import datetime, timedelta

import pytest

from webgate.errors import AppError
from webgate.models.accounts import MemberAccount, OperatorAccount, PrincipalKind
from webgate.services.account_store import AccountStore

T0 = datetime(2026, 2, 10, 8, 0, 0)


def test_create_member_is_unverified_with_token(db_session):
    member = AccountStore(db_session).create_member("a@example.com", "pw-123456", now=T0)

    assert member.verified is False
    assert len(member.verification_token) == 32
    assert member.verification_token_issued_at == T0
    assert member.password_hash != "pw-123456"


def test_duplicate_member_email_conflicts(db_session):
    store = AccountStore(db_session)
    store.create_member("a@example.com", "pw-123456")

    with pytest.raises(AppError) as exc:
        store.create_member("a@example.com", "other-pass")

    assert exc.value.status == 409
    assert exc.value.message == "Email already exists"
    assert db_session.query(MemberAccount).count() == 1


def test_operator_upsert_keeps_single_row(db_session):
    store = AccountStore(db_session)
    store.create_or_update_operator("op@example.com", "first-pass")
    store.create_or_update_operator("op@example.com", "second-pass")

    assert db_session.query(OperatorAccount).count() == 1
    assert not store.verify_credentials("op@example.com", "first-pass", PrincipalKind.OPERATOR)
    assert store.verify_credentials("op@example.com", "second-pass", PrincipalKind.OPERATOR)


def test_verify_credentials_unknown_account(db_session):
    assert not AccountStore(db_session).verify_credentials(
        "ghost@example.com", "pw", PrincipalKind.MEMBER
    )


def test_credentials_are_scoped_to_kind(db_session, operator):
    store = AccountStore(db_session)

    assert not store.verify_credentials(operator.email, "Adm1n!Passw0rd", PrincipalKind.MEMBER)
    assert store.verify_credentials(operator.email, "Adm1n!Passw0rd", PrincipalKind.OPERATOR)


def test_mark_verified_once(db_session):
    store = AccountStore(db_session)
    member = store.create_member("a@example.com", "pw-123456", now=T0)
    token = member.verification_token

    assert store.mark_verified(token, now=T0 + timedelta(hours=2)) == 1
    assert store.mark_verified(token, now=T0 + timedelta(hours=3)) == 0

    db_session.expire_all()
    assert store.get(PrincipalKind.MEMBER, "a@example.com").verified is True


def test_mark_verified_expired_token(db_session):
    store = AccountStore(db_session)
    member = store.create_member("a@example.com", "pw-123456", now=T0)

    assert store.mark_verified(member.verification_token, now=T0 + timedelta(hours=25)) == 0

    db_session.expire_all()
    assert store.get(PrincipalKind.MEMBER, "a@example.com").verified is False


def test_mark_verified_unknown_or_empty_token(db_session):
    store = AccountStore(db_session)

    assert store.mark_verified("nope") == 0
    assert store.mark_verified("") == 0
    assert store.mark_verified(None) == 0
