from datetime import timedelta

import pytest

from core.database import SessionLocal
from core.exceptions import ConflictError, UnauthorizedError
from models.notification import NotificationModel
from models.user import UserModel
from utils.auth_manager import AuthManager, hash_token


@pytest.fixture
def alice(auth):
    return auth.sign_up("alice", "wonderland", name="Alice", surname="Liddell")


def test_sign_up_stores_a_password_hash(alice):
    assert alice.login == "alice"
    assert alice.password_hash != "wonderland"
    assert alice.refresh_token_hash is None


def test_duplicate_sign_up_is_a_conflict(auth, alice):
    with pytest.raises(ConflictError):
        auth.sign_up("alice", "another-password")


def test_sign_in_issues_token_pair(auth, alice, db):
    tokens = auth.sign_in("alice", "wonderland")

    assert auth.verify_access_token(tokens.access_token) == alice.user_id
    assert auth.verify_refresh_token(tokens.refresh_token) == alice.user_id
    db.expire_all()
    assert alice.refresh_token_hash == hash_token(tokens.refresh_token)


@pytest.mark.parametrize("login,password", [("alice", "wrong"), ("bob", "wonderland")])
def test_sign_in_rejects_bad_credentials(auth, alice, login, password):
    with pytest.raises(UnauthorizedError):
        auth.sign_in(login, password)


def test_access_and_refresh_tokens_are_not_interchangeable(auth, alice):
    tokens = auth.sign_in("alice", "wonderland")
    with pytest.raises(UnauthorizedError):
        auth.verify_access_token(tokens.refresh_token)
    with pytest.raises(UnauthorizedError):
        auth.verify_refresh_token(tokens.access_token)


def test_expired_access_token_is_rejected(db, alice):
    short_lived = AuthManager(db, access_expires=timedelta(seconds=-1))
    tokens = short_lived.sign_in("alice", "wonderland")
    with pytest.raises(UnauthorizedError):
        short_lived.verify_access_token(tokens.access_token)


def test_refresh_rotates_and_old_token_is_dead(auth, alice):
    first = auth.sign_in("alice", "wonderland")

    second = auth.refresh_tokens(alice.user_id, first.refresh_token)

    assert second.refresh_token != first.refresh_token
    with pytest.raises(UnauthorizedError):
        auth.refresh_tokens(alice.user_id, first.refresh_token)
    # the rejected replay did not revoke the current session
    third = auth.refresh_tokens(alice.user_id, second.refresh_token)
    assert third.refresh_token != second.refresh_token


def test_new_sign_in_supersedes_old_refresh_token(auth, alice):
    first = auth.sign_in("alice", "wonderland")
    auth.sign_in("alice", "wonderland")
    with pytest.raises(UnauthorizedError):
        auth.refresh_tokens(alice.user_id, first.refresh_token)


def test_refresh_for_another_user_is_rejected(auth, alice):
    bob = auth.sign_up("bob", "builder-pass")
    tokens = auth.sign_in("alice", "wonderland")
    with pytest.raises(UnauthorizedError):
        auth.refresh_tokens(bob.user_id, tokens.refresh_token)


def test_logout_revokes_refresh_token(auth, alice, db):
    tokens = auth.sign_in("alice", "wonderland")

    auth.logout(alice.user_id)

    db.expire_all()
    assert alice.refresh_token_hash is None
    with pytest.raises(UnauthorizedError):
        auth.refresh_tokens(alice.user_id, tokens.refresh_token)


def test_concurrent_refresh_has_a_single_winner(auth, alice):
    tokens = auth.sign_in("alice", "wonderland")
    user_id = alice.user_id

    slow_db = SessionLocal()
    try:
        slow = AuthManager(slow_db)
        # the slow request has already read the stored digest
        slow_db.get(UserModel, user_id).refresh_token_hash

        auth.refresh_tokens(user_id, tokens.refresh_token)

        with pytest.raises(UnauthorizedError):
            slow.refresh_tokens(user_id, tokens.refresh_token)
    finally:
        slow_db.close()


def test_get_current_user(auth, alice):
    tokens = auth.sign_in("alice", "wonderland")
    assert auth.get_current_user(tokens.access_token).user_id == alice.user_id
    with pytest.raises(UnauthorizedError):
        auth.get_current_user("garbage")


def test_delete_notifications_only_touches_own(auth, alice, db):
    bob = auth.sign_up("bob", "builder-pass")
    for owner_id, message in [
        (alice.user_id, "one"),
        (alice.user_id, "two"),
        (alice.user_id, "three"),
        (bob.user_id, "bob's"),
    ]:
        db.add(NotificationModel(user_id=owner_id, message=message, create_at="2024-01-01T00:00:00+00:00"))
    db.commit()
    ids = {n.message: n.id for n in db.query(NotificationModel).all()}

    remaining = auth.delete_notifications(alice.user_id, [ids["two"], ids["bob's"]])

    assert [n.message for n in remaining] == ["one", "three"]
    assert [n.message for n in auth.users.list_notifications(bob.user_id)] == ["bob's"]
