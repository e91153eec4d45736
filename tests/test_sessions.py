"""Unit tests for the server-side session store and cookie signing."""
from datetime import datetime, timedelta, timezone

from app.core.security import sign_session_token, unsign_session_token
from app.models.user import User
from app.models.web_session import WebSession
from app.services.sessions import Authenticated, Guest, SessionStore


def test_new_session_resolves_to_guest(db):
    store = SessionStore(db)
    web_session = store.create()

    assert store.load(web_session.token) is web_session
    assert store.resolve(web_session) == Guest()
    assert store.resolve(None) == Guest()


def test_ensure_reuses_existing_session(db):
    store = SessionStore(db)
    web_session = store.create()

    assert store.ensure(web_session) is web_session
    assert store.ensure(None).token != web_session.token


def test_login_then_logout(db, make_user):
    user = make_user()
    store = SessionStore(db)
    web_session = store.create()

    web_session = store.login(web_session, user)
    state = store.resolve(web_session)
    assert isinstance(state, Authenticated)
    assert state.user.id == user.id

    store.logout(web_session)
    assert store.resolve(web_session) == Guest()


def test_login_and_logout_are_idempotent(db, make_user):
    first = make_user(email="first@example.com")
    second = make_user(email="second@example.com")
    store = SessionStore(db)
    web_session = store.create()

    store.logout(web_session)
    store.logout(None)
    assert store.resolve(web_session) == Guest()

    web_session = store.login(web_session, first)
    web_session = store.login(web_session, second)
    assert store.resolve(web_session).user.id == second.id


def test_session_of_deleted_user_resolves_to_guest(db, make_user):
    user = make_user()
    store = SessionStore(db)
    web_session = store.create()
    web_session = store.login(web_session, user)

    db.delete(db.get(User, user.id))
    db.commit()

    assert store.resolve(web_session) == Guest()


def test_flashes_are_drained_on_read(db):
    store = SessionStore(db)
    web_session = store.create()

    store.flash(web_session, "error", "Invalid credentials")
    store.flash(web_session, "success", "Welcome back!")

    flashes = store.consume_flashes(web_session)
    assert [(f.kind, f.message) for f in flashes] == [
        ("error", "Invalid credentials"),
        ("success", "Welcome back!"),
    ]
    assert store.consume_flashes(web_session) == []
    assert db.get(WebSession, web_session.token).flash_json == "[]"


def test_consume_flashes_without_session(db):
    assert SessionStore(db).consume_flashes(None) == []


def test_cookie_signature_round_trip():
    signed = sign_session_token("abc123")
    assert signed != "abc123"
    assert unsign_session_token(signed) == "abc123"


def test_tampered_cookie_is_rejected():
    signed = sign_session_token("abc123")
    encoded, sig = signed.rsplit(".", 1)
    forged = sign_session_token("other")

    assert unsign_session_token(encoded + "." + forged.rsplit(".", 1)[1]) is None
    assert unsign_session_token(forged.rsplit(".", 1)[0] + "." + sig) is None
    assert unsign_session_token("garbage") is None
    assert unsign_session_token("") is None
    assert unsign_session_token(None) is None


def test_signature_with_non_ascii_characters_is_rejected():
    assert unsign_session_token("YWJj.é") is None
    assert unsign_session_token("é.abc") is None


def _age(db, web_session, days):
    web_session.updated_at = datetime.now(timezone.utc) - timedelta(days=days)
    db.commit()


def test_login_issues_a_new_token(db, make_user):
    user = make_user()
    store = SessionStore(db)
    anonymous = store.create()
    old_token = anonymous.token
    store.flash(anonymous, "success", "Password reset instructions sent")

    bound = store.login(anonymous, user)

    assert bound.token != old_token
    assert store.load(old_token) is None
    assert store.resolve(bound).user.id == user.id
    assert [f.message for f in store.consume_flashes(bound)] == ["Password reset instructions sent"]


def test_stale_session_is_treated_as_missing_and_deleted(db, make_user):
    user = make_user()
    store = SessionStore(db)
    web_session = store.login(store.create(), user)
    token = web_session.token
    _age(db, web_session, days=400)

    assert store.load(token) is None
    assert db.query(WebSession).filter(WebSession.token == token).count() == 0


def test_recent_session_survives(db):
    store = SessionStore(db)
    web_session = store.create()
    _age(db, web_session, days=1)

    assert store.load(web_session.token) is web_session


def test_creating_a_session_prunes_expired_rows(db):
    store = SessionStore(db)
    stale = [store.create() for _ in range(3)]
    for web_session in stale:
        _age(db, web_session, days=400)
    stale_tokens = [web_session.token for web_session in stale]

    fresh = store.create()

    remaining = {token for (token,) in db.query(WebSession.token).all()}
    assert remaining == {fresh.token}
    assert not remaining.intersection(stale_tokens)
