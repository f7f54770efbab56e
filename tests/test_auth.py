"""
Identity provider tests: signup, sign-in, session resolution and expiry.
"""

import pytest
from datetime import datetime, timedelta, timezone

from test_fixtures import unique_email
from app.exceptions import ConflictError, UnauthorizedError
from domain.models import AuthUser, Profile, open_session
from domain.security.context import CallerRole, SessionContext
from services.auth_service import AuthEvent, IdentityProvider


class FakeClock:
    def __init__(self):
        self.now = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider(engine, clock):
    return IdentityProvider(ttl_minutes=30, clock=clock)


def test_sign_up_provisions_account_and_profile(provider, service_db):
    """
    Verifies:
    - Signup stores the account and an empty profile keyed by the same id
    """
    email = unique_email("emma.johnson")
    user = provider.sign_up(email, full_name="Emma Johnson")

    assert service_db.get(AuthUser, user.id).email == email
    profile = service_db.get(Profile, user.id)
    assert profile.full_name == "Emma Johnson"
    assert profile.dietary_preferences == []
    assert profile.username is None


def test_sign_up_twice_conflicts(provider):
    email = unique_email("dup")
    provider.sign_up(email)

    with pytest.raises(ConflictError):
        provider.sign_up(email)


def test_sign_in_resolves_to_authenticated_context(provider, clock):
    user = provider.sign_up(unique_email("sarah.martinez"))
    session = provider.sign_in(user.email)

    ctx = provider.resolve(session.access_token)
    assert ctx.role == CallerRole.AUTHENTICATED
    assert ctx.user_id == user.id
    assert ctx.expires_at == clock.now + timedelta(minutes=30)


def test_sign_in_unknown_account_rejected(provider):
    with pytest.raises(UnauthorizedError):
        provider.sign_in(unique_email("nobody"))


def test_sign_in_restores_missing_profile(provider, service_db):
    user = provider.sign_up(unique_email("michael.chen"))
    service_db.delete(service_db.get(Profile, user.id))
    service_db.commit()

    provider.sign_in(user.email)

    service_db.expire_all()
    assert service_db.get(Profile, user.id) is not None


@pytest.mark.parametrize("token", [None, "", "not-a-real-token"])
def test_resolve_rejects_missing_or_unknown_tokens(provider, token):
    with pytest.raises(UnauthorizedError):
        provider.resolve(token)


def test_signed_out_session_rejected(provider):
    user = provider.sign_up(unique_email("emma.johnson"))
    session = provider.sign_in(user.email)

    provider.sign_out(session.access_token)

    with pytest.raises(UnauthorizedError):
        provider.resolve(session.access_token)
    with pytest.raises(UnauthorizedError):
        provider.sign_out(session.access_token)


def test_expired_session_rejected(provider, clock):
    """
    Verifies:
    - A session stops resolving once its lifetime has passed
    - The expiry is reported to listeners once
    """
    events = []
    provider.on_auth_state_change(lambda event, s: events.append(event))
    user = provider.sign_up(unique_email("sarah.martinez"))
    session = provider.sign_in(user.email)

    clock.advance(minutes=29)
    provider.resolve(session.access_token)

    clock.advance(minutes=1)
    with pytest.raises(UnauthorizedError) as exc_info:
        provider.resolve(session.access_token)
    assert exc_info.value.code == "SESSION_EXPIRED"

    with pytest.raises(UnauthorizedError) as exc_info:
        provider.resolve(session.access_token)
    assert exc_info.value.code == "INVALID_SESSION"

    assert events == [AuthEvent.SIGNED_IN, AuthEvent.SESSION_EXPIRED]


def test_sign_in_drops_expired_sessions(provider, clock):
    """
    Verifies:
    - Sessions that expired without ever being resolved again are not retained
    - Live sessions survive the cleanup
    """
    user = provider.sign_up(unique_email("michael.chen"))
    stale = provider.sign_in(user.email)
    clock.advance(minutes=20)
    live = provider.sign_in(user.email)

    clock.advance(minutes=15)
    fresh = provider.sign_in(user.email)

    assert set(provider._sessions) == {live.access_token, fresh.access_token}
    with pytest.raises(UnauthorizedError) as exc_info:
        provider.resolve(stale.access_token)
    assert exc_info.value.code == "INVALID_SESSION"
    assert provider.resolve(live.access_token).user_id == user.id


def test_listener_can_unsubscribe(provider):
    events = []
    unsubscribe = provider.on_auth_state_change(lambda event, s: events.append((event, s.user_id)))
    user = provider.sign_up(unique_email("emma.johnson"))

    session = provider.sign_in(user.email)
    unsubscribe()
    provider.sign_out(session.access_token)

    assert events == [(AuthEvent.SIGNED_IN, user.id)]


def test_resolved_context_reads_only_own_profile(provider):
    first = provider.sign_up(unique_email("sarah.martinez"))
    second = provider.sign_up(unique_email("michael.chen"))
    ctx = provider.resolve(provider.sign_in(first.email).access_token)

    db = open_session(ctx)
    try:
        assert db.get(Profile, first.id) is not None
        assert db.get(Profile, second.id) is None
    finally:
        db.close()


def test_context_constructors():
    assert SessionContext.anonymous().is_authenticated is False
    assert SessionContext.service().bypasses_policies is True
    with pytest.raises(ValueError):
        SessionContext.authenticated(None)
