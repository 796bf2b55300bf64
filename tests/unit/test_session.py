"""
Unit tests for AuthSession state transitions.
"""

import pytest

from taskboard.domains.auth.session import LOGIN_ERROR_MESSAGE, AuthSession, SessionStatus
from taskboard.exceptions import NetworkError, RegistrationError
from tests.conftest import TEST_EMAIL, TEST_FULL_NAME, TEST_PASSWORD


class TestRestore:
    @pytest.mark.asyncio
    async def test_starts_loading_and_anonymous(self, session):
        """Test the initial session state."""
        assert session.loading is True
        assert session.is_authenticated is False
        assert session.user is None
        assert session.status == SessionStatus.ANONYMOUS_LOADING

    @pytest.mark.asyncio
    async def test_restore_without_token(self, session, transport):
        """Test restoring with no stored token."""
        await session.restore()

        assert session.loading is False
        assert session.status == SessionStatus.ANONYMOUS
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_restore_with_valid_token(self, session, logged_in):
        """Test restoring with a valid stored token."""
        await session.restore()

        assert session.status == SessionStatus.AUTHENTICATED
        assert session.user.email == TEST_EMAIL

    @pytest.mark.asyncio
    async def test_restore_with_stale_token(self, session, token_store):
        """Test that a rejected stored token is discarded."""
        token_store.set("expired")

        await session.restore()

        assert session.status == SessionStatus.ANONYMOUS
        assert token_store.get() is None

    @pytest.mark.asyncio
    async def test_restore_notifies_once(self, session):
        """Test that restore notifies subscribers once."""
        seen = []
        session.subscribe(lambda s: seen.append((s.loading, s.is_authenticated)))

        await session.restore()

        assert seen == [(False, False)]


class TestLogin:
    @pytest.mark.asyncio
    async def test_successful_login(self, session, token_store):
        """Test a successful sign-in."""
        await session.restore()

        assert await session.login(TEST_EMAIL, TEST_PASSWORD) is True

        assert session.is_authenticated is True
        assert session.user.full_name == TEST_FULL_NAME
        assert session.error is None
        assert session.loading is False
        assert token_store.has_token()

    @pytest.mark.asyncio
    async def test_loading_is_raised_then_lowered(self, session):
        """Test that sign-in raises and then lowers the loading flag."""
        await session.restore()
        seen = []
        session.subscribe(lambda s: seen.append(s.loading))

        await session.login(TEST_EMAIL, TEST_PASSWORD)

        assert seen == [True, False]

    @pytest.mark.asyncio
    async def test_failed_login_never_raises(self, session, token_store):
        """Test that a failed sign-in returns False instead of raising."""
        await session.restore()

        assert await session.login(TEST_EMAIL, "wrong") is False

        assert session.error == LOGIN_ERROR_MESSAGE
        assert session.is_authenticated is False
        assert session.loading is False
        assert token_store.get() is None

    @pytest.mark.asyncio
    async def test_network_failure_uses_same_message(self, session, transport):
        """Test that a network failure shows the sign-in error message."""
        await session.restore()
        transport.fail_network("POST", "/api/auth/login")

        assert await session.login(TEST_EMAIL, TEST_PASSWORD) is False
        assert session.error == LOGIN_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_user_fetch_failure_discards_new_token(self, session, transport, token_store):
        """Test that the new token is dropped when the profile cannot be fetched."""
        await session.restore()
        transport.fail("GET", "/api/users/me", 500)

        assert await session.login(TEST_EMAIL, TEST_PASSWORD) is False

        assert token_store.get() is None
        assert session.is_authenticated is False

    @pytest.mark.asyncio
    async def test_failed_login_keeps_existing_session(
        self, authenticated_session, token_store, logged_in
    ):
        """Test that a failed sign-in keeps the current session."""
        user = authenticated_session.user

        assert await authenticated_session.login(TEST_EMAIL, "wrong") is False

        assert authenticated_session.is_authenticated is True
        assert authenticated_session.user == user
        assert authenticated_session.error == LOGIN_ERROR_MESSAGE
        assert token_store.get() == logged_in

    @pytest.mark.asyncio
    async def test_success_clears_previous_error(self, session):
        """Test that a successful sign-in clears the last error."""
        await session.restore()
        await session.login(TEST_EMAIL, "wrong")

        await session.login(TEST_EMAIL, TEST_PASSWORD)

        assert session.error is None


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_does_not_sign_in(self, session, token_store):
        """Test that registration does not sign the user in."""
        await session.restore()

        await session.register("bob@example.com", "pw", "Bob")

        assert session.is_authenticated is False
        assert session.error is None
        assert token_store.get() is None

    @pytest.mark.asyncio
    async def test_register_failure_sets_error_and_raises(self, session):
        """Test that a registration failure sets the error and raises."""
        await session.restore()

        with pytest.raises(RegistrationError):
            await session.register(TEST_EMAIL, "pw", "Dup")

        assert session.error == "Email already registered"

    @pytest.mark.asyncio
    async def test_malformed_email_is_judged_by_backend(self, session, transport):
        """Test that a malformed email is posted and the backend's message is shown."""
        await session.restore()

        with pytest.raises(RegistrationError):
            await session.register("alice", "pw", "Alice")

        assert transport.calls("POST", "/api/auth/register")[0].json()["email"] == "alice"
        assert session.error == "Invalid email address"

    @pytest.mark.asyncio
    async def test_register_network_failure(self, session, transport):
        """Test registration when the backend cannot be reached."""
        await session.restore()
        transport.fail_network("POST", "/api/auth/register")

        with pytest.raises(NetworkError):
            await session.register("bob@example.com", "pw", "Bob")

        assert session.error == "Registration failed"


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_is_local(self, authenticated_session, transport, token_store):
        """Test that logout sends no request."""
        sent = len(transport.requests)

        authenticated_session.logout()

        assert authenticated_session.status == SessionStatus.ANONYMOUS
        assert authenticated_session.user is None
        assert token_store.get() is None
        assert len(transport.requests) == sent

    @pytest.mark.asyncio
    async def test_unsubscribe(self, auth_service):
        """Test that an unsubscribed listener is not called."""
        session = AuthSession(auth_service)
        seen = []
        unsubscribe = session.subscribe(seen.append)

        unsubscribe()
        session.logout()

        assert seen == []
