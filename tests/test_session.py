"""Tests for signed session and authorization request tokens."""

from datetime import timedelta

from jose import jwt

from google0auth.security.session import (
    ALGORITHM,
    AuthorizationRequest,
    create_authorization_request_token,
    create_session_token,
    verify_authorization_request_token,
    verify_session_token,
)


class TestSessionToken:
    """Tests for session tokens."""

    def test_round_trip_keeps_subject_and_attributes(self):
        token = create_session_token("12345", {"email": "a@example.com"})
        session = verify_session_token(token)

        assert session is not None
        assert session.subject == "12345"
        assert session.attributes == {"email": "a@example.com"}
        assert not session.is_expired

    def test_expired_token_rejected(self):
        token = create_session_token("12345", expires_delta=timedelta(seconds=-10))
        assert verify_session_token(token) is None

    def test_tampered_token_rejected(self):
        header, payload, _ = create_session_token("12345").split(".")
        _, _, other_signature = create_session_token("67890").split(".")
        assert verify_session_token(f"{header}.{payload}.{other_signature}") is None

    def test_token_signed_with_other_key_rejected(self):
        token = jwt.encode(
            {"sub": "12345", "type": "session", "iat": 0, "exp": 9999999999},
            "another-secret-key-that-is-long-enough",
            algorithm=ALGORITHM,
        )
        assert verify_session_token(token) is None

    def test_garbage_rejected(self):
        assert verify_session_token("not-a-jwt") is None

    def test_authorization_request_token_is_not_a_session(self):
        token = create_authorization_request_token(
            AuthorizationRequest(state="s", code_verifier="v")
        )
        assert verify_session_token(token) is None


class TestAuthorizationRequestToken:
    """Tests for the pending-login token."""

    def test_round_trip(self):
        token = create_authorization_request_token(
            AuthorizationRequest(state="abc", code_verifier="verifier", redirect_to="/api/private")
        )
        pending = verify_authorization_request_token(token)

        assert pending == AuthorizationRequest(
            state="abc", code_verifier="verifier", redirect_to="/api/private"
        )

    def test_session_token_is_not_an_authorization_request(self):
        token = create_session_token("12345")
        assert verify_authorization_request_token(token) is None
