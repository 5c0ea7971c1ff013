from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from supabase import Client, create_client

from app.core.logging import get_logger
from app.core.settings import settings
from certify.models import User
from certify.store.supabase_client import get_supabase_client

log = get_logger(__name__)


class AuthenticationError(Exception):
    pass


@dataclass(frozen=True)
class AuthResult:
    user: User
    access_token: Optional[str] = None
    # Registration succeeded but the email address still has to be confirmed
    pending_verification: bool = False


def to_user(auth_user: Any) -> User:
    metadata = getattr(auth_user, "user_metadata", None) or {}
    return User(
        id=str(auth_user.id),
        username=metadata.get("username") or "User",
        email=getattr(auth_user, "email", None) or "",
        created_at=getattr(auth_user, "created_at", None),
    )


def _message(e: Exception, default: str) -> str:
    return getattr(e, "message", None) or str(e) or default


def _fresh_client() -> Client:
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError(
            "SUPABASE_URL / SUPABASE_KEY are missing. Set them in your environment."
        )
    return create_client(settings.supabase_url, settings.supabase_key)


class IdentityProvider:
    """
    Supabase Auth wrapper.

    Sign-up and sign-in run on a throwaway client so one user's session is
    never stored on the shared client used for token lookups.
    """

    def __init__(
        self,
        client: Optional[Client] = None,
        client_factory: Callable[[], Client] = _fresh_client,
    ):
        self._client = client
        self._client_factory = client_factory

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def register(self, username: str, email: str, password: str) -> AuthResult:
        if not username or not email or not password:
            raise ValueError("All fields are required")

        try:
            res = self._client_factory().auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"username": username}},
                }
            )
        except Exception as e:
            log.warning("Registration failed for %s: %s", email, e)
            raise AuthenticationError(_message(e, "Registration failed")) from e

        if res.user is None:
            raise AuthenticationError("Registration failed")

        session = res.session
        return AuthResult(
            user=to_user(res.user),
            access_token=session.access_token if session else None,
            pending_verification=session is None,
        )

    def login(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            raise ValueError("All fields are required")

        try:
            res = self._client_factory().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            log.warning("Login failed for %s: %s", email, e)
            raise AuthenticationError(_message(e, "Authentication failed")) from e

        if res.user is None or res.session is None:
            raise AuthenticationError("Authentication failed")

        return AuthResult(user=to_user(res.user), access_token=res.session.access_token)

    def get_user(self, access_token: str) -> Optional[User]:
        """Session lookup; None when the token is invalid or expired."""
        try:
            res = self.client.auth.get_user(access_token)
        except Exception as e:
            log.info("Session lookup rejected: %s", e)
            return None

        if res is None or res.user is None:
            return None
        return to_user(res.user)

    def sign_out(self, access_token: str) -> None:
        try:
            self.client.auth.admin.sign_out(access_token)
        except Exception as e:
            # The local session is dropped regardless
            log.warning("Remote sign-out failed: %s", e)
