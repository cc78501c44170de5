"""Email/password authentication backed by the ``users`` collection.

One :class:`AuthService` instance holds the signed-in user for one UI
session (a Streamlit session or a CLI invocation).
"""

import logging
from dataclasses import dataclass
from typing import Optional

import bcrypt

from seo_monitor.store import RecordStore, StoreError
from seo_monitor.utils.validators import validate_email

logger = logging.getLogger(__name__)

# bcrypt only hashes the first 72 bytes and refuses longer input.
MAX_PASSWORD_BYTES = 72


class AuthError(Exception):
    """Sign-up or sign-in was refused; the message is shown to the user."""


@dataclass(frozen=True)
class AuthUser:
    id: int
    email: str


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


class AuthService:
    """Sign users up and in, and expose the current session's user.

    Usage::

        auth = AuthService(store)
        auth.sign_up("me@example.com", "secret123")
        auth.sign_in_with_password("me@example.com", "secret123")
        user = auth.get_user()
    """

    def __init__(self, store: RecordStore, min_password_length: int = 6):
        self._store = store
        self._min_password_length = min_password_length
        self._user: Optional[AuthUser] = None

    def _check_credentials(self, email: str, password: str) -> str:
        email = (email or "").strip().lower()
        if not email or not password:
            raise AuthError("Email and password are required")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise AuthError(f"Password should be at most {MAX_PASSWORD_BYTES} bytes")
        return email

    def sign_up(self, email: str, password: str) -> AuthUser:
        """Create an account.  Does not sign the user in."""
        email = self._check_credentials(email, password)
        ok, message = validate_email(email)
        if not ok:
            raise AuthError(message)
        if len(password) < self._min_password_length:
            raise AuthError(
                f"Password should be at least {self._min_password_length} characters"
            )
        if self._store.count("users", {"email": email}):
            raise AuthError("User already registered")

        try:
            [row] = self._store.insert(
                "users", {"email": email, "password_hash": hash_password(password)}
            )
        except StoreError as exc:
            raise AuthError(str(exc)) from exc
        logger.info("Registered user %s (id=%s)", email, row["id"])
        return AuthUser(id=row["id"], email=row["email"])

    def sign_in_with_password(self, email: str, password: str) -> AuthUser:
        email = self._check_credentials(email, password)
        rows = self._store.select("users", {"email": email}, limit=1)
        if not rows or not verify_password(password, rows[0]["password_hash"]):
            logger.warning("Failed sign-in for %s", email)
            raise AuthError("Invalid login credentials")
        self._user = AuthUser(id=rows[0]["id"], email=rows[0]["email"])
        logger.info("Signed in %s", email)
        return self._user

    def sign_out(self) -> None:
        if self._user is not None:
            logger.info("Signed out %s", self._user.email)
        self._user = None

    def get_user(self) -> Optional[AuthUser]:
        """Return the signed-in user, or ``None``."""
        return self._user
