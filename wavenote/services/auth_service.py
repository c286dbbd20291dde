# services/auth_service.py

import asyncio
import hashlib
import hmac
import inspect
import logging
import secrets
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import pytz

from wavenote.database import JsonDocumentStore, Timestamp
from wavenote.models.user import AuthError, User
from wavenote.utils.validators import is_valid_email

logger = logging.getLogger(__name__)

AuthStateCallback = Callable[[Optional[User]], Union[None, Awaitable[None]]]

ACCOUNTS_COLLECTION = "accounts"
PBKDF2_ITERATIONS = 260_000


class AuthSession:
    """
    Authentication state of one browser session.

    Holds the currently signed-in user and notifies subscribers whenever it
    changes. Components that need the user get the session passed in.
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.current_user: Optional[User] = None
        self._listeners: List[AuthStateCallback] = []

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    async def on_auth_state_changed(self, callback: AuthStateCallback) -> Callable[[], None]:
        """Subscribe to user changes; the callback also runs once right away. Returns an unsubscribe function"""
        self._listeners.append(callback)
        await self._notify(callback, self.current_user)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def set_user(self, user: Optional[User]) -> None:
        self.current_user = user
        for callback in list(self._listeners):
            await self._notify(callback, user)

    @staticmethod
    async def _notify(callback: AuthStateCallback, user: Optional[User]) -> None:
        result = callback(user)
        if inspect.isawaitable(result):
            await result


class AuthService:
    """E-mail/password accounts kept in the document store"""

    def __init__(
        self,
        store: JsonDocumentStore,
        min_password_length: int = 6,
        iterations: int = PBKDF2_ITERATIONS
    ):
        self.store = store
        self.min_password_length = min_password_length
        self.iterations = iterations

    # ===== ACCOUNTS =====

    async def sign_up(self, session: AuthSession, email: str, password: str) -> User:
        """Create an account and sign the session in"""
        email = self._normalize_email(email)
        if not is_valid_email(email):
            raise AuthError("auth/invalid-email", "The email address is badly formatted (auth/invalid-email).")
        if len(password) < self.min_password_length:
            raise AuthError(
                "auth/weak-password",
                f"Password should be at least {self.min_password_length} characters (auth/weak-password)."
            )
        if await self._find_account(email) is not None:
            raise AuthError(
                "auth/email-already-in-use",
                "The email address is already in use by another account (auth/email-already-in-use)."
            )

        salt = secrets.token_hex(16)
        created_at = datetime.now(pytz.UTC)
        uid = await self.store.insert(ACCOUNTS_COLLECTION, {
            "email": email,
            "password_hash": await self._hash_password_async(password, salt, self.iterations),
            "salt": salt,
            "iterations": self.iterations,
            "created_at": created_at
        })

        user = User(uid=uid, email=email, created_at=created_at)
        await session.set_user(user)
        logger.info(f"✅ User signed up: {email}")
        return user

    async def log_in(self, session: AuthSession, email: str, password: str) -> User:
        """Check credentials and sign the session in"""
        email = self._normalize_email(email)
        found = await self._find_account(email)
        if found is None:
            raise AuthError("auth/invalid-credential", "Invalid email or password (auth/invalid-credential).")

        uid, account = found
        expected = account.get("password_hash", "")
        actual = await self._hash_password_async(
            password, account.get("salt", ""), int(account.get("iterations", self.iterations))
        )
        if not hmac.compare_digest(expected, actual):
            raise AuthError("auth/invalid-credential", "Invalid email or password (auth/invalid-credential).")

        user = self._to_user(uid, account)
        await session.set_user(user)
        logger.info(f"🔑 User logged in: {email}")
        return user

    async def log_out(self, session: AuthSession) -> None:
        user = session.current_user
        await session.set_user(None)
        if user:
            logger.info(f"👋 User logged out: {user.email}")

    async def get_user(self, uid: str) -> Optional[User]:
        account = await self.store.get(ACCOUNTS_COLLECTION, uid)
        if account is None:
            return None
        return self._to_user(uid, account)

    async def restore_session(self, session: AuthSession, uid: str) -> Optional[User]:
        """Sign a fresh session in from a remembered uid, if the account still exists"""
        user = await self.get_user(uid)
        if user is not None:
            await session.set_user(user)
        return user

    # ===== HELPERS =====

    async def _find_account(self, email: str) -> Optional[tuple]:
        for uid, account in await self.store.list(ACCOUNTS_COLLECTION):
            if account.get("email") == email:
                return uid, account
        return None

    @staticmethod
    def _normalize_email(email: str) -> str:
        return (email or "").strip().lower()

    async def _hash_password_async(self, password: str, salt: str, iterations: int) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._hash_password, password, salt, iterations)

    @staticmethod
    def _hash_password(password: str, salt: str, iterations: int) -> str:
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
        return digest.hex()

    @staticmethod
    def _to_user(uid: str, account: Dict[str, Any]) -> User:
        created_at = account.get("created_at")
        if isinstance(created_at, Timestamp):
            created_at = created_at.to_datetime()
        return User(uid=uid, email=account.get("email", ""), created_at=created_at)
