"""
auth/accounts.py -- Signup and login.

Both operations return (User, token) so the route layer only has to shape the
response. Errors are raised as core.errors types and converted to the
{"success": false, "message": ...} envelope by api/main.py.

Security:
  login() never reveals whether an email is registered. Unknown email and
  wrong password raise the same InvalidCredentials, and bcrypt runs in both
  cases (against _DUMMY_HASH for unknown emails) so timing matches too.

Layer rule: no imports from api/ or products/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore, normalize_email
from auth.tokens import _DUMMY_HASH, TokenIssuer, hash_password, verify_password
from core.errors import DuplicateEmail, InvalidCredentials, InvalidInput

logger = logging.getLogger("stockroom.auth")


def signup(
    store: UserStore,
    tokens: TokenIssuer,
    name: str,
    email: str,
    password: str,
    *,
    rounds: int = 12,
    min_password_length: int = 6,
) -> tuple[User, str]:
    """Create an account and issue its first token.

    Presence of all three fields is checked by the request schema; this
    function re-checks blanks so it is safe to call directly.
    """
    name = name.strip()
    email = normalize_email(email)
    if not name or not email or not password:
        raise InvalidInput("Please provide name, email and password")
    if len(password) < min_password_length:
        raise InvalidInput(f"Password must be at least {min_password_length} characters long")

    if store.get_by_email(email) is not None:
        raise DuplicateEmail()

    try:
        user_id = store.create_user(User(name=name, email=email, hashed_password=hash_password(password, rounds)))
    except IntegrityError as exc:
        # A concurrent signup won the UNIQUE(email) race after our pre-check.
        raise DuplicateEmail() from exc

    user = store.get_by_id(user_id)
    logger.info("Account created (user_id=%d)", user_id)
    return user, tokens.issue(user_id)


def login(store: UserStore, tokens: TokenIssuer, email: str, password: str) -> tuple[User, str]:
    """Verify credentials with timing equalization and issue a token.

    Do NOT short-circuit on an unknown email before running bcrypt -- that
    reintroduces the email-enumeration timing leak.
    """
    user = store.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        logger.warning("Failed login for unknown email")
        raise InvalidCredentials()
    if not verify_password(password, user.hashed_password):
        logger.warning("Failed login (user_id=%d)", user.id)
        raise InvalidCredentials()
    return user, tokens.issue(user.id)
