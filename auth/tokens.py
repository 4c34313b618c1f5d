"""
auth/tokens.py -- JWT issuing/verification and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the user id as the "sub" claim
       plus "iat" and "exp". The server keeps no session state; a token is
       valid exactly as long as its signature checks out and "exp" is in the
       future. Verification raises ExpiredToken or InvalidToken -- the
       access-control dependency turns either into a 401.

  Passwords: bcrypt directly (no passlib wrapper). Each hash embeds its own
       random salt; checkpw compares in constant time. The _DUMMY_HASH
       constant lets login() run bcrypt even for unknown emails so response
       time does not reveal which emails are registered.

  SECRET_KEY: TokenIssuer receives it from Settings at startup. Nothing in
       this module reads configuration on its own.

Layer rule: no imports from api/ or products/. Import from core/ is allowed.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from core.errors import ExpiredToken, InvalidToken

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int = 12) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt raises ValueError for inputs over 72 bytes; the signup schema
    rejects those before they get here.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed or empty stored hash
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("stockroom_timing_dummy")


# ---------------------------------------------------------------------------
# JWT issue / verify
# ---------------------------------------------------------------------------


class TokenIssuer:
    """Signs and verifies session tokens with a process-wide secret.

    Built once in the app lifespan from Settings and shared read-only by every
    request:

        tokens = TokenIssuer(settings.secret_key, settings.token_expire_seconds)
        token = tokens.issue(user.id)
        user_id = tokens.verify(token)
    """

    def __init__(self, secret_key: str, expire_seconds: int) -> None:
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def issue(self, user_id: int, issued_at: datetime | None = None) -> str:
        """Encode a signed JWT for user_id, expiring expire_seconds after issued_at.

        Args:
            user_id:   Numeric user ID stored in the DB.
            issued_at: Issue time. Defaults to now (UTC). Tests pass a past
                       time to mint tokens that are already expired.
        """
        iat = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": iat,
            "exp": iat + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> int:
        """Check signature and expiry; return the embedded user id.

        Raises:
            ExpiredToken: signature valid but "exp" is in the past.
            InvalidToken: bad signature, malformed token, or unusable "sub".
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except ExpiredSignatureError as exc:
            raise ExpiredToken() from exc
        except JWTError as exc:
            raise InvalidToken() from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject.isdigit():
            raise InvalidToken()
        return int(subject)
