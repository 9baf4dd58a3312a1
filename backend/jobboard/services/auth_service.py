"""Authentication helpers — bcrypt password hashing and signed bearer tokens."""

import hmac
from uuid import UUID

import bcrypt
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from jobboard.config import get_settings

ACCESS_TOKEN_SALT = "jobboard-access-token"
PASSWORD_RESET_SALT = "jobboard-password-reset"


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Scrambled hashes of deleted accounts are not valid bcrypt strings
        return False


def _serializer(salt: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(get_settings().secret_key, salt=salt)


def create_access_token(user_id: UUID | str) -> str:
    """Issue a bearer token for the given user id."""
    return _serializer(ACCESS_TOKEN_SALT).dumps({"sub": str(user_id)})


def read_access_token(token: str, max_age: int | None = None) -> UUID | None:
    """Return the user id carried by a bearer token, or None if invalid/expired."""
    if max_age is None:
        max_age = get_settings().access_token_max_age
    try:
        payload = _serializer(ACCESS_TOKEN_SALT).loads(token, max_age=max_age)
        return UUID(payload["sub"])
    except (BadSignature, SignatureExpired, KeyError, TypeError, ValueError):
        return None


def _password_fingerprint(hashed_password: str) -> str:
    # The tail of a bcrypt hash is digest output, so any password change alters it
    return hashed_password[-16:]


def create_password_reset_token(user_id: UUID | str, email: str, hashed_password: str) -> str:
    """Issue a one-hour password reset token bound to the current email and password.

    Redeeming the token changes the password hash, which invalidates it.
    """
    return _serializer(PASSWORD_RESET_SALT).dumps(
        {"sub": str(user_id), "email": email, "pwd": _password_fingerprint(hashed_password)}
    )


def read_password_reset_token(token: str) -> tuple[UUID, str, str] | None:
    """Return (user_id, email, password fingerprint) from a reset token, or None if invalid/expired."""
    try:
        payload = _serializer(PASSWORD_RESET_SALT).loads(
            token, max_age=get_settings().password_reset_max_age
        )
        return UUID(payload["sub"]), payload["email"], payload["pwd"]
    except (BadSignature, SignatureExpired, KeyError, TypeError, ValueError):
        return None


def reset_token_matches(user, claims: tuple[UUID, str, str] | None) -> bool:
    """True when the token was issued to this active user and its password is unchanged."""
    if user is None or claims is None or not user.is_active:
        return False
    user_id, email, fingerprint = claims
    return (
        user.id == user_id
        and user.email == email
        and hmac.compare_digest(fingerprint, _password_fingerprint(user.hashed_password))
    )
