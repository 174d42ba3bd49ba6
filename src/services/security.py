"""Password hashing and bearer token signing."""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from src.config import get_settings
from src.errors import InvalidToken

settings = get_settings()

PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes of a password
PASSWORD_MAX_LENGTH = 72

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh random salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT naming the user as its subject."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.jwt_expiration_minutes)
    )
    to_encode = {
        "sub": user_id,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """Return the user id a token was issued for.

    Raises:
        InvalidToken: the token is expired, malformed or badly signed. The
            caller cannot tell these cases apart.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidToken() from e

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise InvalidToken()
    return user_id


def dummy_verify() -> None:
    """Spend the cost of one verification when there is no hash to check against."""
    pwd_context.dummy_verify()
