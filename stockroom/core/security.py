from datetime import timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from stockroom.core.config import settings
from stockroom.core.database import utcnow
from stockroom.core.logging_config import get_logger

logger = get_logger(__name__)

# pbkdf2_sha256 only: passlib's bcrypt backend breaks against current bcrypt releases
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def is_valid_password_hash(hashed_password: str) -> bool:
    """True for a hash produced by ``get_password_hash``."""
    if not isinstance(hashed_password, str):
        return False
    return pwd_context.identify(hashed_password) is not None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a stored hash.
    Returns False if the hash is empty, malformed or does not match.
    """
    if not hashed_password:
        logger.debug("Password verification failed: empty hash provided")
        return False

    if not is_valid_password_hash(hashed_password):
        logger.warning("Password verification failed: unrecognised hash format")
        return False

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.warning(f"Password verification error: {str(e)}")
        return False


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
