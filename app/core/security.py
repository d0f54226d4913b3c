import logging
import bcrypt
from passlib.context import CryptContext
from datetime import datetime, timedelta
from typing import Optional
from jose import jwt
from app.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES

logger = logging.getLogger(__name__)

# passlib verifies hashes created by older deployments; new hashes use bcrypt directly
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    """Encode a password, truncated to bcrypt's 72-byte limit on a UTF-8 boundary."""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) <= BCRYPT_MAX_BYTES:
        return password_bytes
    logger.warning("Password exceeds 72 bytes, truncating before hashing")
    return password_bytes[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore").encode("utf-8")


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt.
    
    Raises:
        ValueError: If the password cannot be hashed
    """
    try:
        return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")
    except Exception as e:
        logger.error(f"Password hashing failed: {e}", exc_info=True)
        raise ValueError("Invalid password") from e


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against its bcrypt hash."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        try:
            return pwd_context.verify(password, hashed)
        except Exception as e:
            logger.error(f"Password verification failed: {e}", exc_info=True)
            return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode a JWT; raises jose.JWTError on invalid or expired tokens."""
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
