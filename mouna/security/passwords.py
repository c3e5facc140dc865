from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Verify a candidate password; an unreadable stored hash counts as a mismatch."""
    try:
        return pwd_context.verify(plain_password, stored_hash)
    except (ValueError, TypeError):
        return False
