"""
PPOB API - Password Hashing
bcrypt through passlib; the cost factor comes from settings
"""
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str, rounds: int) -> str:
    """Hash a password with a fresh salt at the given bcrypt cost"""
    return pwd_context.copy(bcrypt__rounds=rounds).hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a stored hash; malformed hashes never match"""
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        return False
