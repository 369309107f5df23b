from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher

from ..config import settings

# bcrypt only looks at the first 72 bytes; longer input is rejected upstream
MAX_PASSWORD_BYTES = 72

password_hash = PasswordHash((BcryptHasher(rounds=settings.bcrypt_rounds),))


def hash_password(raw_password: str) -> str:
    return password_hash.hash(raw_password)


def verify_password(raw_password: str, hashed_password: str) -> bool:
    return password_hash.verify(raw_password, hashed_password)
