"""bcrypt password hashing."""
import bcrypt

BCRYPT_ROUNDS = 10


def hash_password(plaintext: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plaintext: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False
