"""Password hashing utilities."""
import bcrypt

DEFAULT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    """Encode a password as UTF-8, truncated to what bcrypt accepts."""
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Passwords longer than 72 bytes are truncated to 72 bytes, the way
    bcrypt itself did before it started rejecting them.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor (log2 of the iteration count)

    Returns:
        Hashed password string

    Example:
        >>> hashed = hash_password("mypassword123", rounds=4)
        >>> hashed.startswith("$2b$04$")
        True
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(_password_bytes(password), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Previously hashed password

    Returns:
        True if password matches hash, False otherwise

    Example:
        >>> hashed = hash_password("mypassword123", rounds=4)
        >>> verify_password("mypassword123", hashed)
        True
        >>> verify_password("wrongpassword", hashed)
        False
    """
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_bytes)
