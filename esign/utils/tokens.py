import secrets
import string


def generate_random_token(length: int = 10, numeric_only: bool = False) -> str:
    """
    Generate a cryptographically secure random token.

    Args:
        length: Number of characters (minimum: 1)
        numeric_only: Restrict the alphabet to digits

    Returns:
        Randomly generated token
    """
    if length < 1:
        raise ValueError("Token length must be at least 1")

    alphabet = string.digits
    if not numeric_only:
        alphabet = string.ascii_letters + string.digits

    return "".join(secrets.choice(alphabet) for _ in range(length))
