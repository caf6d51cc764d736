from typing import Optional, Tuple
from passlib.context import CryptContext

# New hashes use pbkdf2_sha256; bcrypt hashes still verify and get upgraded on login
credential_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt_sha256", "bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    return credential_context.hash(password)

def check_password(password: str, stored_hash: str) -> Tuple[bool, Optional[str]]:
    """
    Returns (matches, replacement_hash). replacement_hash is set when the
    stored hash uses a deprecated scheme and should be rewritten.
    """
    if not stored_hash:
        return False, None
    try:
        return credential_context.verify_and_update(password, stored_hash)
    except ValueError:
        # Unrecognized hash format
        return False, None
