import secrets
from typing import Optional

def verify_api_key(provided_key: Optional[str], expected_key: Optional[str]) -> bool:
    """
    Check a client-supplied API key against the shared secret.

    Missing keys and an unset secret are always rejected. The comparison is
    exact and constant-time.
    """
    if not provided_key or not expected_key:
        return False
    return secrets.compare_digest(provided_key.encode("utf-8"), expected_key.encode("utf-8"))
