"""Password hashing used by Player.

Digests are plain SHA-256 hex over the UTF-8 password, matching the format of
existing player records. There is no salt and a single round.
"""

import hashlib
import hmac


def hash_password(password: str) -> str:
    """Return the hex digest stored for `password`."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(password, digest) -> bool:
    """Check `password` against a stored digest in constant time."""
    if not isinstance(password, str) or not isinstance(digest, str):
        return False
    return hmac.compare_digest(hash_password(password), digest)
