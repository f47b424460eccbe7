import hashlib
import hmac


def hash_text(text: str) -> str:
    """Deterministic SHA-256 digest of `text` as 64 lowercase hex characters."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def verify_hash(text: str, digest: str) -> bool:
    """Constant-time comparison of `text`'s digest against a stored one."""
    return hmac.compare_digest(hash_text(text), digest)
