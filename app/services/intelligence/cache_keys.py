"""Cache key derivation."""
import hashlib

from app.core.cache_policy import PayloadKind

DIGEST_LENGTH = 16  # hex chars, 64 bits
_SEPARATOR = "\x1f"


def derive_key(
    kind: PayloadKind | str,
    canonical_text: str,
    params: dict | None = None,
) -> str:
    """Derive a deterministic cache key, e.g. "dashboard:3f2a9c0d1b7e4a55".

    The digest covers the payload kind, the canonical text and every param
    (sorted by name), so any change in input yields a different key.
    Unknown kinds and non-string canonical text raise.
    """
    kind = PayloadKind(kind)
    if not isinstance(canonical_text, str):
        raise TypeError(
            f"canonical_text must be str, got {type(canonical_text).__name__}"
        )

    parts = [kind.value, canonical_text]
    if params:
        parts.extend(f"{k}={v}" for k, v in sorted(params.items()))

    digest = hashlib.sha256(_SEPARATOR.join(parts).encode("utf-8")).hexdigest()
    return f"{kind.value}:{digest[:DIGEST_LENGTH]}"
