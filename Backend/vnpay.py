import hashlib
import hmac
from enum import Enum
from typing import Any, Mapping, NamedTuple, Optional
from urllib.parse import quote

SECURE_HASH_KEY = "vnp_SecureHash"
SECURE_HASH_TYPE_KEY = "vnp_SecureHashType"
SECURE_HASH_TYPE = "HMACSHA512"

# Metadata about the signature, never part of the signed payload
EXCLUDED_KEYS = frozenset({SECURE_HASH_KEY, SECURE_HASH_TYPE_KEY})

# encodeURIComponent leaves these untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


class SignMode(str, Enum):
    ENCODED = "encoded"
    RAW = "raw"


class SignedQuery(NamedTuple):
    query: str
    secure_hash: str
    sign_data: str
    mode: SignMode


def to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def encode_component(value: str, space_plus: bool = False) -> str:
    encoded = quote(value, safe=_URI_COMPONENT_SAFE)
    if space_plus:
        encoded = encoded.replace("%20", "+")
    return encoded


def _sorted_items(params: Mapping[str, Any]) -> list:
    # 1. drop signature metadata and absent values
    # 2. sort by key
    return sorted(
        (str(k), to_str(v))
        for k, v in params.items()
        if k not in EXCLUDED_KEYS and v is not None
    )


def _join(items) -> str:
    return "&".join(f"{k}={v}" for k, v in items)


def encode_signable(params: Mapping[str, Any], mode: SignMode = SignMode.ENCODED, *, space_plus: bool = False) -> str:
    items = _sorted_items(params)
    if SignMode(mode) is SignMode.ENCODED:
        items = [(k, encode_component(v, space_plus)) for k, v in items]
    return _join(items)


def sign(secret, signable: str) -> str:
    key = secret if isinstance(secret, bytes) else secret.encode("utf-8")
    return hmac.new(key, signable.encode("utf-8"), hashlib.sha512).hexdigest()


def build_query(
        secret,
        params: Mapping[str, Any],
        mode: SignMode = SignMode.ENCODED,
        include_type: bool = True,
        *,
        space_plus: bool = False,
) -> SignedQuery:
    """
    Sign ``params`` and build the query string sent to the gateway.

    In encoded mode the query base is the signable string itself. In raw mode
    the signature covers plain values while the query carries a separately
    percent-encoded copy of the same pairs.
    """
    mode = SignMode(mode)
    sign_data = encode_signable(params, mode, space_plus=space_plus)
    secure_hash = sign(secret, sign_data)

    if mode is SignMode.ENCODED:
        base = sign_data
    else:
        base = _join(
            (quote(k, safe=""), quote(v, safe=""))
            for k, v in _sorted_items(params)
        )

    query = f"{base}&{SECURE_HASH_KEY}={secure_hash}"
    if include_type:
        query += f"&{SECURE_HASH_TYPE_KEY}={SECURE_HASH_TYPE}"
    return SignedQuery(query, secure_hash, sign_data, mode)


def verify(
        secret,
        params: Optional[Mapping[str, Any]],
        claimed_hash: Optional[str],
        mode: SignMode = SignMode.ENCODED,
        *,
        space_plus: bool = False,
) -> bool:
    """
    Check a callback's claimed hash against the one recomputed from ``params``.

    Returns False instead of raising for a missing hash or an empty parameter
    set. ``params`` is left untouched.
    """
    if not isinstance(claimed_hash, str) or not claimed_hash.strip():
        return False
    if not params:
        return False

    sign_data = encode_signable(params, mode, space_plus=space_plus)
    if not sign_data:
        return False

    expected = sign(secret, sign_data)
    claimed = claimed_hash.strip().lower().encode("utf-8")
    return hmac.compare_digest(expected.encode("ascii"), claimed)
