"""
Selection of the signing key within a bundle.
"""

import string

import structlog

from gpg_import.exceptions import AmbiguousSelectionError, KeyNotFoundError
from gpg_import.models.bundle import KeyBundle, SelectedKey

logger = structlog.get_logger(__name__)


def select_key(bundle: KeyBundle, key_filter: str | None = None) -> SelectedKey:
    """
    Pick the primary key or one subkey by fingerprint, key id or fingerprint suffix.

    Args:
        bundle: The resolved key.
        key_filter: Hex filter, case-insensitive. Spaces and a ``0x`` prefix are
            ignored. None or blank selects the primary key.

    Raises:
        KeyNotFoundError: If nothing matches, or the filter is not hex.
        AmbiguousSelectionError: If more than one key matches.
    """
    candidates = _candidates(bundle)
    normalized = _normalize_filter(key_filter)

    if not normalized:
        selected = candidates[0]
    else:
        matches = [key for key in candidates if key.fingerprint.endswith(normalized)]
        if not matches:
            msg = f"No key matches filter {key_filter!r}"
            raise KeyNotFoundError(msg, key_filter=key_filter)
        if len(matches) > 1:
            msg = f"Filter {key_filter!r} matches {len(matches)} keys"
            raise AmbiguousSelectionError(
                msg,
                key_filter=key_filter,
                candidates=tuple(key.fingerprint for key in matches),
            )
        selected = matches[0]

    logger.debug(
        "Selected key",
        fingerprint=selected.fingerprint,
        is_subkey=selected.is_subkey,
    )
    return selected


def _candidates(bundle: KeyBundle) -> list[SelectedKey]:
    keys = [
        SelectedKey(
            fingerprint=bundle.fingerprint,
            key_id=bundle.key_id,
            keygrip=bundle.keygrip,
            created_on=bundle.created_on,
            expires_on=bundle.expires_on,
        )
    ]
    seen = {bundle.fingerprint}
    for subkey in bundle.subkeys:
        if subkey.fingerprint in seen:
            continue
        seen.add(subkey.fingerprint)
        keys.append(
            SelectedKey(
                fingerprint=subkey.fingerprint,
                key_id=subkey.key_id,
                keygrip=subkey.keygrip,
                created_on=subkey.created_on,
                expires_on=subkey.expires_on,
                is_subkey=True,
            )
        )
    return keys


def _normalize_filter(key_filter: str | None) -> str:
    if key_filter is None:
        return ""
    normalized = "".join(key_filter.split()).upper()
    if normalized.startswith("0X"):
        normalized = normalized[2:]
    if any(char not in string.hexdigits for char in normalized):
        msg = f"Key filter {key_filter!r} is not hexadecimal"
        raise KeyNotFoundError(msg, key_filter=key_filter)
    return normalized
