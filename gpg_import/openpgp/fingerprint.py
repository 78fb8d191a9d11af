"""
Key fingerprints and key ids.
"""

import hashlib

from gpg_import.exceptions import UnsupportedKeyVersionError
from gpg_import.models.packets import KeyPacket

_V4_PREFIX = 0x99
_KEY_ID_LENGTH = 16


def compute_fingerprint(key: KeyPacket) -> str:
    """
    Compute the fingerprint of a key packet.

    The v4 fingerprint is SHA-1 over ``0x99``, the two-octet public body length
    and the public body itself. It is the same for a secret key packet and its
    public counterpart.

    Returns:
        40 uppercase hex characters.

    Raises:
        UnsupportedKeyVersionError: If the key is not a version 4 key.
    """
    if key.version != 4:
        msg = f"Cannot fingerprint a version {key.version} key"
        raise UnsupportedKeyVersionError(msg, version=key.version)

    digest = hashlib.sha1()
    digest.update(bytes([_V4_PREFIX]))
    digest.update(len(key.public_body).to_bytes(2, "big"))
    digest.update(key.public_body)
    return digest.hexdigest().upper()


def key_id_from_fingerprint(fingerprint: str) -> str:
    """Return the key id of a v4 fingerprint (its last 16 hex characters)."""
    return fingerprint[-_KEY_ID_LENGTH:].upper()
