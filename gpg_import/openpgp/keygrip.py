"""
Keygrip computation.

The keygrip identifies a key to the keyring agent independently of the
OpenPGP packet format: it is a SHA-1 over the key's public parameters laid
out as canonical S-expression fragments, ``(1:<name><len>:<bytes>)``.
"""

import hashlib

from gpg_import.models.keys import (
    DsaKey,
    EccCurve,
    EcdhKey,
    EcdsaKey,
    EddsaKey,
    ElgamalKey,
    KeyAlgorithm,
    RsaKey,
)
from gpg_import.openpgp.curves import curve_domain


def compute_keygrip(algorithm: KeyAlgorithm) -> str:
    """
    Compute the keygrip of a public key.

    Args:
        algorithm: Decoded public key parameters.

    Returns:
        40 uppercase hex characters.
    """
    digest = hashlib.sha1()

    match algorithm:
        case RsaKey(n=n):
            # RSA hashes the bare modulus, with no S-expression framing
            digest.update(_signed_bytes(n))
        case DsaKey(p=p, q=q, g=g, y=y):
            for name, value in (("p", p), ("q", q), ("g", g), ("y", y)):
                digest.update(_sexp_fragment(name, _signed_bytes(value)))
        case ElgamalKey(p=p, g=g, y=y):
            for name, value in (("p", p), ("g", g), ("y", y)):
                digest.update(_sexp_fragment(name, _signed_bytes(value)))
        case EcdsaKey() | EddsaKey() | EcdhKey():
            _update_ec(digest, algorithm.curve, algorithm.point)

    return digest.hexdigest().upper()


def _update_ec(digest, curve: EccCurve, point: bytes) -> None:
    domain = curve_domain(curve)
    fragments = (
        ("p", _unsigned_bytes(domain.p)),
        ("a", _unsigned_bytes(domain.a)),
        ("b", _unsigned_bytes(domain.b)),
        ("g", domain.base_point),
        ("n", _unsigned_bytes(domain.n)),
        # Weierstrass points are uncompressed, 25519 points native 32 bytes
        ("q", point),
    )
    for name, value in fragments:
        digest.update(_sexp_fragment(name, value))


def _sexp_fragment(name: str, value: bytes) -> bytes:
    return f"(1:{name}{len(value)}:".encode("ascii") + value + b")"


def _unsigned_bytes(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def _signed_bytes(value: int) -> bytes:
    # The agent stores integers signed, so a set top bit gets a zero octet in front
    raw = _unsigned_bytes(value)
    if raw and raw[0] & 0x80:
        return b"\x00" + raw
    return raw
