"""
Public key algorithm models.

Each supported algorithm family has its own frozen parameter set. Together they
form the closed ``KeyAlgorithm`` union that the fingerprint and keygrip code
matches on.
"""

from dataclasses import dataclass
from enum import IntEnum, StrEnum


class PublicKeyAlgorithm(IntEnum):
    """OpenPGP public key algorithm identifiers."""

    RSA_ENCRYPT_OR_SIGN = 1
    RSA_ENCRYPT_ONLY = 2
    RSA_SIGN_ONLY = 3
    ELGAMAL_ENCRYPT_ONLY = 16
    DSA = 17
    ECDH = 18
    ECDSA = 19
    ELGAMAL_ENCRYPT_OR_SIGN = 20
    EDDSA = 22
    X25519 = 25
    ED25519 = 27


class EccCurve(StrEnum):
    """Named curves supported for EC keys, by their GnuPG names."""

    NIST_P256 = "nistp256"
    NIST_P384 = "nistp384"
    NIST_P521 = "nistp521"
    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"
    CURVE25519 = "cv25519"

    @property
    def is_weierstrass(self) -> bool:
        """Whether points on this curve use SEC1 octet encoding."""
        return self not in (self.ED25519, self.CURVE25519)


@dataclass(frozen=True, kw_only=True)
class RsaKey:
    """RSA public parameters."""

    algorithm_id: PublicKeyAlgorithm
    n: int
    e: int


@dataclass(frozen=True, kw_only=True)
class DsaKey:
    """DSA public parameters."""

    algorithm_id: PublicKeyAlgorithm = PublicKeyAlgorithm.DSA
    p: int
    q: int
    g: int
    y: int


@dataclass(frozen=True, kw_only=True)
class ElgamalKey:
    """Elgamal public parameters."""

    algorithm_id: PublicKeyAlgorithm
    p: int
    g: int
    y: int


@dataclass(frozen=True, kw_only=True)
class EcdsaKey:
    """
    ECDSA public parameters.

    Attributes:
        curve: Named curve.
        point: Public point in uncompressed SEC1 form (0x04 || x || y).
    """

    algorithm_id: PublicKeyAlgorithm = PublicKeyAlgorithm.ECDSA
    curve: EccCurve
    point: bytes


@dataclass(frozen=True, kw_only=True)
class EddsaKey:
    """
    EdDSA public parameters.

    Attributes:
        curve: Named curve (always Ed25519).
        point: Public point in native compact form (32 bytes, no prefix).
    """

    algorithm_id: PublicKeyAlgorithm
    curve: EccCurve
    point: bytes


@dataclass(frozen=True, kw_only=True)
class EcdhKey:
    """
    ECDH public parameters.

    Attributes:
        curve: Named curve.
        point: Uncompressed SEC1 point for Weierstrass curves, native
            32-byte form for Curve25519.
        kdf_hash: KDF hash algorithm id, None for native X25519 keys.
        kdf_cipher: KDF key-wrap cipher id, None for native X25519 keys.
    """

    algorithm_id: PublicKeyAlgorithm
    curve: EccCurve
    point: bytes
    kdf_hash: int | None = None
    kdf_cipher: int | None = None


KeyAlgorithm = RsaKey | DsaKey | ElgamalKey | EcdsaKey | EddsaKey | EcdhKey
