"""
Public key parameter decoding.

Key packets carry their algorithm's public parameters as a run of MPIs, or for
EC keys as a curve OID followed by an encoded point. Which point convention
applies depends on the algorithm id:

- ECDSA and ECDH wrap a SEC1 point in an MPI.
- Legacy EdDSA and Curve25519 ECDH wrap the native point in an MPI behind a
  0x40 prefix.
- Native X25519 and Ed25519 keys store the raw 32-byte point with no OID.
"""

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, x25519

from gpg_import.exceptions import MalformedPacketError, UnsupportedAlgorithmError
from gpg_import.models.keys import (
    DsaKey,
    EccCurve,
    EcdhKey,
    EcdsaKey,
    EddsaKey,
    ElgamalKey,
    KeyAlgorithm,
    PublicKeyAlgorithm,
    RsaKey,
)
from gpg_import.openpgp.curves import curve_from_oid, weierstrass_curve

_NATIVE_POINT_PREFIX = 0x40
_NATIVE_POINT_SIZE = 32
_KDF_PARAMS_LENGTH = 3
_KDF_RESERVED = 0x01


def parse_mpi(data: bytes) -> tuple[bytes, int]:
    """
    Parse an MPI (Multi-Precision Integer) from OpenPGP format.

    MPI format: [bit_count(2 bytes)] + [data]

    Returns:
        Tuple of (mpi_bytes, total_bytes_consumed).

    Raises:
        MalformedPacketError: If the MPI runs past the end of ``data``.
    """
    if len(data) < 2:
        msg = "MPI too short"
        raise MalformedPacketError(msg)

    bit_count = int.from_bytes(data[:2], "big")
    byte_count = (bit_count + 7) // 8

    if len(data) < 2 + byte_count:
        msg = f"MPI data incomplete: need {byte_count}, have {len(data) - 2}"
        raise MalformedPacketError(msg)

    mpi_bytes = data[2 : 2 + byte_count]
    return mpi_bytes, 2 + byte_count


def decode_key_material(algorithm_id: int, data: bytes) -> tuple[KeyAlgorithm, int]:
    """
    Decode the public parameters that follow the algorithm id in a key packet.

    Args:
        algorithm_id: Public key algorithm id from the key packet.
        data: Packet body from the first parameter onwards. Trailing bytes
            (secret key material) are left alone.

    Returns:
        Tuple of (parameters, bytes_consumed).

    Raises:
        UnsupportedAlgorithmError: If the algorithm or curve is not supported.
        MalformedPacketError: If the parameters are truncated or invalid.
    """
    algorithm = _parse_algorithm(algorithm_id)

    match algorithm:
        case (
            PublicKeyAlgorithm.RSA_ENCRYPT_OR_SIGN
            | PublicKeyAlgorithm.RSA_ENCRYPT_ONLY
            | PublicKeyAlgorithm.RSA_SIGN_ONLY
        ):
            (n, e), consumed = _read_integers(data, 2)
            return RsaKey(algorithm_id=algorithm, n=n, e=e), consumed
        case PublicKeyAlgorithm.DSA:
            (p, q, g, y), consumed = _read_integers(data, 4)
            return DsaKey(p=p, q=q, g=g, y=y), consumed
        case PublicKeyAlgorithm.ELGAMAL_ENCRYPT_ONLY | PublicKeyAlgorithm.ELGAMAL_ENCRYPT_OR_SIGN:
            (p, g, y), consumed = _read_integers(data, 3)
            return ElgamalKey(algorithm_id=algorithm, p=p, g=g, y=y), consumed
        case PublicKeyAlgorithm.ECDSA:
            return _decode_ecdsa(data)
        case PublicKeyAlgorithm.EDDSA:
            return _decode_legacy_eddsa(data)
        case PublicKeyAlgorithm.ECDH:
            return _decode_ecdh(data)
        case PublicKeyAlgorithm.X25519:
            point = _read_native_point(data, x25519.X25519PublicKey)
            key = EcdhKey(algorithm_id=algorithm, curve=EccCurve.CURVE25519, point=point)
            return key, _NATIVE_POINT_SIZE
        case PublicKeyAlgorithm.ED25519:
            point = _read_native_point(data, ed25519.Ed25519PublicKey)
            key = EddsaKey(algorithm_id=algorithm, curve=EccCurve.ED25519, point=point)
            return key, _NATIVE_POINT_SIZE


def _parse_algorithm(algorithm_id: int) -> PublicKeyAlgorithm:
    try:
        return PublicKeyAlgorithm(algorithm_id)
    except ValueError:
        msg = f"Unsupported public key algorithm: {algorithm_id}"
        raise UnsupportedAlgorithmError(msg, algorithm=algorithm_id) from None


def _read_integers(data: bytes, count: int) -> tuple[list[int], int]:
    values = []
    offset = 0
    for _ in range(count):
        raw, consumed = parse_mpi(data[offset:])
        values.append(int.from_bytes(raw, "big"))
        offset += consumed
    return values, offset


def _read_curve(data: bytes) -> tuple[EccCurve, int]:
    if not data:
        msg = "Missing curve OID"
        raise MalformedPacketError(msg)

    oid_length = data[0]
    if oid_length in (0, 0xFF):
        msg = f"Reserved curve OID length: {oid_length}"
        raise MalformedPacketError(msg)
    if len(data) < 1 + oid_length:
        msg = "Curve OID truncated"
        raise MalformedPacketError(msg)

    return curve_from_oid(data[1 : 1 + oid_length]), 1 + oid_length


def _decode_ecdsa(data: bytes) -> tuple[EcdsaKey, int]:
    curve, offset = _read_curve(data)
    if not curve.is_weierstrass:
        msg = f"Curve {curve} cannot be used with ECDSA"
        raise UnsupportedAlgorithmError(msg, algorithm=str(curve))

    raw_point, consumed = parse_mpi(data[offset:])
    point = _normalize_weierstrass_point(curve, raw_point)
    return EcdsaKey(curve=curve, point=point), offset + consumed


def _decode_legacy_eddsa(data: bytes) -> tuple[EddsaKey, int]:
    curve, offset = _read_curve(data)
    if curve is not EccCurve.ED25519:
        msg = f"Curve {curve} cannot be used with EdDSA"
        raise UnsupportedAlgorithmError(msg, algorithm=str(curve))

    raw_point, consumed = parse_mpi(data[offset:])
    point = _strip_native_prefix(raw_point, ed25519.Ed25519PublicKey)
    key = EddsaKey(algorithm_id=PublicKeyAlgorithm.EDDSA, curve=curve, point=point)
    return key, offset + consumed


def _decode_ecdh(data: bytes) -> tuple[EcdhKey, int]:
    curve, offset = _read_curve(data)
    if curve is EccCurve.ED25519:
        msg = "Curve ed25519 cannot be used with ECDH"
        raise UnsupportedAlgorithmError(msg, algorithm=str(curve))

    raw_point, consumed = parse_mpi(data[offset:])
    offset += consumed
    if curve is EccCurve.CURVE25519:
        point = _strip_native_prefix(raw_point, x25519.X25519PublicKey)
    else:
        point = _normalize_weierstrass_point(curve, raw_point)

    kdf = data[offset : offset + 1 + _KDF_PARAMS_LENGTH]
    if len(kdf) < 1 + _KDF_PARAMS_LENGTH or kdf[0] != _KDF_PARAMS_LENGTH:
        msg = "ECDH KDF parameters missing or truncated"
        raise MalformedPacketError(msg)
    if kdf[1] != _KDF_RESERVED:
        msg = f"Unknown ECDH KDF parameter version: {kdf[1]}"
        raise MalformedPacketError(msg)

    key = EcdhKey(
        algorithm_id=PublicKeyAlgorithm.ECDH,
        curve=curve,
        point=point,
        kdf_hash=kdf[2],
        kdf_cipher=kdf[3],
    )
    return key, offset + len(kdf)


def _normalize_weierstrass_point(curve: EccCurve, raw_point: bytes) -> bytes:
    try:
        public_key = ec.EllipticCurvePublicKey.from_encoded_point(
            weierstrass_curve(curve), raw_point
        )
    except ValueError as e:
        msg = f"Invalid {curve} point: {e}"
        raise MalformedPacketError(msg) from e
    return public_key.public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
    )


def _strip_native_prefix(
    raw_point: bytes,
    key_type: type[ed25519.Ed25519PublicKey] | type[x25519.X25519PublicKey],
) -> bytes:
    if len(raw_point) != _NATIVE_POINT_SIZE + 1 or raw_point[0] != _NATIVE_POINT_PREFIX:
        msg = f"Unsupported native point encoding ({len(raw_point)} bytes)"
        raise UnsupportedAlgorithmError(msg, algorithm=raw_point[:1].hex())
    return _validate_native_point(raw_point[1:], key_type)


def _read_native_point(
    data: bytes,
    key_type: type[ed25519.Ed25519PublicKey] | type[x25519.X25519PublicKey],
) -> bytes:
    if len(data) < _NATIVE_POINT_SIZE:
        msg = "Native public key truncated"
        raise MalformedPacketError(msg)
    return _validate_native_point(data[:_NATIVE_POINT_SIZE], key_type)


def _validate_native_point(
    point: bytes,
    key_type: type[ed25519.Ed25519PublicKey] | type[x25519.X25519PublicKey],
) -> bytes:
    try:
        key_type.from_public_bytes(point)
    except ValueError as e:
        msg = f"Invalid native public key: {e}"
        raise MalformedPacketError(msg) from e
    return point
