import os

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from gpg_import.exceptions import MalformedPacketError, UnsupportedAlgorithmError
from gpg_import.models.keys import (
    DsaKey,
    EccCurve,
    EcdhKey,
    EcdsaKey,
    EddsaKey,
    ElgamalKey,
    PublicKeyAlgorithm,
    RsaKey,
)
from gpg_import.openpgp.key_material import decode_key_material, parse_mpi
from gpg_import.tests.builders import (
    ALGO_DSA,
    ALGO_ECDH,
    ALGO_ECDSA,
    ALGO_ED25519,
    ALGO_EDDSA,
    ALGO_RSA,
    ALGO_X25519,
    BRAINPOOL_P256_OID,
    CURVE25519_OID,
    ED25519_OID,
    P256_OID,
    P384_OID,
    SECP256K1_OID,
    compressed,
    cv25519_material,
    ec_material,
    ec_public_key,
    ecdh_material,
    ed25519_point,
    eddsa_material,
    mpi,
    rsa_material,
    uncompressed,
    x25519_point,
)


def test_parse_mpi_reads_bit_count_and_value() -> None:
    assert parse_mpi(b"\x00\x09\x01\xff\xaa") == (b"\x01\xff", 4)


def test_parse_mpi_reads_zero() -> None:
    assert parse_mpi(b"\x00\x00") == (b"", 2)


def test_parse_mpi_raises_on_too_short() -> None:
    with pytest.raises(MalformedPacketError, match="too short"):
        parse_mpi(b"\x00")


def test_parse_mpi_raises_on_incomplete_data() -> None:
    with pytest.raises(MalformedPacketError, match="incomplete"):
        parse_mpi(b"\x00\x10\x01")


def test_decode_key_material_reads_rsa(rsa_public_numbers: rsa.RSAPublicNumbers) -> None:
    material = rsa_material(rsa_public_numbers.n, rsa_public_numbers.e)

    key, consumed = decode_key_material(ALGO_RSA, material + b"secret")

    assert key == RsaKey(
        algorithm_id=PublicKeyAlgorithm.RSA_ENCRYPT_OR_SIGN,
        n=rsa_public_numbers.n,
        e=rsa_public_numbers.e,
    )
    assert consumed == len(material)


def test_decode_key_material_reads_dsa() -> None:
    material = mpi(23) + mpi(11) + mpi(4) + mpi(9)

    key, consumed = decode_key_material(ALGO_DSA, material)

    assert key == DsaKey(p=23, q=11, g=4, y=9)
    assert consumed == len(material)


@pytest.mark.parametrize("algorithm_id", [16, 20])
def test_decode_key_material_reads_elgamal(algorithm_id: int) -> None:
    key, _ = decode_key_material(algorithm_id, mpi(23) + mpi(5) + mpi(8))

    assert key == ElgamalKey(algorithm_id=PublicKeyAlgorithm(algorithm_id), p=23, g=5, y=8)


def test_decode_key_material_raises_on_truncated_rsa() -> None:
    with pytest.raises(MalformedPacketError):
        decode_key_material(ALGO_RSA, mpi(2**2047 + 1)[:100])


@pytest.mark.parametrize(
    ("oid", "curve", "cryptography_curve"),
    [
        (P256_OID, EccCurve.NIST_P256, ec.SECP256R1()),
        (P384_OID, EccCurve.NIST_P384, ec.SECP384R1()),
        (SECP256K1_OID, EccCurve.SECP256K1, ec.SECP256K1()),
    ],
)
def test_decode_key_material_reads_ecdsa(
    oid: bytes, curve: EccCurve, cryptography_curve: ec.EllipticCurve
) -> None:
    point = uncompressed(ec_public_key(cryptography_curve))
    material = ec_material(oid, point)

    key, consumed = decode_key_material(ALGO_ECDSA, material)

    assert key == EcdsaKey(curve=curve, point=point)
    assert consumed == len(material)


def test_decode_key_material_normalizes_compressed_ecdsa_point() -> None:
    public_key = ec_public_key(ec.SECP256R1())

    key, _ = decode_key_material(ALGO_ECDSA, ec_material(P256_OID, compressed(public_key)))

    assert key.point == uncompressed(public_key)


def test_decode_key_material_raises_on_point_off_curve() -> None:
    point = b"\x04" + b"\x01" * 64

    with pytest.raises(MalformedPacketError, match="Invalid nistp256 point"):
        decode_key_material(ALGO_ECDSA, ec_material(P256_OID, point))


def test_decode_key_material_raises_on_ecdsa_over_edwards_curve() -> None:
    with pytest.raises(UnsupportedAlgorithmError, match="ECDSA"):
        decode_key_material(ALGO_ECDSA, ec_material(ED25519_OID, b"\x40" + ed25519_point()))


def test_decode_key_material_raises_on_unsupported_curve() -> None:
    with pytest.raises(UnsupportedAlgorithmError) as exc_info:
        decode_key_material(ALGO_ECDSA, ec_material(BRAINPOOL_P256_OID, b"\x04" + b"\x01" * 64))

    assert exc_info.value.algorithm == BRAINPOOL_P256_OID.hex()


def test_decode_key_material_strips_legacy_eddsa_prefix() -> None:
    point = ed25519_point()
    material = eddsa_material(point)

    key, consumed = decode_key_material(ALGO_EDDSA, material)

    assert key == EddsaKey(
        algorithm_id=PublicKeyAlgorithm.EDDSA, curve=EccCurve.ED25519, point=point
    )
    assert consumed == len(material)


def test_decode_key_material_raises_on_unprefixed_eddsa_point() -> None:
    point = b"\x11" + os.urandom(31)

    with pytest.raises(UnsupportedAlgorithmError, match="native point encoding"):
        decode_key_material(ALGO_EDDSA, ec_material(ED25519_OID, point))


def test_decode_key_material_raises_on_eddsa_over_weierstrass_curve() -> None:
    point = uncompressed(ec_public_key(ec.SECP256R1()))

    with pytest.raises(UnsupportedAlgorithmError, match="EdDSA"):
        decode_key_material(ALGO_EDDSA, ec_material(P256_OID, point))


def test_decode_key_material_reads_cv25519_ecdh() -> None:
    point = x25519_point()
    material = cv25519_material(point)

    key, consumed = decode_key_material(ALGO_ECDH, material)

    assert key == EcdhKey(
        algorithm_id=PublicKeyAlgorithm.ECDH,
        curve=EccCurve.CURVE25519,
        point=point,
        kdf_hash=8,
        kdf_cipher=9,
    )
    assert consumed == len(material)


def test_decode_key_material_reads_weierstrass_ecdh() -> None:
    public_key = ec_public_key(ec.SECP384R1())
    material = ecdh_material(P384_OID, compressed(public_key), kdf_hash=9, kdf_cipher=8)

    key, consumed = decode_key_material(ALGO_ECDH, material)

    assert key.curve == EccCurve.NIST_P384
    assert key.point == uncompressed(public_key)
    assert (key.kdf_hash, key.kdf_cipher) == (9, 8)
    assert consumed == len(material)


def test_decode_key_material_raises_on_missing_kdf_parameters() -> None:
    material = ec_material(CURVE25519_OID, b"\x40" + x25519_point())

    with pytest.raises(MalformedPacketError, match="KDF"):
        decode_key_material(ALGO_ECDH, material)


def test_decode_key_material_raises_on_unknown_kdf_version() -> None:
    material = ec_material(CURVE25519_OID, b"\x40" + x25519_point()) + bytes([3, 2, 8, 9])

    with pytest.raises(MalformedPacketError, match="KDF parameter version"):
        decode_key_material(ALGO_ECDH, material)


def test_decode_key_material_raises_on_ecdh_over_ed25519() -> None:
    with pytest.raises(UnsupportedAlgorithmError, match="ECDH"):
        decode_key_material(ALGO_ECDH, ecdh_material(ED25519_OID, b"\x40" + ed25519_point()))


def test_decode_key_material_reads_native_x25519() -> None:
    point = x25519_point()

    key, consumed = decode_key_material(ALGO_X25519, point + b"trailing")

    assert key == EcdhKey(
        algorithm_id=PublicKeyAlgorithm.X25519, curve=EccCurve.CURVE25519, point=point
    )
    assert consumed == 32


def test_decode_key_material_reads_native_ed25519() -> None:
    point = ed25519_point()

    key, consumed = decode_key_material(ALGO_ED25519, point)

    assert key == EddsaKey(
        algorithm_id=PublicKeyAlgorithm.ED25519, curve=EccCurve.ED25519, point=point
    )
    assert consumed == 32


def test_decode_key_material_raises_on_truncated_native_point() -> None:
    with pytest.raises(MalformedPacketError, match="truncated"):
        decode_key_material(ALGO_ED25519, ed25519_point()[:31])


def test_decode_key_material_raises_on_unknown_algorithm() -> None:
    with pytest.raises(UnsupportedAlgorithmError) as exc_info:
        decode_key_material(99, b"\x00\x01\x01")

    assert exc_info.value.algorithm == 99


@pytest.mark.parametrize(
    ("material", "message"),
    [
        (b"", "Missing curve OID"),
        (b"\x00" + P256_OID, "Reserved curve OID length"),
        (b"\xff" + P256_OID, "Reserved curve OID length"),
        (bytes([8]) + P256_OID[:4], "Curve OID truncated"),
    ],
)
def test_decode_key_material_raises_on_bad_curve_oid(
    material: bytes, message: str
) -> None:
    with pytest.raises(MalformedPacketError, match=message):
        decode_key_material(ALGO_ECDSA, material)
