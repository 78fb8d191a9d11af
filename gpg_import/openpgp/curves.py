"""
Named curves supported for EC keys.

The set is closed: a curve OID that is not listed here is rejected rather than
guessed at. Domain parameters are the ones the keyring agent hashes into a
keygrip, written the way its curve table writes them.
"""

from dataclasses import dataclass

from cryptography.hazmat.primitives.asymmetric import ec

from gpg_import.exceptions import UnsupportedAlgorithmError
from gpg_import.models.keys import EccCurve


@dataclass(frozen=True, kw_only=True)
class CurveDomain:
    """
    Curve domain parameters.

    Attributes:
        p: Field prime.
        a: Curve coefficient a (magnitude; the agent's table negates it for Ed25519).
        b: Curve coefficient b (magnitude, as for a).
        n: Order of the base point.
        gx: Base point x coordinate.
        gy: Base point y coordinate.
        size: Width in bytes of one base point coordinate.
    """

    p: int
    a: int
    b: int
    n: int
    gx: int
    gy: int
    size: int

    @property
    def base_point(self) -> bytes:
        """Base point as uncompressed octets (0x04 || x || y)."""
        return b"\x04" + self.gx.to_bytes(self.size, "big") + self.gy.to_bytes(self.size, "big")


_CURVE_OIDS: dict[bytes, EccCurve] = {
    bytes.fromhex("2A8648CE3D030107"): EccCurve.NIST_P256,
    bytes.fromhex("2B81040022"): EccCurve.NIST_P384,
    bytes.fromhex("2B81040023"): EccCurve.NIST_P521,
    bytes.fromhex("2B8104000A"): EccCurve.SECP256K1,
    bytes.fromhex("2B06010401DA470F01"): EccCurve.ED25519,
    bytes.fromhex("2B060104019755010501"): EccCurve.CURVE25519,
}

_CURVE25519_P = 0x7FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFED
_CURVE25519_N = 0x1000000000000000000000000000000014DEF9DEA2F79CD65812631A5CF5D3ED
_P384_P = (1 << 384) - (1 << 128) - (1 << 96) + (1 << 32) - 1
_P521_P = (1 << 521) - 1

_DOMAINS: dict[EccCurve, CurveDomain] = {
    EccCurve.NIST_P256: CurveDomain(
        p=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF,
        a=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFC,
        b=0x5AC635D8AA3A93E7B3EBBD55769886BC651D06B0CC53B0F63BCE3C3E27D2604B,
        n=0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
        gx=0x6B17D1F2E12C4247F8BCE6E563A440F277037D812DEB33A0F4A13945D898C296,
        gy=0x4FE342E2FE1A7F9B8EE7EB4A7C0F9E162BCE33576B315ECECBB6406837BF51F5,
        size=32,
    ),
    EccCurve.NIST_P384: CurveDomain(
        p=_P384_P,
        a=_P384_P - 3,
        b=int(
            "B3312FA7E23EE7E4988E056BE3F82D19181D9C6EFE8141120314088F5013875A"
            "C656398D8A2ED19D2A85C8EDD3EC2AEF",
            16,
        ),
        n=int(
            "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFC7634D81F4372DDF"
            "581A0DB248B0A77AECEC196ACCC52973",
            16,
        ),
        gx=int(
            "AA87CA22BE8B05378EB1C71EF320AD746E1D3B628BA79B9859F741E082542A38"
            "5502F25DBF55296C3A545E3872760AB7",
            16,
        ),
        gy=int(
            "3617DE4A96262C6F5D9E98BF9292DC29F8F41DBD289A147CE9DA3113B5F0B8C0"
            "0A60B1CE1D7E819D7A431D7C90EA0E5F",
            16,
        ),
        size=48,
    ),
    EccCurve.NIST_P521: CurveDomain(
        p=_P521_P,
        a=_P521_P - 3,
        b=int(
            "0051953EB9618E1C9A1F929A21A0B68540EEA2DA725B99B315F3B8B489918EF1"
            "09E156193951EC7E937B1652C0BD3BB1BF073573DF883D2C34F1EF451FD46B50"
            "3F00",
            16,
        ),
        n=int(
            "01FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF"
            "FFFA51868783BF2F966B7FCC0148F709A5D03BB5C9B8899C47AEBB6FB71E9138"
            "6409",
            16,
        ),
        gx=int(
            "00C6858E06B70404E9CD9E3ECB662395B4429C648139053FB521F828AF606B4D"
            "3DBAA14B5E77EFE75928FE1DC127A2FFA8DE3348B3C1856A429BF97E7E31C2E5"
            "BD66",
            16,
        ),
        gy=int(
            "011839296A789A3BC0045C8A5FB42C7D1BD998F54449579B446817AFBD17273E"
            "662C97EE72995EF42640C550B9013FAD0761353C7086A272C24088BE94769FD1"
            "6650",
            16,
        ),
        size=66,
    ),
    EccCurve.SECP256K1: CurveDomain(
        p=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
        a=0,
        b=7,
        n=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
        gx=0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
        gy=0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
        size=32,
    ),
    EccCurve.ED25519: CurveDomain(
        p=_CURVE25519_P,
        a=0x01,
        b=0x2DFC9311D490018C7338BF8688861767FF8FF5B2BEBE27548A14B235ECA6874A,
        n=_CURVE25519_N,
        gx=0x216936D3CD6E53FEC0A4E231FDD6DC5C692CC7609525A7B2C9562D608F25D51A,
        gy=0x6666666666666666666666666666666666666666666666666666666666666658,
        size=32,
    ),
    EccCurve.CURVE25519: CurveDomain(
        p=_CURVE25519_P,
        a=0x01DB41,
        b=0x01,
        n=_CURVE25519_N,
        gx=0x09,
        gy=0x20AE19A1B8A086B4E01EDD2C7748D14C923D4D7E6D7C61B229E9C5A27ECED3D9,
        size=32,
    ),
}

_WEIERSTRASS_CURVES: dict[EccCurve, type[ec.EllipticCurve]] = {
    EccCurve.NIST_P256: ec.SECP256R1,
    EccCurve.NIST_P384: ec.SECP384R1,
    EccCurve.NIST_P521: ec.SECP521R1,
    EccCurve.SECP256K1: ec.SECP256K1,
}


def curve_from_oid(oid: bytes) -> EccCurve:
    """
    Look up a named curve by its OpenPGP OID encoding.

    Raises:
        UnsupportedAlgorithmError: If the curve is not supported.
    """
    try:
        return _CURVE_OIDS[oid]
    except KeyError:
        msg = f"Unsupported curve OID: {oid.hex()}"
        raise UnsupportedAlgorithmError(msg, algorithm=oid.hex()) from None


def curve_domain(curve: EccCurve) -> CurveDomain:
    return _DOMAINS[curve]


def weierstrass_curve(curve: EccCurve) -> ec.EllipticCurve:
    """Return the ``cryptography`` curve object for a Weierstrass curve."""
    return _WEIERSTRASS_CURVES[curve]()
