import pytest

from gpg_import.models.keys import DsaKey, EccCurve, EcdsaKey, PublicKeyAlgorithm


def test_public_key_algorithm_rejects_unknown_ids() -> None:
    with pytest.raises(ValueError):
        PublicKeyAlgorithm(99)


def test_ecc_curve_uses_agent_names() -> None:
    assert EccCurve.CURVE25519 == "cv25519"
    assert EccCurve("nistp256") is EccCurve.NIST_P256


def test_ecc_curve_is_weierstrass() -> None:
    assert EccCurve.SECP256K1.is_weierstrass is True
    assert EccCurve.ED25519.is_weierstrass is False
    assert EccCurve.CURVE25519.is_weierstrass is False


def test_key_parameters_default_their_algorithm() -> None:
    assert DsaKey(p=1, q=2, g=3, y=4).algorithm_id is PublicKeyAlgorithm.DSA
    ecdsa = EcdsaKey(curve=EccCurve.NIST_P256, point=b"\x04")
    assert ecdsa.algorithm_id is PublicKeyAlgorithm.ECDSA


def test_key_parameters_are_frozen() -> None:
    key = DsaKey(p=1, q=2, g=3, y=4)

    with pytest.raises(AttributeError):
        key.p = 5
