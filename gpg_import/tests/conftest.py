from collections.abc import Callable

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from gpg_import.tests.builders import (
    ALGO_ECDH,
    ALGO_EDDSA,
    TransferableKeyBuilder,
    cv25519_material,
    ed25519_point,
    eddsa_material,
    v4_key_body,
    x25519_point,
)


@pytest.fixture(scope="session")
def rsa_public_numbers() -> rsa.RSAPublicNumbers:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return private_key.public_key().public_numbers()


@pytest.fixture
def eddsa_primary_body() -> bytes:
    return v4_key_body(ALGO_EDDSA, eddsa_material(ed25519_point()))


@pytest.fixture
def cv25519_subkey_body() -> bytes:
    return v4_key_body(ALGO_ECDH, cv25519_material(x25519_point()))


@pytest.fixture
def make_key(
    eddsa_primary_body: bytes, cv25519_subkey_body: bytes
) -> Callable[..., TransferableKeyBuilder]:
    """Typical CI signing key: EdDSA primary, one identity, one cv25519 subkey."""

    def _make(
        user_id: str = "Batman <batman@dc.com>",
        key_expiration: int | None = None,
        with_subkey: bool = True,
        secret: bool = True,
    ) -> TransferableKeyBuilder:
        builder = TransferableKeyBuilder(eddsa_primary_body, secret=secret)
        builder.user_id(user_id, key_expiration=key_expiration, primary_user_id=True)
        if with_subkey:
            builder.subkey(cv25519_subkey_body, key_expiration=key_expiration)
        return builder

    return _make
