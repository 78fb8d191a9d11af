from datetime import datetime, timedelta, timezone

import pytest

from gpg_import.models.bundle import BundleSubkey, KeyBundle, UserIdentity, latest_signature
from gpg_import.models.packets import Signature, SubpacketType

CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _signature(created: datetime = CREATED, **hashed: bytes) -> Signature:
    return Signature(
        version=4,
        signature_type=0x13,
        public_key_algorithm=22,
        hash_algorithm=8,
        creation_time=created,
        hashed_subpackets={SubpacketType[name]: value for name, value in hashed.items()},
    )


def _bundle(expires_on: datetime | None) -> KeyBundle:
    return KeyBundle(
        primary_key=None,
        fingerprint="A" * 40,
        key_id="A" * 16,
        keygrip="B" * 40,
        created_on=CREATED,
        expires_on=expires_on,
        primary_identity=UserIdentity(text="Batman <batman@dc.com>"),
    )


@pytest.mark.parametrize(
    ("text", "name", "email", "comment"),
    [
        ("Batman <batman@dc.com>", "Batman", "batman@dc.com", ""),
        (
            "Bruce Wayne (CI signing) <bruce@wayne.com>",
            "Bruce Wayne",
            "bruce@wayne.com",
            "CI signing",
        ),
        ("batman@dc.com", "", "batman@dc.com", ""),
        ("<batman@dc.com>", "", "batman@dc.com", ""),
        ("Just A Name", "Just A Name", "", ""),
    ],
)
def test_user_identity_splits_user_id(text: str, name: str, email: str, comment: str) -> None:
    identity = UserIdentity(text=text)

    assert (identity.name, identity.email, identity.comment) == (name, email, comment)


def test_latest_signature_returns_none_for_no_signatures() -> None:
    assert latest_signature(()) is None


def test_latest_signature_picks_latest_creation_time() -> None:
    older = _signature(CREATED)
    newer = _signature(CREATED + timedelta(seconds=1))

    assert latest_signature((newer, older)) is newer


def test_latest_signature_keeps_first_on_tie() -> None:
    first = _signature(KEY_EXPIRATION_TIME=b"\x00\x00\x00\x01")
    second = _signature(KEY_EXPIRATION_TIME=b"\x00\x00\x00\x02")

    assert latest_signature((first, second)) is first


def test_user_identity_governing_signature_is_latest() -> None:
    newer = _signature(CREATED + timedelta(days=1))
    identity = UserIdentity(text="Batman", self_signatures=(_signature(), newer))

    assert identity.governing_signature is newer


def test_signature_reads_key_expiration_from_hashed_area_only() -> None:
    signature = Signature(
        version=4,
        signature_type=0x13,
        public_key_algorithm=22,
        hash_algorithm=8,
        creation_time=CREATED,
        unhashed_subpackets={SubpacketType.KEY_EXPIRATION_TIME: b"\x00\x00\x00\x10"},
    )

    assert signature.key_expiration_seconds is None


def test_signature_issuer_falls_back_to_issuer_fingerprint() -> None:
    fingerprint = bytes.fromhex("C959BDBAFA32A2F89A153B678CFDE12197965A9A")
    signature = _signature(ISSUER_FINGERPRINT=b"\x04" + fingerprint)

    assert signature.issuer_fingerprint == fingerprint.hex().upper()
    assert signature.issuer == "8CFDE12197965A9A"


def test_signature_is_primary_user_id() -> None:
    assert _signature(PRIMARY_USER_ID=b"\x01").is_primary_user_id is True
    assert _signature(PRIMARY_USER_ID=b"\x00").is_primary_user_id is False
    assert _signature().is_primary_user_id is False


def test_key_bundle_is_expired_at_or_after_expiry() -> None:
    bundle = _bundle(CREATED + timedelta(days=1))

    assert bundle.is_expired(CREATED) is False
    assert bundle.is_expired(CREATED + timedelta(days=1)) is True


def test_key_bundle_without_expiry_never_expires() -> None:
    assert _bundle(None).is_expired(datetime.max.replace(tzinfo=timezone.utc)) is False


def test_key_bundle_exposes_primary_identity() -> None:
    bundle = _bundle(None)

    assert (bundle.user_name, bundle.user_email) == ("Batman", "batman@dc.com")


def test_bundle_subkey_is_expired() -> None:
    subkey = BundleSubkey(
        subkey=None,
        fingerprint="C" * 40,
        key_id="C" * 16,
        keygrip="D" * 40,
        created_on=CREATED,
        expires_on=CREATED,
    )

    assert subkey.is_expired(CREATED) is True
