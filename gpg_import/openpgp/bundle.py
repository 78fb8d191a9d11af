"""
Assembly of decoded packets into a KeyBundle.

A transferable key is a primary key followed by groups: direct-key
signatures, then user ids and subkeys each trailed by their signatures. The
builder walks the packets once, attaching every signature to the group that
is open when it appears, and then resolves which signatures govern.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta
from enum import Enum, auto

import structlog

from gpg_import.exceptions import (
    MalformedPacketError,
    MissingBindingSignatureError,
    MissingIdentityError,
)
from gpg_import.models.bundle import (
    BundleSubkey,
    KeyBundle,
    Subkey,
    UserIdentity,
    latest_signature,
)
from gpg_import.models.packets import (
    KeyPacket,
    Packet,
    PacketTag,
    Signature,
    SignatureType,
    UserAttributePacket,
    UserIdPacket,
)
from gpg_import.openpgp.fingerprint import compute_fingerprint, key_id_from_fingerprint
from gpg_import.openpgp.keygrip import compute_keygrip

logger = structlog.get_logger(__name__)


class BuilderState(Enum):
    """Position of the builder within the packet sequence."""

    EXPECT_PRIMARY = auto()
    EXPECT_MEMBER = auto()
    DONE = auto()


class KeyBundleBuilder:
    """
    Single forward pass over decoded packets producing a KeyBundle.

    A builder instance is reset at the start of every ``build`` call.

    Example:
        >>> bundle = KeyBundleBuilder().build(decode_packets(iter_packets(data)))
    """

    def __init__(self) -> None:
        self._reset()

    @property
    def state(self) -> BuilderState:
        return self._state

    def build(self, packets: Iterable[Packet]) -> KeyBundle:
        """
        Group packets and resolve the bundle.

        Raises:
            MalformedPacketError: If the stream does not start with a primary
                key, or holds more than one.
            UnsupportedKeyVersionError: If a key cannot be fingerprinted.
            MissingIdentityError: If the stream is empty or has no user id.
            MissingBindingSignatureError: If a subkey has no binding signature.
        """
        self._reset()
        for packet in packets:
            self._accept(packet)

        bundle = self._resolve()
        self._state = BuilderState.DONE
        logger.debug(
            "Resolved key bundle",
            fingerprint=bundle.fingerprint,
            subkeys=len(bundle.subkeys),
            identity=bundle.primary_identity.text,
        )
        return bundle

    # =========================================================================
    # Grouping
    # =========================================================================

    def _reset(self) -> None:
        self._state = BuilderState.EXPECT_PRIMARY
        self._primary: KeyPacket | None = None
        self._fingerprint = ""
        self._key_id = ""
        self._direct_signatures: list[Signature] = []
        self._identities: list[tuple[str, list[Signature]]] = []
        self._subkeys: list[tuple[KeyPacket, list[Signature]]] = []
        self._open_group: list[Signature] = self._direct_signatures

    def _accept(self, packet: Packet) -> None:
        if self._state is BuilderState.EXPECT_PRIMARY:
            self._accept_primary(packet)
            return

        match packet:
            case KeyPacket(is_subkey=False):
                msg = "Key data holds more than one primary key"
                raise MalformedPacketError(msg, tag=_key_tag(packet))
            case KeyPacket():
                signatures: list[Signature] = []
                self._subkeys.append((packet, signatures))
                self._open_group = signatures
            case UserIdPacket(text=text):
                signatures = []
                self._identities.append((text, signatures))
                self._open_group = signatures
            case UserAttributePacket():
                # Signatures over photo ids are dropped
                self._open_group = []
            case Signature():
                self._open_group.append(packet)

    def _accept_primary(self, packet: Packet) -> None:
        if not isinstance(packet, KeyPacket) or packet.is_subkey:
            msg = f"Key data must start with a primary key, got {type(packet).__name__}"
            raise MalformedPacketError(msg)

        self._primary = packet
        self._fingerprint = compute_fingerprint(packet)
        self._key_id = key_id_from_fingerprint(self._fingerprint)
        self._state = BuilderState.EXPECT_MEMBER

    # =========================================================================
    # Resolution
    # =========================================================================

    def _resolve(self) -> KeyBundle:
        if self._primary is None:
            msg = "No key found in key data"
            raise MissingIdentityError(msg)

        identities = tuple(
            UserIdentity(
                text=text,
                self_signatures=self._self_signatures(signatures, _is_certification),
            )
            for text, signatures in self._identities
        )
        if not identities:
            msg = f"Key {self._fingerprint} has no user identity"
            raise MissingIdentityError(msg, fingerprint=self._fingerprint)

        primary_identity = _pick_primary_identity(identities)
        governing = primary_identity.governing_signature
        if governing is None or governing.key_expiration_seconds is None:
            direct = self._self_signatures(
                self._direct_signatures,
                lambda signature: signature.signature_type == SignatureType.DIRECT_KEY,
            )
            governing = latest_signature(direct) or governing

        return KeyBundle(
            primary_key=self._primary,
            fingerprint=self._fingerprint,
            key_id=self._key_id,
            keygrip=compute_keygrip(self._primary.algorithm),
            created_on=self._primary.created_at,
            expires_on=_expiry(self._primary.created_at, governing),
            primary_identity=primary_identity,
            identities=identities,
            subkeys=tuple(
                self._resolve_subkey(packet, signatures) for packet, signatures in self._subkeys
            ),
        )

    def _resolve_subkey(self, packet: KeyPacket, signatures: list[Signature]) -> BundleSubkey:
        fingerprint = compute_fingerprint(packet)
        bindings = self._self_signatures(
            signatures,
            lambda signature: signature.signature_type == SignatureType.SUBKEY_BINDING,
        )
        binding = latest_signature(bindings)
        if binding is None:
            msg = f"Subkey {fingerprint} has no binding signature"
            raise MissingBindingSignatureError(msg, fingerprint=fingerprint)

        return BundleSubkey(
            subkey=Subkey(packet=packet, binding_signature=binding),
            fingerprint=fingerprint,
            key_id=key_id_from_fingerprint(fingerprint),
            keygrip=compute_keygrip(packet.algorithm),
            created_on=packet.created_at,
            expires_on=_expiry(packet.created_at, binding),
        )

    def _self_signatures(self, signatures, accepts) -> tuple[Signature, ...]:
        return tuple(
            signature
            for signature in signatures
            if accepts(signature) and self._is_self_issued(signature)
        )

    def _is_self_issued(self, signature: Signature) -> bool:
        issuer = signature.issuer
        return issuer is None or issuer.upper() == self._key_id


def build_key_bundle(packets: Iterable[Packet]) -> KeyBundle:
    """Build a KeyBundle from decoded packets with a fresh builder."""
    return KeyBundleBuilder().build(packets)


def _is_certification(signature: Signature) -> bool:
    return (
        SignatureType.GENERIC_CERTIFICATION
        <= signature.signature_type
        <= SignatureType.POSITIVE_CERTIFICATION
    )


def _pick_primary_identity(identities: tuple[UserIdentity, ...]) -> UserIdentity:
    chosen = None
    chosen_signature = None
    for identity in identities:
        signature = identity.governing_signature
        if signature is None or not signature.is_primary_user_id:
            continue
        if chosen_signature is None or signature.creation_time > chosen_signature.creation_time:
            chosen = identity
            chosen_signature = signature
    return chosen or identities[0]


def _expiry(created_at: datetime, signature: Signature | None) -> datetime | None:
    if signature is None:
        return None
    seconds = signature.key_expiration_seconds
    # Zero means the key never expires
    if not seconds:
        return None
    return created_at + timedelta(seconds=seconds)


def _key_tag(packet: KeyPacket) -> PacketTag:
    return PacketTag.SECRET_KEY if packet.is_secret else PacketTag.PUBLIC_KEY
