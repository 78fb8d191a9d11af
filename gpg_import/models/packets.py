"""
OpenPGP packet models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from gpg_import.models.keys import KeyAlgorithm


class PacketTag(IntEnum):
    """OpenPGP packet tags relevant to transferable keys."""

    SIGNATURE = 2
    SECRET_KEY = 5
    PUBLIC_KEY = 6
    SECRET_SUBKEY = 7
    MARKER = 10
    TRUST = 12
    USER_ID = 13
    PUBLIC_SUBKEY = 14
    USER_ATTRIBUTE = 17


class SignatureType(IntEnum):
    """Signature types found on transferable keys."""

    GENERIC_CERTIFICATION = 0x10
    PERSONA_CERTIFICATION = 0x11
    CASUAL_CERTIFICATION = 0x12
    POSITIVE_CERTIFICATION = 0x13
    SUBKEY_BINDING = 0x18
    PRIMARY_KEY_BINDING = 0x19
    DIRECT_KEY = 0x1F
    KEY_REVOCATION = 0x20
    SUBKEY_REVOCATION = 0x28
    CERTIFICATION_REVOCATION = 0x30


class SubpacketType(IntEnum):
    """Signature subpacket types consumed by the bundle builder."""

    SIGNATURE_CREATION_TIME = 2
    SIGNATURE_EXPIRATION_TIME = 3
    KEY_EXPIRATION_TIME = 9
    ISSUER = 16
    PRIMARY_USER_ID = 25
    KEY_FLAGS = 27
    ISSUER_FINGERPRINT = 33


@dataclass(frozen=True, kw_only=True)
class RawPacket:
    """A length-delimited packet as framed on the wire."""

    tag: int
    body: bytes


@dataclass(frozen=True, kw_only=True)
class KeyPacket:
    """
    A primary key or subkey packet.

    Attributes:
        version: Key packet version.
        created_at: Key creation time (UTC).
        algorithm: Decoded public key parameters.
        public_body: Public portion of the packet body, exactly as encoded.
        is_subkey: Whether this is a subkey packet.
        is_secret: Whether the packet carried secret key material.
    """

    version: int
    created_at: datetime
    algorithm: KeyAlgorithm
    public_body: bytes
    is_subkey: bool = False
    is_secret: bool = False


@dataclass(frozen=True, kw_only=True)
class UserIdPacket:
    """A user id packet, usually ``Name (comment) <email>``."""

    text: str


@dataclass(frozen=True, kw_only=True)
class UserAttributePacket:
    """A user attribute packet (photo id). Its content is not decoded."""


@dataclass(frozen=True, kw_only=True)
class Signature:
    """
    A signature packet.

    Subpackets are kept as raw bytes keyed by type and decoded only when one
    of the properties below asks for them.
    """

    version: int
    signature_type: int
    public_key_algorithm: int
    hash_algorithm: int
    creation_time: datetime
    hashed_subpackets: dict[int, bytes] = field(default_factory=dict)
    unhashed_subpackets: dict[int, bytes] = field(default_factory=dict)
    issuer_key_id: str | None = None

    @property
    def key_expiration_seconds(self) -> int | None:
        """Key lifetime in seconds from the hashed area, None if absent."""
        raw = self.hashed_subpackets.get(SubpacketType.KEY_EXPIRATION_TIME)
        if raw is None or len(raw) != 4:
            return None
        return int.from_bytes(raw, "big")

    @property
    def is_primary_user_id(self) -> bool:
        raw = self.hashed_subpackets.get(SubpacketType.PRIMARY_USER_ID)
        return bool(raw and raw[0])

    @property
    def issuer_fingerprint(self) -> str | None:
        raw = self._find_subpacket(SubpacketType.ISSUER_FINGERPRINT)
        if raw is None or len(raw) < 2:
            return None
        # First octet is the key version
        return raw[1:].hex().upper()

    @property
    def issuer(self) -> str | None:
        """Issuer key id (16 hex characters), from any source available."""
        if self.issuer_key_id is not None:
            return self.issuer_key_id
        raw = self._find_subpacket(SubpacketType.ISSUER)
        if raw is not None and len(raw) == 8:
            return raw.hex().upper()
        fingerprint = self.issuer_fingerprint
        if fingerprint is not None:
            return fingerprint[-16:]
        return None

    def _find_subpacket(self, subpacket_type: int) -> bytes | None:
        if subpacket_type in self.hashed_subpackets:
            return self.hashed_subpackets[subpacket_type]
        return self.unhashed_subpackets.get(subpacket_type)


Packet = KeyPacket | UserIdPacket | UserAttributePacket | Signature
