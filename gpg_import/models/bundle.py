"""
Resolved key bundle models.

A KeyBundle is the single logical key assembled from a transferable key's
packets: the primary key, its identities and its subkeys, with fingerprints,
keygrips and expiry already resolved.
"""

import re
from dataclasses import dataclass
from datetime import datetime

from gpg_import.models.packets import KeyPacket, Signature

_USER_ID_PATTERN = re.compile(
    r"^(?P<name>[^<(]*?)\s*(?:\((?P<comment>[^)]*)\)\s*)?(?:<(?P<email>[^>]*)>)?\s*$"
)


def latest_signature(signatures: tuple[Signature, ...]) -> Signature | None:
    """
    Pick the signature with the latest creation time.

    Ties go to the signature that appeared first.
    """
    governing = None
    for signature in signatures:
        if governing is None or signature.creation_time > governing.creation_time:
            governing = signature
    return governing


@dataclass(frozen=True, kw_only=True)
class UserIdentity:
    """
    A user id together with its self-certifications.

    Attributes:
        text: The raw user id string.
        self_signatures: Self-certifications made by the primary key.
    """

    text: str
    self_signatures: tuple[Signature, ...] = ()

    @property
    def governing_signature(self) -> Signature | None:
        return latest_signature(self.self_signatures)

    @property
    def name(self) -> str:
        return self._parts()[0]

    @property
    def email(self) -> str:
        return self._parts()[1]

    @property
    def comment(self) -> str:
        return self._parts()[2]

    def _parts(self) -> tuple[str, str, str]:
        text = self.text.strip()
        if "<" not in text and "@" in text and " " not in text:
            return "", text, ""
        match = _USER_ID_PATTERN.match(text)
        if match is None:
            return text, "", ""
        return (
            match.group("name").strip(),
            (match.group("email") or "").strip(),
            (match.group("comment") or "").strip(),
        )


@dataclass(frozen=True, kw_only=True)
class Subkey:
    """A subkey packet and the binding signature that governs it."""

    packet: KeyPacket
    binding_signature: Signature


@dataclass(frozen=True, kw_only=True)
class BundleSubkey:
    """A subkey with its independently derived identifiers."""

    subkey: Subkey
    fingerprint: str
    key_id: str
    keygrip: str
    created_on: datetime
    expires_on: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_on is not None and self.expires_on <= now


@dataclass(frozen=True, kw_only=True)
class KeyBundle:
    """
    A fully resolved transferable key.

    Attributes:
        primary_key: The primary key packet.
        fingerprint: Primary key fingerprint (40 hex characters).
        key_id: Primary key id (16 hex characters).
        keygrip: Primary key keygrip (40 hex characters).
        created_on: Primary key creation time.
        expires_on: Primary key expiry, None if it never expires.
        primary_identity: The identity that names the key holder.
        identities: Every identity, in packet order.
        subkeys: Every subkey, in packet order.
    """

    primary_key: KeyPacket
    fingerprint: str
    key_id: str
    keygrip: str
    created_on: datetime
    expires_on: datetime | None = None
    primary_identity: UserIdentity
    identities: tuple[UserIdentity, ...] = ()
    subkeys: tuple[BundleSubkey, ...] = ()

    @property
    def user_name(self) -> str:
        return self.primary_identity.name

    @property
    def user_email(self) -> str:
        return self.primary_identity.email

    def is_expired(self, now: datetime) -> bool:
        return self.expires_on is not None and self.expires_on <= now


@dataclass(frozen=True, kw_only=True)
class SelectedKey:
    """The single key picked from a bundle for the orchestrator to act on."""

    fingerprint: str
    key_id: str
    keygrip: str
    created_on: datetime
    expires_on: datetime | None = None
    is_subkey: bool = False
