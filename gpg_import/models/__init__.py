"""
Domain models for gpg_import.

These are immutable (frozen) dataclasses representing packets, key parameters,
resolved key bundles and import plans.
"""

from gpg_import.models.bundle import (
    BundleSubkey,
    KeyBundle,
    SelectedKey,
    Subkey,
    UserIdentity,
)
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
from gpg_import.models.packets import (
    KeyPacket,
    Packet,
    PacketTag,
    RawPacket,
    Signature,
    SignatureType,
    SubpacketType,
    UserAttributePacket,
    UserIdPacket,
)
from gpg_import.models.plan import GitScope, ImportPlan, SigningConfig, TrustAssignment

__all__ = [
    # Keys
    "PublicKeyAlgorithm",
    "EccCurve",
    "KeyAlgorithm",
    "RsaKey",
    "DsaKey",
    "ElgamalKey",
    "EcdsaKey",
    "EddsaKey",
    "EcdhKey",
    # Packets
    "PacketTag",
    "SignatureType",
    "SubpacketType",
    "RawPacket",
    "KeyPacket",
    "UserIdPacket",
    "UserAttributePacket",
    "Signature",
    "Packet",
    # Bundle
    "UserIdentity",
    "Subkey",
    "BundleSubkey",
    "KeyBundle",
    "SelectedKey",
    # Plan
    "GitScope",
    "SigningConfig",
    "TrustAssignment",
    "ImportPlan",
]
