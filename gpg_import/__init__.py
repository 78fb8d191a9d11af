"""
gpg_import: parse an OpenPGP signing key for import in CI.

Reads an armored secret key (optionally base64 encoded once more, as CI
secrets usually are), resolves its fingerprint, key id, keygrips, identity
and expiry, and plans the keyring and git configuration to apply.

Example:
    ```python
    import os

    from gpg_import import ImportConfig, prepare_import

    plan = prepare_import(os.environ["GPG_PRIVATE_KEY"], ImportConfig(trust_level=5))

    for keygrip in plan.passphrase_keygrips:
        print(keygrip)

    if plan.git is not None:
        for key, value in plan.git.as_git_config().items():
            print(f"{key} = {value}")
    ```
"""

from gpg_import.config import ImportConfig
from gpg_import.exceptions import (
    AmbiguousSelectionError,
    ArmorError,
    ArmorTruncatedError,
    ChecksumMismatchError,
    DecodeError,
    GpgImportError,
    InvalidPacketHeaderError,
    KeyExpiredError,
    KeyNotFoundError,
    MalformedPacketError,
    MissingBindingSignatureError,
    MissingIdentityError,
    NotArmoredError,
    PacketError,
    PacketTruncatedError,
    SelectionError,
    StructureError,
    UnsupportedAlgorithmError,
    UnsupportedKeyVersionError,
    UnsupportedPacketLengthError,
)
from gpg_import.importer import ensure_not_expired, prepare_import, read_key_bundle
from gpg_import.models import GitScope, ImportPlan, KeyBundle, SelectedKey, SigningConfig
from gpg_import.openpgp import select_key

__version__ = "0.1.0"

__all__ = [
    # Import
    "read_key_bundle",
    "ensure_not_expired",
    "prepare_import",
    "select_key",
    "ImportConfig",
    # Models
    "KeyBundle",
    "SelectedKey",
    "ImportPlan",
    "SigningConfig",
    "GitScope",
    # Exceptions
    "GpgImportError",
    "ArmorError",
    "NotArmoredError",
    "ChecksumMismatchError",
    "ArmorTruncatedError",
    "PacketError",
    "PacketTruncatedError",
    "UnsupportedPacketLengthError",
    "InvalidPacketHeaderError",
    "DecodeError",
    "MalformedPacketError",
    "UnsupportedAlgorithmError",
    "UnsupportedKeyVersionError",
    "StructureError",
    "MissingIdentityError",
    "MissingBindingSignatureError",
    "KeyExpiredError",
    "SelectionError",
    "KeyNotFoundError",
    "AmbiguousSelectionError",
]
