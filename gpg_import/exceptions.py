"""
gpg_import exception hierarchy.

All exceptions inherit from GpgImportError for easy catching. Every error is
terminal for the current import attempt.
"""

from typing import Any


class GpgImportError(Exception):
    """Base exception for all gpg_import errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class ArmorError(GpgImportError):
    """ASCII armor could not be decoded."""


class NotArmoredError(ArmorError):
    """Input is neither an armored block nor base64 of one."""

    def __init__(self, message: str = "No ASCII armor header found") -> None:
        super().__init__(message)


class ChecksumMismatchError(ArmorError):
    """Armor body does not match its CRC-24 checksum."""

    def __init__(
        self, message: str, *, expected: int | None = None, actual: int | None = None
    ) -> None:
        super().__init__(message, expected=expected, actual=actual)
        self.expected = expected
        self.actual = actual


class ArmorTruncatedError(ArmorError):
    """Armor body or framing ends prematurely."""


class PacketError(GpgImportError):
    """Packet framing could not be read."""


class PacketTruncatedError(PacketError):
    """A packet declares more bytes than remain in the buffer."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message, offset=offset)
        self.offset = offset


class UnsupportedPacketLengthError(PacketError):
    """Partial or indeterminate packet lengths are not supported."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message, offset=offset)
        self.offset = offset


class InvalidPacketHeaderError(PacketError):
    """Packet header byte does not have its top bit set."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message, offset=offset)
        self.offset = offset


class DecodeError(GpgImportError):
    """A recognized packet could not be decoded."""


class MalformedPacketError(DecodeError):
    """Packet body does not follow the layout expected for its tag."""

    def __init__(self, message: str, *, tag: int | None = None) -> None:
        super().__init__(message, tag=tag)
        self.tag = tag


class UnsupportedAlgorithmError(DecodeError):
    """Public key algorithm or curve is outside the supported set."""

    def __init__(self, message: str, *, algorithm: int | str | None = None) -> None:
        super().__init__(message, algorithm=algorithm)
        self.algorithm = algorithm


class UnsupportedKeyVersionError(DecodeError):
    """Key packet version cannot be fingerprinted."""

    def __init__(self, message: str, *, version: int | None = None) -> None:
        super().__init__(message, version=version)
        self.version = version


class StructureError(GpgImportError):
    """Decoded packets do not form a usable key."""


class MissingIdentityError(StructureError):
    """Key carries no user identity."""


class MissingBindingSignatureError(StructureError):
    """Subkey is not bound to the primary key by a binding signature."""

    def __init__(self, message: str, *, fingerprint: str | None = None) -> None:
        super().__init__(message, fingerprint=fingerprint)
        self.fingerprint = fingerprint


class KeyExpiredError(StructureError):
    """Primary key or subkey has already expired."""

    def __init__(self, message: str, *, fingerprint: str | None = None) -> None:
        super().__init__(message, fingerprint=fingerprint)
        self.fingerprint = fingerprint


class SelectionError(GpgImportError):
    """Key filter could not be resolved to a single key."""

    def __init__(self, message: str, *, key_filter: str | None = None) -> None:
        super().__init__(message, key_filter=key_filter)
        self.key_filter = key_filter


class KeyNotFoundError(SelectionError):
    """No key in the bundle matches the filter."""


class AmbiguousSelectionError(SelectionError):
    """More than one key in the bundle matches the filter."""

    def __init__(self, message: str, *, key_filter: str, candidates: tuple[str, ...]) -> None:
        super().__init__(message, key_filter=key_filter)
        self.context["candidates"] = candidates
        self.candidates = candidates
