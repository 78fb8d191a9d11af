"""
ASCII armor decoding and encoding.

Armored keys are often stored in CI secrets wrapped in one more layer of
base64, since many CI systems mangle multi-line values. Both forms are
accepted when decoding.
"""

import base64
import binascii
import re
from dataclasses import dataclass, field

import structlog

from gpg_import.exceptions import ArmorTruncatedError, ChecksumMismatchError, NotArmoredError

logger = structlog.get_logger(__name__)

_CRC24_INIT = 0xB704CE
_CRC24_POLY = 0x1864CFB
_LINE_LENGTH = 64
_HEADER_PREFIX = "-----BEGIN PGP "
_BEGIN_LINE = re.compile(r"^-----BEGIN (?P<block_type>PGP [^-]+)-----$")
_END_PREFIX = "-----END "

PRIVATE_KEY_BLOCK = "PGP PRIVATE KEY BLOCK"


def _crc24_table_entry(index: int) -> int:
    crc = index << 16
    for _ in range(8):
        crc <<= 1
        if crc & 0x1000000:
            crc ^= _CRC24_POLY
    return crc & 0xFFFFFF


_CRC24_TABLE = tuple(_crc24_table_entry(i) for i in range(256))


def crc24(data: bytes) -> int:
    """Compute the 24-bit armor checksum of ``data``."""
    crc = _CRC24_INIT
    for byte in data:
        crc = ((crc << 8) & 0xFFFFFF) ^ _CRC24_TABLE[((crc >> 16) ^ byte) & 0xFF]
    return crc


@dataclass(frozen=True, kw_only=True)
class ArmoredBlock:
    """
    A decoded armor block.

    Attributes:
        block_type: Type named in the header line, e.g. ``PGP PRIVATE KEY BLOCK``.
        headers: Armor headers such as ``Comment`` or ``Version``.
        data: The dearmored binary data.
    """

    block_type: str
    headers: dict[str, str] = field(default_factory=dict)
    data: bytes


def decode_armor(data: bytes | str) -> bytes:
    """
    Strip ASCII armor, and an optional outer base64 layer, from a key block.

    Args:
        data: Armored block, or base64 of an armored block.

    Returns:
        The dearmored binary data.

    Raises:
        NotArmoredError: If no armor header is found.
        ChecksumMismatchError: If the body does not match its checksum.
        ArmorTruncatedError: If the body or framing ends prematurely.
    """
    return dearmor(data).data


def dearmor(data: bytes | str) -> ArmoredBlock:
    """
    Decode an armor block, keeping its type and headers.

    See decode_armor for the accepted input and raised errors.
    """
    text = _as_text(data)
    if not _has_armor_header(text):
        text = _unwrap_base64(text)
        if not _has_armor_header(text):
            raise NotArmoredError()
        logger.debug("Unwrapped base64 transport layer")
    return _parse_armor(text)


def encode_armor(
    data: bytes,
    block_type: str = PRIVATE_KEY_BLOCK,
    headers: dict[str, str] | None = None,
) -> str:
    """
    Armor binary data with 64-character lines and a CRC-24 checksum line.

    Args:
        data: Binary OpenPGP data.
        block_type: Type to name in the header and footer lines.
        headers: Optional armor headers.

    Returns:
        The armored text, terminated by a newline.
    """
    lines = [f"-----BEGIN {block_type}-----"]
    lines.extend(f"{key}: {value}" for key, value in (headers or {}).items())
    lines.append("")

    body = base64.b64encode(data).decode("ascii")
    lines.extend(body[i : i + _LINE_LENGTH] for i in range(0, len(body), _LINE_LENGTH))

    checksum = base64.b64encode(crc24(data).to_bytes(3, "big")).decode("ascii")
    lines.append(f"={checksum}")
    lines.append(f"-----END {block_type}-----")
    return "\n".join(lines) + "\n"


def _as_text(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        raise NotArmoredError("Input is not text") from None


def _has_armor_header(text: str) -> bool:
    return text.lstrip().startswith(_HEADER_PREFIX)


def _unwrap_base64(text: str) -> str:
    compact = "".join(text.split())
    if not compact:
        raise NotArmoredError("Input is empty")
    try:
        decoded = base64.b64decode(compact, validate=True)
        return decoded.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise NotArmoredError() from None


def _parse_armor(text: str) -> ArmoredBlock:
    lines = [line.strip() for line in text.strip().splitlines()]

    match = _BEGIN_LINE.match(lines[0])
    if match is None:
        msg = f"Invalid armor header line: {lines[0]!r}"
        raise NotArmoredError(msg)
    block_type = match.group("block_type")

    index = 1
    headers: dict[str, str] = {}
    # Base64 has no colon, so any line with one is an armor header
    while index < len(lines) and ":" in lines[index]:
        key, _, value = lines[index].partition(":")
        headers[key.strip()] = value.strip()
        index += 1

    body_lines, checksum, has_footer = _collect_body(lines[index:], block_type)
    body = "".join(body_lines)
    if not has_footer:
        msg = "Armor body ends mid-group" if len(body) % 4 else "Missing armor footer"
        raise ArmorTruncatedError(msg)
    if len(body) % 4:
        # A complete block whose body does not split into groups was altered
        msg = "Armor body is corrupt"
        raise ChecksumMismatchError(msg)

    try:
        data = base64.b64decode(body, validate=True)
    except binascii.Error:
        msg = "Armor body is corrupt"
        raise ChecksumMismatchError(msg) from None
    # Decoding ignores the spare bits of a padded group; re-encoding does not
    if base64.b64encode(data).decode("ascii") != body:
        msg = "Armor body is not canonical base64"
        raise ChecksumMismatchError(msg)

    if checksum is not None:
        _verify_checksum(data, checksum)
    return ArmoredBlock(block_type=block_type, headers=headers, data=data)


def _collect_body(
    lines: list[str], block_type: str
) -> tuple[list[str], str | None, bool]:
    body_lines: list[str] = []
    checksum = None
    for line in lines:
        if line.startswith(_END_PREFIX):
            if line != f"-----END {block_type}-----":
                msg = f"Armor footer does not match header: {line!r}"
                raise ArmorTruncatedError(msg)
            return body_lines, checksum, True
        if not line:
            continue
        if checksum is not None:
            msg = "Armor checksum is not the last line of the body"
            raise ChecksumMismatchError(msg)
        if line.startswith("="):
            checksum = line[1:]
            continue
        body_lines.append(line)

    return body_lines, checksum, False


def _verify_checksum(data: bytes, checksum: str) -> None:
    try:
        raw = base64.b64decode(checksum, validate=True)
    except binascii.Error:
        raw = b""
    if len(raw) != 3:
        msg = f"Invalid armor checksum: {checksum!r}"
        raise ChecksumMismatchError(msg)

    expected = int.from_bytes(raw, "big")
    actual = crc24(data)
    if expected != actual:
        msg = "Armor checksum mismatch"
        raise ChecksumMismatchError(msg, expected=expected, actual=actual)
