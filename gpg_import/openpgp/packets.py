"""
OpenPGP packet framing.

Splits dearmored data into raw packets. Both old-format and new-format
headers are understood; partial and indeterminate lengths are rejected.
"""

from collections.abc import Iterator

from gpg_import.exceptions import (
    InvalidPacketHeaderError,
    PacketTruncatedError,
    UnsupportedPacketLengthError,
)
from gpg_import.models.packets import RawPacket


def iter_packets(data: bytes) -> Iterator[RawPacket]:
    """
    Lazily iterate over the packets in ``data``.

    Args:
        data: Dearmored OpenPGP data.

    Yields:
        Each packet in order. Iteration ends cleanly at the end of the buffer.

    Raises:
        PacketTruncatedError: If a header or body runs past the end of the buffer.
        UnsupportedPacketLengthError: On partial or indeterminate lengths.
        InvalidPacketHeaderError: If a header byte lacks its top bit.
    """
    offset = 0
    while offset < len(data):
        tag, body_offset, body_length = _parse_packet_header(data, offset)
        end = body_offset + body_length
        if end > len(data):
            msg = f"Packet body needs {body_length} bytes, have {len(data) - body_offset}"
            raise PacketTruncatedError(msg, offset=offset)
        yield RawPacket(tag=tag, body=data[body_offset:end])
        offset = end


def _parse_packet_header(data: bytes, offset: int) -> tuple[int, int, int]:
    first_byte = data[offset]

    if _is_new_format_packet(first_byte):
        tag = first_byte & 0x3F
        length, length_bytes = _parse_new_format_length(data, offset + 1)
        return tag, offset + 1 + length_bytes, length

    if _is_old_format_packet(first_byte):
        tag = (first_byte & 0x3C) >> 2
        length_type = first_byte & 0x03
        length, length_bytes = _parse_old_format_length(data, offset + 1, length_type)
        return tag, offset + 1 + length_bytes, length

    msg = f"Invalid packet header: 0x{first_byte:02x}"
    raise InvalidPacketHeaderError(msg, offset=offset)


def _is_new_format_packet(first_byte: int) -> bool:
    return (first_byte & 0xC0) == 0xC0


def _is_old_format_packet(first_byte: int) -> bool:
    return (first_byte & 0x80) == 0x80


def _parse_new_format_length(data: bytes, offset: int) -> tuple[int, int]:
    if offset >= len(data):
        msg = "Missing length byte"
        raise PacketTruncatedError(msg, offset=offset)

    first_byte = data[offset]

    if first_byte < 192:
        return first_byte, 1

    if first_byte < 224:
        _require(data, offset, 2, "Incomplete two-byte length")
        length = ((first_byte - 192) << 8) + data[offset + 1] + 192
        return length, 2

    if first_byte == 255:
        _require(data, offset, 5, "Incomplete five-byte length")
        length = int.from_bytes(data[offset + 1 : offset + 5], "big")
        return length, 5

    msg = "Partial body length not supported"
    raise UnsupportedPacketLengthError(msg, offset=offset)


def _parse_old_format_length(data: bytes, offset: int, length_type: int) -> tuple[int, int]:
    if length_type == 3:
        msg = "Indeterminate length not supported"
        raise UnsupportedPacketLengthError(msg, offset=offset)

    length_bytes = (1, 2, 4)[length_type]
    _require(data, offset, length_bytes, f"Incomplete {length_bytes}-byte length")
    return int.from_bytes(data[offset : offset + length_bytes], "big"), length_bytes


def _require(data: bytes, offset: int, count: int, msg: str) -> None:
    if len(data) - offset < count:
        raise PacketTruncatedError(msg, offset=offset)
