"""
Typed decoding of raw OpenPGP packets.

Only the packets a transferable key is made of are decoded. Everything else
(trust, marker, ...) is skipped, since keyring exports routinely carry them.
"""

from collections.abc import Iterable, Iterator
from datetime import datetime, timezone

import structlog

from gpg_import.exceptions import MalformedPacketError
from gpg_import.models.packets import (
    KeyPacket,
    Packet,
    PacketTag,
    RawPacket,
    Signature,
    SubpacketType,
    UserAttributePacket,
    UserIdPacket,
)
from gpg_import.openpgp.key_material import decode_key_material

logger = structlog.get_logger(__name__)

_SUBKEY_TAGS = (PacketTag.SECRET_SUBKEY, PacketTag.PUBLIC_SUBKEY)
_SECRET_TAGS = (PacketTag.SECRET_KEY, PacketTag.SECRET_SUBKEY)


def decode_packet(raw: RawPacket) -> Packet | None:
    """
    Decode one raw packet.

    Returns:
        The typed packet, or None for a tag that plays no part in a key.

    Raises:
        MalformedPacketError: If a recognized packet's body cannot be decoded.
        UnsupportedAlgorithmError: If a key uses an unsupported algorithm.
    """
    match raw.tag:
        case (
            PacketTag.SECRET_KEY
            | PacketTag.PUBLIC_KEY
            | PacketTag.SECRET_SUBKEY
            | PacketTag.PUBLIC_SUBKEY
        ):
            return _decode_key(raw)
        case PacketTag.USER_ID:
            return UserIdPacket(text=raw.body.decode("utf-8", errors="replace"))
        case PacketTag.USER_ATTRIBUTE:
            return UserAttributePacket()
        case PacketTag.SIGNATURE:
            return _decode_signature(raw.body)
        case _:
            logger.debug("Skipping packet", tag=raw.tag, length=len(raw.body))
            return None


def decode_packets(raws: Iterable[RawPacket]) -> Iterator[Packet]:
    """Decode a packet stream, dropping packets that decode to None."""
    for raw in raws:
        packet = decode_packet(raw)
        if packet is not None:
            yield packet


def _decode_key(raw: RawPacket) -> KeyPacket:
    body = raw.body
    if not body:
        msg = "Empty key packet"
        raise MalformedPacketError(msg, tag=raw.tag)

    version = body[0]
    match version:
        case 2 | 3:
            _require(body, 8, raw.tag, "Key packet header truncated")
            algorithm_id = body[7]
            material_offset = 8
            algorithm, consumed = decode_key_material(algorithm_id, body[material_offset:])
        case 4:
            _require(body, 6, raw.tag, "Key packet header truncated")
            algorithm_id = body[5]
            material_offset = 6
            algorithm, consumed = decode_key_material(algorithm_id, body[material_offset:])
        case 5 | 6:
            _require(body, 10, raw.tag, "Key packet header truncated")
            algorithm_id = body[5]
            material_length = int.from_bytes(body[6:10], "big")
            material_offset = 10
            material = body[material_offset : material_offset + material_length]
            if len(material) != material_length:
                msg = f"Key material needs {material_length} bytes, have {len(material)}"
                raise MalformedPacketError(msg, tag=raw.tag)
            algorithm, _ = decode_key_material(algorithm_id, material)
            consumed = material_length
        case _:
            msg = f"Unknown key packet version: {version}"
            raise MalformedPacketError(msg, tag=raw.tag)

    packet = KeyPacket(
        version=version,
        created_at=_parse_timestamp(body[1:5]),
        algorithm=algorithm,
        public_body=body[: material_offset + consumed],
        is_subkey=raw.tag in _SUBKEY_TAGS,
        is_secret=raw.tag in _SECRET_TAGS,
    )
    logger.debug(
        "Decoded key packet",
        version=version,
        algorithm=algorithm.algorithm_id.name,
        is_subkey=packet.is_subkey,
    )
    return packet


def _decode_signature(body: bytes) -> Signature:
    if not body:
        msg = "Empty signature packet"
        raise MalformedPacketError(msg, tag=PacketTag.SIGNATURE)

    version = body[0]
    match version:
        case 3:
            return _decode_v3_signature(body)
        case 4 | 5:
            return _decode_v4_signature(body)
        case _:
            msg = f"Unknown signature version: {version}"
            raise MalformedPacketError(msg, tag=PacketTag.SIGNATURE)


def _decode_v3_signature(body: bytes) -> Signature:
    # version, hashed length (always 5), type, created, issuer, algorithms
    _require(body, 19, PacketTag.SIGNATURE, "Signature header truncated")
    if body[1] != 5:
        msg = f"Invalid v3 hashed length: {body[1]}"
        raise MalformedPacketError(msg, tag=PacketTag.SIGNATURE)

    return Signature(
        version=3,
        signature_type=body[2],
        creation_time=_parse_timestamp(body[3:7]),
        issuer_key_id=body[7:15].hex().upper(),
        public_key_algorithm=body[15],
        hash_algorithm=body[16],
    )


def _decode_v4_signature(body: bytes) -> Signature:
    _require(body, 6, PacketTag.SIGNATURE, "Signature header truncated")
    version = body[0]
    signature_type = body[1]
    public_key_algorithm = body[2]
    hash_algorithm = body[3]

    hashed, offset = _read_subpacket_area(body, 4)
    unhashed, _ = _read_subpacket_area(body, offset)

    raw_created = hashed.get(SubpacketType.SIGNATURE_CREATION_TIME)
    if raw_created is None or len(raw_created) != 4:
        msg = "Signature has no creation time"
        raise MalformedPacketError(msg, tag=PacketTag.SIGNATURE)

    return Signature(
        version=version,
        signature_type=signature_type,
        public_key_algorithm=public_key_algorithm,
        hash_algorithm=hash_algorithm,
        creation_time=_parse_timestamp(raw_created),
        hashed_subpackets=hashed,
        unhashed_subpackets=unhashed,
    )


def _read_subpacket_area(body: bytes, offset: int) -> tuple[dict[int, bytes], int]:
    _require(body, offset + 2, PacketTag.SIGNATURE, "Subpacket area length truncated")
    length = int.from_bytes(body[offset : offset + 2], "big")
    start = offset + 2
    _require(body, start + length, PacketTag.SIGNATURE, "Subpacket area truncated")
    return _parse_subpackets(body[start : start + length]), start + length


def _parse_subpackets(data: bytes) -> dict[int, bytes]:
    subpackets: dict[int, bytes] = {}
    offset = 0
    while offset < len(data):
        length, length_bytes = _parse_subpacket_length(data, offset)
        offset += length_bytes
        if length == 0 or offset + length > len(data):
            msg = "Subpacket overruns its area"
            raise MalformedPacketError(msg, tag=PacketTag.SIGNATURE)
        # Top bit of the type is the critical flag
        subpacket_type = data[offset] & 0x7F
        subpackets[subpacket_type] = data[offset + 1 : offset + length]
        offset += length
    return subpackets


def _parse_subpacket_length(data: bytes, offset: int) -> tuple[int, int]:
    first_byte = data[offset]
    if first_byte < 192:
        return first_byte, 1
    if first_byte < 255:
        _require(data, offset + 2, PacketTag.SIGNATURE, "Subpacket length truncated")
        return ((first_byte - 192) << 8) + data[offset + 1] + 192, 2
    _require(data, offset + 5, PacketTag.SIGNATURE, "Subpacket length truncated")
    return int.from_bytes(data[offset + 1 : offset + 5], "big"), 5


def _parse_timestamp(raw: bytes) -> datetime:
    """Parse Unix timestamp to UTC datetime."""
    return datetime.fromtimestamp(int.from_bytes(raw, "big"), tz=timezone.utc)


def _require(data: bytes, end: int, tag: int, msg: str) -> None:
    if len(data) < end:
        raise MalformedPacketError(msg, tag=tag)
