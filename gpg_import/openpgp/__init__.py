"""
OpenPGP key parsing for gpg_import.

This module provides:
- ASCII armor decoding (with an optional outer base64 layer) and encoding
- Packet framing and typed packet decoding
- Fingerprint, key id and keygrip derivation
- Key bundle assembly and signing key selection
"""

from gpg_import.openpgp.armor import ArmoredBlock, crc24, dearmor, decode_armor, encode_armor
from gpg_import.openpgp.bundle import BuilderState, KeyBundleBuilder, build_key_bundle
from gpg_import.openpgp.decoder import decode_packet, decode_packets
from gpg_import.openpgp.fingerprint import compute_fingerprint, key_id_from_fingerprint
from gpg_import.openpgp.key_material import decode_key_material, parse_mpi
from gpg_import.openpgp.keygrip import compute_keygrip
from gpg_import.openpgp.packets import iter_packets
from gpg_import.openpgp.selector import select_key

__all__ = [
    "ArmoredBlock",
    "crc24",
    "dearmor",
    "decode_armor",
    "encode_armor",
    "iter_packets",
    "decode_packet",
    "decode_packets",
    "parse_mpi",
    "decode_key_material",
    "compute_fingerprint",
    "key_id_from_fingerprint",
    "compute_keygrip",
    "BuilderState",
    "KeyBundleBuilder",
    "build_key_bundle",
    "select_key",
]
