"""
Replay codes: short strings that rebuild an identical maze.

A code packs the seed, dimensions and difficulty into an 11 byte record,
appends a CRC-32 of the record and base32-encodes the 15 bytes into exactly
24 characters from ``A-Z2-7``. CRC-32 detects every burst of up to 32 flipped
bits, so any single mistyped character is always rejected.
"""

import base64
import binascii
import struct
import zlib

from ascii_maze.errors import CorruptReplayCode, InvalidReplayParameters
from ascii_maze.generator import Difficulty, GenerationParams

_RECORD = struct.Struct(">QBBB")  # seed, width, height, difficulty tag
_CHECKSUM = struct.Struct(">I")
_ALPHABET = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ234567")

CODE_LENGTH = (_RECORD.size + _CHECKSUM.size) * 8 // 5

DIFFICULTY_TAGS = {
    Difficulty.NORMAL: 0,
    Difficulty.HARD: 1,
}
_TAG_DIFFICULTIES = {tag: difficulty for difficulty, tag in DIFFICULTY_TAGS.items()}


def encode(params: GenerationParams) -> str:
    """Turn generation parameters into a shareable replay code."""
    params.validate()
    record = _RECORD.pack(
        params.seed, params.width, params.height, DIFFICULTY_TAGS[params.difficulty]
    )
    payload = record + _CHECKSUM.pack(zlib.crc32(record))
    return base64.b32encode(payload).decode("ascii")


def decode(code: str) -> GenerationParams:
    """
    Recover generation parameters from a replay code.

    Raises CorruptReplayCode if the text is malformed or fails its checksum,
    and InvalidReplayParameters if the checksum matches but the values are
    outside the supported ranges.
    """
    text = code.strip()
    if len(text) != CODE_LENGTH:
        raise CorruptReplayCode(
            f"replay code must be {CODE_LENGTH} characters long, got {len(text)}"
        )
    bad = sorted(set(text) - _ALPHABET)
    if bad:
        raise CorruptReplayCode(f"replay code contains invalid characters: {''.join(bad)!r}")

    try:
        payload = base64.b32decode(text)
    except binascii.Error as exc:
        raise CorruptReplayCode(f"replay code could not be decoded: {exc}") from exc

    record, checksum = payload[: _RECORD.size], payload[_RECORD.size :]
    if _CHECKSUM.unpack(checksum)[0] != zlib.crc32(record):
        raise CorruptReplayCode("replay code checksum does not match (typo?)")

    seed, width, height, tag = _RECORD.unpack(record)
    if tag not in _TAG_DIFFICULTIES:
        raise InvalidReplayParameters(f"replay code has unknown difficulty tag {tag}")

    params = GenerationParams(seed, width, height, _TAG_DIFFICULTIES[tag])
    return params.validate(error=InvalidReplayParameters)
