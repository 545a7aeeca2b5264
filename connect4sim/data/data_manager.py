"""
data_manager.py - Storage and retrieval of match corpora

This module serializes corpora in three formats: pretty-printed JSON ("full"),
whitespace-free JSON ("condensed") and a one-byte-per-move binary encoding
("compact"). Files are written atomically under a file lock so concurrent
writers never leave a half-written corpus behind.
"""

import os
import json
import shutil
import struct
import filelock
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from connect4sim.debug import debug
from connect4sim.game.simulator import Match, MoveRecord
from connect4sim.utils import COLS, MAX_TURNS, Player

# Defaults
DEFAULT_OUTPUT = 'matches.json'
COMPACT_EXTENSIONS = ('.bin', '.c4m')

# Compact binary layout
COMPACT_MAGIC = b'C4M1'
_HEADER = struct.Struct('>4sI')     # magic, match count
_MATCH_HEADER = struct.Struct('>IB')  # match id, move count
_COLUMN_MASK = 0b0000_0111
_PLAYER_BIT = 0b0000_1000
_WIN_BIT = 0b0001_0000
MAX_MATCH_ID = 0xFFFFFFFF


class CorpusFormatError(ValueError):
    """Raised when a stored corpus cannot be decoded."""


class OutputFormat(Enum):
    FULL = 'full'
    CONDENSED = 'condensed'
    COMPACT = 'compact'

    @classmethod
    def for_path(cls, path: str) -> 'OutputFormat':
        """Guess the format of an existing file from its extension."""
        if path.lower().endswith(COMPACT_EXTENSIONS):
            return cls.COMPACT
        return cls.FULL


# JSON conversion
def move_to_dict(move: MoveRecord, strip_positions: bool = False) -> Dict[str, Any]:
    data = {
        "usr_move": move.column,
        "has_immediate_win": move.has_immediate_win,
        "player": move.player.tag,
    }
    if not strip_positions:
        data["immediate_win_positions"] = [list(pos) for pos in move.immediate_win_positions]
    return data


def move_from_dict(data: Dict[str, Any]) -> MoveRecord:
    try:
        column = int(data["usr_move"])
        player = Player.from_tag(data["player"])
        positions = tuple((int(r), int(c)) for r, c in data.get("immediate_win_positions", []))
        has_win = data["has_immediate_win"]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise CorpusFormatError(f"Malformed move record {data!r}: {e}") from e

    if not isinstance(has_win, bool):
        raise CorpusFormatError(f"has_immediate_win must be a boolean, got {has_win!r}")
    if not (0 <= column < COLS):
        raise CorpusFormatError(f"Move column {column} out of range")
    return MoveRecord(column, player, has_win, positions)


def match_to_dict(match: Match, strip_positions: bool = False) -> Dict[str, Any]:
    return {
        "id": match.match_id,
        "moves": [move_to_dict(m, strip_positions) for m in match.moves],
    }


def match_from_dict(data: Dict[str, Any]) -> Match:
    try:
        match_id = int(data["id"])
        moves = data["moves"]
    except (KeyError, TypeError, ValueError) as e:
        raise CorpusFormatError(f"Malformed match entry: {e}") from e

    if not (1 <= match_id <= MAX_MATCH_ID):
        raise CorpusFormatError(f"Match id {match_id} out of range [1, {MAX_MATCH_ID}]")
    if not isinstance(moves, list) or not all(isinstance(m, dict) for m in moves):
        raise CorpusFormatError(f"Match {match_id} moves must be a list of objects")
    if len(moves) > MAX_TURNS:
        raise CorpusFormatError(f"Match {match_id} has {len(moves)} moves, more than {MAX_TURNS}")
    return Match(match_id, tuple(move_from_dict(m) for m in moves))


# Compact binary conversion
def encode_compact(matches: Iterable[Match]) -> bytes:
    """
    Encode matches one byte per move. Winning-position lists are not stored.

    Returns:
        The encoded corpus
    """
    matches = list(matches)
    chunks = [_HEADER.pack(COMPACT_MAGIC, len(matches))]
    for match in matches:
        chunks.append(_MATCH_HEADER.pack(match.match_id, len(match.moves)))
        body = bytearray()
        for move in match.moves:
            byte = move.column & _COLUMN_MASK
            if move.player == Player.RED:
                byte |= _PLAYER_BIT
            if move.has_immediate_win:
                byte |= _WIN_BIT
            body.append(byte)
        chunks.append(bytes(body))
    return b''.join(chunks)


def decode_compact(payload: bytes) -> List[Match]:
    """Decode bytes produced by ``encode_compact``."""
    if len(payload) < _HEADER.size:
        raise CorpusFormatError("Compact corpus is truncated")

    magic, count = _HEADER.unpack_from(payload, 0)
    if magic != COMPACT_MAGIC:
        raise CorpusFormatError(f"Bad compact corpus magic {magic!r}")

    offset = _HEADER.size
    matches = []
    for _ in range(count):
        if offset + _MATCH_HEADER.size > len(payload):
            raise CorpusFormatError("Compact corpus is truncated")
        match_id, n_moves = _MATCH_HEADER.unpack_from(payload, offset)
        offset += _MATCH_HEADER.size

        if match_id < 1:
            raise CorpusFormatError(f"Match id {match_id} out of range")

        if n_moves > MAX_TURNS or offset + n_moves > len(payload):
            raise CorpusFormatError(f"Match {match_id} has an invalid move count {n_moves}")

        moves = []
        for byte in payload[offset:offset + n_moves]:
            column = byte & _COLUMN_MASK
            if column >= COLS:
                raise CorpusFormatError(f"Match {match_id} has invalid column {column}")
            player = Player.RED if byte & _PLAYER_BIT else Player.YELLOW
            moves.append(MoveRecord(column, player, bool(byte & _WIN_BIT)))
        offset += n_moves
        matches.append(Match(match_id, tuple(moves)))

    if offset != len(payload):
        raise CorpusFormatError(f"{len(payload) - offset} trailing bytes after compact corpus")
    return matches


# File utility functions
def safe_write_bytes(file_path: str, payload: bytes) -> bool:
    """
    Write a file atomically under a file lock.

    Args:
        file_path: Destination path
        payload: Bytes to write

    Returns:
        True if successful, False otherwise
    """
    lock_path = f"{file_path}.lock"
    with filelock.FileLock(lock_path):
        temp_file = f"{file_path}.tmp"
        try:
            with open(temp_file, 'wb') as f:
                f.write(payload)

            # Replace the original file
            shutil.move(temp_file, file_path)
            return True
        except OSError as e:
            debug.error(f"Error writing to {file_path}: {e}", "data")
            if os.path.exists(temp_file):
                os.remove(temp_file)
            return False


def safe_read_bytes(file_path: str) -> bytes:
    """
    Read a corpus file under its lock.

    Raises:
        CorpusFormatError: if the file is missing or cannot be read
    """
    if not os.path.exists(file_path):
        raise CorpusFormatError(f"Corpus file {file_path} does not exist")

    lock_path = f"{file_path}.lock"
    with filelock.FileLock(lock_path):
        try:
            with open(file_path, 'rb') as f:
                return f.read()
        except OSError as e:
            raise CorpusFormatError(f"Cannot read {file_path}: {e}") from e


def serialize_corpus(matches: Iterable[Match], fmt: OutputFormat = OutputFormat.FULL,
                     strip_positions: bool = False) -> bytes:
    """Encode a corpus in the requested format."""
    if fmt == OutputFormat.COMPACT:
        return encode_compact(matches)

    data = [match_to_dict(m, strip_positions) for m in matches]
    if fmt == OutputFormat.CONDENSED:
        text = json.dumps(data, separators=(',', ':'))
    else:
        text = json.dumps(data, indent=2)
    return text.encode('utf-8')


def deserialize_corpus(payload: bytes, fmt: OutputFormat) -> List[Match]:
    """Decode a corpus; both JSON variants share one reader."""
    if fmt == OutputFormat.COMPACT:
        return decode_compact(payload)

    try:
        data = json.loads(payload.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorpusFormatError(f"Corpus is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CorpusFormatError("Corpus JSON must be a list of matches")
    return [match_from_dict(entry) for entry in data]


def save_corpus(file_path: str, matches: Iterable[Match],
                fmt: OutputFormat = OutputFormat.FULL,
                strip_positions: bool = False) -> bool:
    """
    Serialize and store a corpus.

    Args:
        file_path: Destination path
        matches: Matches to store
        fmt: Output format
        strip_positions: Drop winning-position lists, keeping the flag

    Returns:
        True if successful, False otherwise
    """
    matches = list(matches)
    payload = serialize_corpus(matches, fmt, strip_positions)

    if safe_write_bytes(file_path, payload):
        debug.info(f"Saved {len(matches)} matches to {file_path} ({fmt.value}, {len(payload)} bytes)", "data")
        return True
    return False


def load_corpus(file_path: str, fmt: Optional[OutputFormat] = None) -> List[Match]:
    """
    Load a stored corpus.

    Args:
        file_path: Path to a corpus file
        fmt: Format of the file (guessed from the extension if omitted)

    Returns:
        The stored matches, in file order
    """
    fmt = fmt or OutputFormat.for_path(file_path)
    matches = deserialize_corpus(safe_read_bytes(file_path), fmt)
    debug.info(f"Loaded {len(matches)} matches from {file_path}", "data")
    return matches
