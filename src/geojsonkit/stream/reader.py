# src/geojsonkit/stream/reader.py

"""
This module reads the features of a FeatureCollection document one at a time.

The stream is consumed in fixed-size chunks. A small structural scanner tracks
strings, escapes and bracket nesting to find where each element of the
'features' array begins and ends; only that element's bytes are handed to
msgspec and the Feature parser, so memory stays bounded by the largest single
feature rather than the whole document.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Callable, Generator, Iterator, List, Optional, Tuple, Type, Union

from ..errors import (
    FeatureDecodeError,
    GeoJsonParseError,
    MalformedJsonError,
    MissingMemberError,
    MissingTypeError,
    RecordDecodeError,
    StructuralMismatchError,
)
from ..feature import Feature, _check_type
from ..jsonvalue import decode, json_type_name
from ..parsing import expect_object

log = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ON_ERROR_MODES",
    "ReaderConfig",
    "FeatureReader"
]

DEFAULT_CHUNK_SIZE = 64 * 1024
ON_ERROR_MODES = ("yield", "raise", "skip")

_WHITESPACE = b" \t\n\r"
_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_COMMA = ord(",")
_COLON = ord(":")
_LBRACE = ord("{")
_RBRACE = ord("}")
_LBRACKET = ord("[")
_RBRACKET = ord("]")
_MATCHING = {_RBRACE: _LBRACE, _RBRACKET: _LBRACKET}

@dataclass
class ReaderConfig:
    """
    Parameters for streaming a FeatureCollection.

    Args:
        chunk_size (int): Number of bytes (or characters, for text streams) requested per read.
        on_error (str): What to do with an element that fails to decode. Options: "yield"
            (yield the FeatureDecodeError in its place), "raise", "skip" (log a warning).
        require_type (bool): Reject documents whose top-level object has no 'type' member.
    """
    chunk_size: int = DEFAULT_CHUNK_SIZE
    on_error: str = "yield"
    require_type: bool = False

    def __post_init__(self):
        if self.on_error not in ON_ERROR_MODES:
            raise ValueError(f"on_error must be one of {ON_ERROR_MODES}, got '{self.on_error}'")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

class _ByteScanner:
    """Chunked cursor over a byte or text stream that delimits JSON values without decoding them."""

    def __init__(self, stream: IO, chunk_size: int):
        self._stream = stream
        self._chunk_size = chunk_size
        self._buf = b""
        self._pos = 0
        self._consumed = 0
        self._eof = False

    @property
    def offset(self) -> int:
        return self._consumed + self._pos

    def _fill(self) -> bool:
        if self._eof:
            return False
        chunk = self._stream.read(self._chunk_size)
        if not chunk:
            self._eof = True
            return False
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        self._consumed += self._pos
        self._buf = self._buf[self._pos:] + chunk
        self._pos = 0
        return True

    def peek(self) -> Optional[int]:
        if self._pos >= len(self._buf) and not self._fill():
            return None
        return self._buf[self._pos]

    def advance(self) -> None:
        self._pos += 1

    def skip_whitespace(self) -> Optional[int]:
        while True:
            b = self.peek()
            if b is None or b not in _WHITESPACE:
                return b
            self._pos += 1

    def expect(self, byte: int, what: str) -> None:
        b = self.skip_whitespace()
        if b != byte:
            raise self.malformed(f"Expected {what}")
        self._pos += 1

    def malformed(self, message: str) -> MalformedJsonError:
        if self.peek() is None:
            return MalformedJsonError(f"{message}, but the stream ended at byte {self.offset}")
        return MalformedJsonError(f"{message} at byte {self.offset}")

    def scan_value(self, capture: bool) -> Optional[bytes]:
        """
        Move past one JSON value starting at the cursor.

        Args:
            capture (bool): Return the value's raw bytes. When False the value is
                skipped without being buffered.

        Raises:
            MalformedJsonError: Mismatched brackets or an unterminated value.
        """
        if self.skip_whitespace() is None:
            raise MalformedJsonError(f"Expected a value, but the stream ended at byte {self.offset}")
        out = bytearray() if capture else None
        stack: List[int] = []
        in_string = False
        escaped = False
        scanned = False
        while True:
            if self._pos >= len(self._buf) and not self._fill():
                if scanned and not stack and not in_string:
                    # a scalar terminated by the end of the stream
                    return bytes(out) if capture else None
                raise MalformedJsonError(f"Unexpected end of stream inside a value at byte {self.offset}")
            buf = self._buf
            start = i = self._pos
            n = len(buf)
            done = False
            while i < n:
                b = buf[i]
                if in_string:
                    if escaped:
                        escaped = False
                    elif b == _BACKSLASH:
                        escaped = True
                    elif b == _QUOTE:
                        in_string = False
                        if not stack:
                            i += 1
                            done = True
                            break
                elif b == _QUOTE:
                    in_string = True
                elif b == _LBRACE or b == _LBRACKET:
                    stack.append(b)
                elif b == _RBRACE or b == _RBRACKET:
                    if not stack:
                        # closer of the enclosing container ends a bare scalar
                        done = True
                        break
                    if stack.pop() != _MATCHING[b]:
                        self._pos = i
                        raise MalformedJsonError(f"Mismatched '{chr(b)}' at byte {self.offset}")
                    if not stack:
                        i += 1
                        done = True
                        break
                elif not stack and (b == _COMMA or b in _WHITESPACE):
                    done = True
                    break
                i += 1
            if capture:
                out += buf[start:i]
            scanned = scanned or i > start
            self._pos = i
            if done:
                if not scanned:
                    raise self.malformed("Expected a value")
                return bytes(out) if capture else None

    def read_key(self) -> str:
        if self.skip_whitespace() != _QUOTE:
            raise self.malformed("Expected a member name")
        key = decode(self.scan_value(capture=True))
        self.expect(_COLON, "':' after member name")
        return key

class FeatureReader:
    """
    Lazily yields the Features of a FeatureCollection read from a stream.

    'features' may appear anywhere among the top-level members; everything else
    except 'type' is skipped. A document whose top-level value is an array is read
    as the features array itself. Iteration is single-pass: the underlying stream
    is consumed as features are produced.

    Attributes:
        config (ReaderConfig): Chunking and error policy.
    """

    def __init__(self, stream: IO, config: Optional[ReaderConfig] = None):
        self.config = config or ReaderConfig()
        self._scanner = _ByteScanner(stream, self.config.chunk_size)
        self._started = False

    @classmethod
    @contextmanager
    def from_path(
        cls,
        path: Union[str, Path],
        config: Optional[ReaderConfig] = None
    ) -> Generator["FeatureReader", None, None]:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"GeoJSON file not found: {path}")
        with open(path, "rb") as fh:
            yield cls(fh, config)

    def __iter__(self) -> Iterator[Union[Feature, FeatureDecodeError]]:
        return self.features()

    def features(self) -> Iterator[Union[Feature, FeatureDecodeError]]:
        """
        Yield each Feature in document order.

        Elements that fail to decode are handled per config.on_error. Container-level
        breakage (truncation, mismatched brackets, a missing or non-array 'features')
        is always raised.
        """
        return self._iter_decoded(lambda feature: feature)

    def deserialize(self, record_type: Type, codec: Any = None) -> Iterator[Any]:
        """
        Yield each Feature converted to a caller-defined record type.

        Args:
            record_type (Type): msgspec.Struct, dataclass, attrs class, TypedDict or NamedTuple.
            codec (RecordCodec): Mapping between Features and records. Defaults to MsgspecRecordCodec().
        """
        if codec is None:
            from ..records import MsgspecRecordCodec
            codec = MsgspecRecordCodec()
        return self._iter_decoded(lambda feature: codec.decode(feature, record_type))

    # --- Internals ---

    def _iter_decoded(self, convert: Callable[[Feature], Any]) -> Iterator[Any]:
        if self._started:
            raise RuntimeError("FeatureReader streams are single-pass and have already been consumed")
        self._started = True

        decoded = 0
        total = 0
        for index, raw in self._iter_elements():
            total += 1
            try:
                item = convert(Feature._from_object(expect_object(decode(raw), "features")))
            except (GeoJsonParseError, RecordDecodeError) as e:
                if self.config.on_error == "raise":
                    raise FeatureDecodeError(index, e) from e
                if self.config.on_error == "skip":
                    log.warning(f"Skipping feature {index}: {e}")
                    continue
                error = FeatureDecodeError(index, e)
                error.__cause__ = e
                yield error
                continue
            decoded += 1
            yield item

        log.info(f"Feature stream exhausted after {total} elements ({decoded} decoded)")

    def _iter_elements(self) -> Iterator[Tuple[int, bytes]]:
        scanner = self._scanner
        b = scanner.skip_whitespace()
        if b is None:
            raise MalformedJsonError("Empty stream: expected a FeatureCollection")

        if b == _LBRACKET:
            log.debug("Top-level array read as the features array")
            yield from self._iter_array()
            self._expect_end()
            return

        if b != _LBRACE:
            value = decode(scanner.scan_value(capture=True))
            raise StructuralMismatchError("GeoJSON", "object", json_type_name(value))

        scanner.advance()
        found_features = False
        seen_type = False
        if scanner.skip_whitespace() == _RBRACE:
            scanner.advance()
        else:
            while True:
                key = scanner.read_key()
                if key == "features":
                    if found_features:
                        raise scanner.malformed("Duplicate 'features' member")
                    if scanner.skip_whitespace() != _LBRACKET:
                        value = decode(scanner.scan_value(capture=True))
                        raise StructuralMismatchError("features", "array", json_type_name(value))
                    log.debug(f"Located features array at byte {scanner.offset}")
                    found_features = True
                    yield from self._iter_array()
                elif key == "type":
                    _check_type({"type": decode(scanner.scan_value(capture=True))}, "FeatureCollection")
                    seen_type = True
                else:
                    scanner.scan_value(capture=False)

                b = scanner.skip_whitespace()
                if b == _COMMA:
                    scanner.advance()
                    continue
                if b == _RBRACE:
                    scanner.advance()
                    break
                raise scanner.malformed("Expected ',' or '}' after member value")

        if not found_features:
            raise MissingMemberError("features", "FeatureCollection")
        if self.config.require_type and not seen_type:
            raise MissingTypeError()
        self._expect_end()

    def _iter_array(self) -> Iterator[Tuple[int, bytes]]:
        scanner = self._scanner
        scanner.advance()
        if scanner.skip_whitespace() == _RBRACKET:
            scanner.advance()
            return

        index = 0
        while True:
            b = scanner.skip_whitespace()
            if b is None or b in (_COMMA, _RBRACKET, _RBRACE):
                raise scanner.malformed("Expected a feature")
            yield index, scanner.scan_value(capture=True)
            index += 1

            b = scanner.skip_whitespace()
            if b == _COMMA:
                scanner.advance()
                continue
            if b == _RBRACKET:
                scanner.advance()
                return
            raise scanner.malformed("Expected ',' or ']' after feature")

    def _expect_end(self) -> None:
        if self._scanner.skip_whitespace() is not None:
            raise self._scanner.malformed("Unexpected data after the end of the document")
