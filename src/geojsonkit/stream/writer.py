# src/geojsonkit/stream/writer.py

"""
This module writes a FeatureCollection to a stream one Feature at a time.

The writer moves through three states: new, started and finished. The collection
prefix is written with the first feature, and the closing suffix by finish().
Used as a context manager, the writer finishes itself when the block exits.
"""

import io
import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import IO, Any, Generator, Iterable, Union

from ..errors import InvalidWriterStateError
from ..feature import Feature
from ..jsonvalue import encode

log = logging.getLogger(__name__)

__all__ = [
    "WriterState",
    "FeatureWriter"
]

_PREFIX = '{"type":"FeatureCollection","features":['
_SUFFIX = "]}"

class WriterState(Enum):
    NEW = "new"
    STARTED = "started"
    FINISHED = "finished"

class FeatureWriter:
    """
    Incremental FeatureCollection writer over a text or binary stream.

    Args:
        stream (IO): Destination. Text streams receive str, anything else bytes.
        codec (RecordCodec): Used by serialize(). Defaults to MsgspecRecordCodec().
        pretty (bool): Indent each feature with two spaces per level.
    """

    def __init__(self, stream: IO, codec: Any = None, pretty: bool = False):
        self._stream = stream
        self._text = isinstance(stream, io.TextIOBase)
        self._codec = codec
        self._pretty = pretty
        self._state = WriterState.NEW
        self._count = 0

    @classmethod
    @contextmanager
    def from_path(
        cls,
        path: Union[str, Path],
        codec: Any = None,
        pretty: bool = False
    ) -> Generator["FeatureWriter", None, None]:
        """Open (and truncate) a file and yield a writer that is finished on exit."""
        with open(Path(path), "wb") as fh:
            with cls(fh, codec=codec, pretty=pretty) as writer:
                yield writer

    @property
    def state(self) -> WriterState:
        return self._state

    @property
    def count(self) -> int:
        """Number of features written so far."""
        return self._count

    def _write(self, text: str) -> None:
        self._stream.write(text if self._text else text.encode("utf-8"))

    def _opening(self) -> str:
        return _PREFIX + ("\n" if self._pretty else "")

    def write_feature(self, feature: Feature) -> None:
        """
        Append one Feature to the collection.

        Each feature goes out in a single write, and the writer's state only
        advances once that write succeeds.

        Raises:
            InvalidWriterStateError: The writer has already finished.
        """
        if self._state is WriterState.FINISHED:
            raise InvalidWriterStateError("Cannot write a feature after the writer has finished")
        if not isinstance(feature, Feature):
            raise TypeError(f"Expected Feature, got {type(feature)}")

        body = encode(feature.to_json_value(), pretty=self._pretty)
        if self._state is WriterState.NEW:
            chunk = self._opening() + body
        else:
            chunk = (",\n" if self._pretty else ",") + body
        self._write(chunk)
        self._state = WriterState.STARTED
        self._count += 1

    def write_features(self, features: Iterable[Feature]) -> None:
        for feature in features:
            self.write_feature(feature)

    def serialize(self, record: Any) -> None:
        """Convert a record to a Feature with the writer's codec and append it."""
        if self._codec is None:
            from ..records import MsgspecRecordCodec
            self._codec = MsgspecRecordCodec()
        self.write_feature(self._codec.encode(record))

    def finish(self) -> None:
        """
        Close the features array and the collection. An empty writer produces
        an empty FeatureCollection.

        Raises:
            InvalidWriterStateError: finish() was already called.
        """
        if self._state is WriterState.FINISHED:
            raise InvalidWriterStateError("FeatureWriter has already finished")
        opening = self._opening() if self._state is WriterState.NEW else ""
        self._write(opening + ("\n" if self._pretty else "") + _SUFFIX)
        self._state = WriterState.FINISHED
        self.flush()
        log.info(f"Finished FeatureCollection with {self._count} features")

    def flush(self) -> None:
        if hasattr(self._stream, "flush"):
            self._stream.flush()

    def __enter__(self) -> "FeatureWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._state is WriterState.FINISHED:
            return False
        if exc_type is None:
            self.finish()
            return False
        try:
            self.finish()
        except Exception as e:
            log.error(f"Failed to finish FeatureCollection while handling {exc_type.__name__}: {e}")
        return False

    def __repr__(self) -> str:
        return f"<FeatureWriter state={self._state.value} features={self._count}>"
