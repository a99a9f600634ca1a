"""
Output pipeline for MySQL Stream Dumper.
"""

import gzip
import io
import logging
import os
import re
from pathlib import Path
from typing import Any, Iterator, Optional, TextIO

from .errors import ConfigurationError, DumperError, TransportError
from .models import DumpConfig, DumpResult, DumpStats
from .sequencer import DumpSequencer

NEW_LINE_PATTERN = re.compile(r'\r?\n')


class DumpStream:
    """
    Iterable of dump text, pulled fragment by fragment from a DumpSequencer.

    Nothing is queried until iteration starts. Every fragment gets native line
    endings and the configured modifiers, is written to all sinks, then yielded.
    """

    def __init__(self, sequencer: DumpSequencer, config: DumpConfig):
        self.sequencer = sequencer
        self.config = config
        self.stats = DumpStats()
        self.destination_path: Optional[Path] = None
        self._sinks: list[Any] = []
        self._started = False

    def pipe(self, sink: Any) -> "DumpStream":
        """Tee the output into a writable object. The sink is not closed by the stream."""
        if not hasattr(sink, 'write'):
            raise ConfigurationError(f"Sink {sink!r} has no write() method")
        if self._started:
            raise DumperError("Sinks must be added before the stream is consumed")
        self._sinks.append(sink)
        return self

    def __iter__(self) -> Iterator[str]:
        if self._started:
            raise DumperError("A dump stream can only be consumed once")
        self._started = True
        return self._chunks()

    def read(self) -> DumpResult:
        """Consume the whole stream; the text is kept only when return_output is set."""
        if not self.config.return_output:
            for _ in self:
                pass
            return DumpResult(stats=self.stats)

        chunks = list(self)
        return DumpResult(stats=self.stats, output=''.join(chunks))

    def transform(self, text: str) -> str:
        """Unify line endings, then apply the modifiers in order."""
        text = NEW_LINE_PATTERN.sub(os.linesep, text)
        for modifier in self.config.modifiers:
            text = modifier(text)
        return text

    def _chunks(self) -> Iterator[str]:
        fragments = self.sequencer.fragments()
        owned_sink = None
        try:
            sinks = list(self._sinks)
            if self.config.has_destination_path:
                owned_sink = self._open_destination(Path(self.config.destination))
                sinks.append(owned_sink)
            elif self.config.destination is not None:
                sinks.append(self.config.destination)

            for fragment in fragments:
                text = self.transform(fragment.text)
                self.stats.record(fragment)
                for sink in sinks:
                    self._write(sink, text)
                yield text

            logging.info(
                f"Dump complete: {self.stats.total_objects} objects, "
                f"{self.stats.total_rows} rows"
            )
            if self.destination_path:
                logging.info(f"The database is dumped: {self.destination_path}")
        finally:
            fragments.close()
            if owned_sink is not None:
                owned_sink.close()

    def _open_destination(self, output_path: Path) -> TextIO:
        """Open (truncate) the destination file with optional compression."""
        if self.config.compress:
            output_path = Path(str(output_path) + '.gz')

        try:
            if self.config.compress:
                file_handle = gzip.open(output_path, 'wt', encoding='utf-8', newline='')
            else:
                file_handle = open(output_path, 'w', encoding='utf-8', newline='')
        except OSError as e:
            raise TransportError(f"Cannot open destination '{output_path}': {e}") from e

        self.destination_path = output_path
        return file_handle

    def _write(self, sink: Any, text: str) -> None:
        mode = getattr(sink, 'mode', '')
        binary = isinstance(sink, (io.RawIOBase, io.BufferedIOBase)) or \
            (isinstance(mode, str) and 'b' in mode)
        try:
            sink.write(text.encode('utf-8') if binary else text)
        except OSError as e:
            raise TransportError(f"Cannot write dump output: {e}") from e
