# mpboost/io/result_writer.py
from __future__ import annotations

from pathlib import Path
from typing import Sequence

from mpboost import logs
from mpboost.core.types import ClassificationResult
from mpboost.evaluation.contingency import ContingencyTable
from mpboost.evaluation.report import EffectivenessReporter
from mpboost.utils.errors import OutputWriteError
from mpboost.utils.filesystem import FileSystem


class BatchReportWriter:
    """
    Writes the complete batch-mode report in one atomic write.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def write(self, text: str) -> Path:
        try:
            FileSystem.safe_write_text(self.path, text)
        except OSError as e:
            FileSystem.remove(self.path.with_name(self.path.name + ".tmp"))
            raise OutputWriteError(f"writing classification results to {self.path}: {e}", path=self.path) from e
        logs.info(f"[BatchReportWriter] wrote {self.path}")
        return self.path


class StreamingResultWriter:
    """
    Streaming output, staged in <path>.tmp:

        open()                -> create / truncate the tmp file
        write_batch(results)  -> append one batch of result lines (blocking)
        finish(table)         -> append the effectiveness section, rename tmp -> path
        abort()               -> drop the tmp file; path is left untouched

    The destination only ever holds a complete report.
    """

    def __init__(self, path: Path | str, reporter: EffectivenessReporter):
        self.path = Path(path)
        self.tmp_path = self.path.with_name(self.path.name + ".tmp")
        self.reporter = reporter
        self.written = 0

    def open(self) -> "StreamingResultWriter":
        self._guard(FileSystem.truncate, self.tmp_path)
        self.written = 0
        return self

    def write_batch(self, results: Sequence[ClassificationResult]) -> None:
        self._guard(FileSystem.append_text, self.tmp_path, self.reporter.render_results(results))
        self.written += len(results)
        logs.debug(f"[StreamingResultWriter] flushed {len(results)} (total={self.written})")

    def finish(self, table: ContingencyTable) -> Path:
        self._guard(FileSystem.append_text, self.tmp_path, self.reporter.render_effectiveness(table))
        self._guard(FileSystem.replace, self.tmp_path, self.path)
        logs.info(f"[StreamingResultWriter] wrote {self.written} results to {self.path}")
        return self.path

    def abort(self) -> None:
        FileSystem.remove(self.tmp_path)
        logs.warning(f"[StreamingResultWriter] aborted, {self.path} not written")

    def _guard(self, fn, *args) -> None:
        try:
            fn(*args)
        except OSError as e:
            raise OutputWriteError(f"writing classification results to {self.path}: {e}", path=self.path) from e
