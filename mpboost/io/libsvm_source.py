# mpboost/io/libsvm_source.py
from __future__ import annotations

from itertools import islice
from pathlib import Path
from typing import Iterator, List

from mpboost import logs
from mpboost.engines.libsvm_parser_engine import Record
from mpboost.utils.errors import MalformedRecordError, UserInputError
from mpboost.utils.filesystem import FileSystem


class LibSvmSource:
    """
    Lazy reader of a LibSVM text file (plain or .gz).

    - blank lines are skipped and do not consume a doc id
    - doc ids are 0-based positions among the remaining lines
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        if not FileSystem.file_exists(self.path):
            raise UserInputError(f"input file not found: {self.path}")

    def stream(self) -> Iterator[Record]:
        logs.info(
            f"[LibSvmSource] reading {self.path} "
            f"({FileSystem.format_size(FileSystem.get_file_size(self.path))})"
        )
        doc_id = 0
        with FileSystem.open_bytes(self.path) as f:
            for raw in f:
                line = self._decode(raw, doc_id).strip()
                if not line:
                    continue
                yield doc_id, line
                doc_id += 1

    @staticmethod
    def _decode(raw: bytes, doc_id: int) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedRecordError(
                f"invalid UTF-8 at byte {e.start}: {e.reason}",
                doc_id=doc_id,
                line=raw.decode("utf-8", errors="replace").strip(),
            ) from None

    def read_all(self) -> List[Record]:
        return list(self.stream())

    def batches(self, batch_size: int) -> Iterator[List[Record]]:
        """
        Consecutive batches of at most batch_size records; the next batch is
        only read when the caller asks for it.
        """
        if batch_size < 1:
            raise UserInputError(f"batch_size must be >= 1, got {batch_size}")
        it = self.stream()
        while True:
            batch = list(islice(it, batch_size))
            if not batch:
                return
            yield batch
