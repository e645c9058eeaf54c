# mpboost/utils/errors.py
from __future__ import annotations


class MPBoostError(RuntimeError):
    """
    Root of every error raised by mpboost.

    The CLI prints these as a single line, without traceback.
    """


class UserInputError(MPBoostError):
    """
    Raised for invalid user-provided options (paths, parallelism, batch size).
    Should NOT print traceback.
    """


class MalformedRecordError(MPBoostError, ValueError):
    """
    An input line violates the label / `index:value` grammar.

    Fatal for the whole job: a bad record means the dataset does not match
    the model, and skipping it would corrupt the contingency table.
    """

    def __init__(self, message: str, *, doc_id: int | None = None, line: str | None = None):
        super().__init__(message)
        self.doc_id = doc_id
        self.line = line

    def __str__(self) -> str:
        base = super().__str__()
        if self.doc_id is None:
            return base
        return f"{base} (doc_id={self.doc_id})"


class ModelLoadError(MPBoostError):
    """The model artifact is missing, unreadable or of an unknown format."""

    def __init__(self, message: str, *, path=None):
        super().__init__(message)
        self.path = path


class ModelDimensionMismatchError(MPBoostError):
    """
    A record (or the job configuration) refers to a feature / label outside
    the space the model was trained on.
    """

    def __init__(self, message: str, *, doc_id: int | None = None):
        super().__init__(message)
        self.doc_id = doc_id


class OutputWriteError(MPBoostError):
    """Writing results failed. Not retried here; scoring is idempotent."""

    def __init__(self, message: str, *, path=None):
        super().__init__(message)
        self.path = path
