import pickle

import pytest

from mpboost.utils.errors import (
    MalformedRecordError,
    ModelDimensionMismatchError,
    MPBoostError,
    OutputWriteError,
)


def test_malformed_record_carries_doc_id():
    err = MalformedRecordError("invalid label 'x'", doc_id=7, line="x 1:1")

    assert err.doc_id == 7
    assert err.line == "x 1:1"
    assert str(err) == "invalid label 'x' (doc_id=7)"
    assert isinstance(err, MPBoostError)
    assert isinstance(err, ValueError)


def test_errors_survive_pickling():
    # worker processes send exceptions back pickled
    err = pickle.loads(pickle.dumps(MalformedRecordError("bad", doc_id=3, line="?")))
    assert err.doc_id == 3
    assert str(err) == "bad (doc_id=3)"

    dim = pickle.loads(pickle.dumps(ModelDimensionMismatchError("wide", doc_id=4)))
    assert dim.doc_id == 4


@pytest.mark.parametrize("cls", [ModelDimensionMismatchError, OutputWriteError])
def test_all_errors_share_root(cls):
    assert issubclass(cls, MPBoostError)
