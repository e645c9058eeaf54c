# mpboost/engines/libsvm_parser_engine.py
from __future__ import annotations

import math
from typing import Dict, List, Set, Tuple

from mpboost.core.types import Document
from mpboost.engines.base import BaseEngine
from mpboost.utils.errors import MalformedRecordError

# (doc_id, raw line)
Record = Tuple[int, str]


class LibSvmParserEngine(BaseEngine[Record, Document]):
    """
    LibSvmParserEngine (FINAL)

    Grammar:
        <label>[,<label>...] [<label> ...] <index>:<value> <index>:<value> ...

    Contract:
    - output ids are always 0-based
    - labels_0_based=False : subtract 1 from labels and feature indices
    - binary_problem=True  : a single numeric label; > 0 -> {0}, else {}
    - any grammar violation -> MalformedRecordError (never skipped)
    """

    def __init__(self, *, labels_0_based: bool = False, binary_problem: bool = False):
        self.labels_0_based = labels_0_based
        self.binary_problem = binary_problem
        self._offset = 0 if labels_0_based else 1

    def process(self, event: Record) -> Document:
        doc_id, line = event
        return self.parse(line, doc_id=doc_id)

    # --------------------------------------------------
    def parse(self, line: str, *, doc_id: int) -> Document:
        tokens = line.split()
        if not tokens:
            raise MalformedRecordError("empty record", doc_id=doc_id, line=line)

        label_tokens: List[str] = []
        pos = 0
        while pos < len(tokens) and ":" not in tokens[pos]:
            label_tokens.append(tokens[pos])
            pos += 1

        if self.binary_problem:
            gold = self._parse_binary_label(label_tokens, doc_id, line)
        else:
            gold = self._parse_labels(label_tokens, doc_id, line)

        features = self._parse_features(tokens[pos:], doc_id, line)

        return Document(doc_id=doc_id, features=features, gold_labels=frozenset(gold))

    # --------------------------------------------------
    # labels
    # --------------------------------------------------
    def _parse_labels(self, label_tokens: List[str], doc_id: int, line: str) -> Set[int]:
        labels: Set[int] = set()
        for token in label_tokens:
            for item in token.split(","):
                if not item:
                    continue
                try:
                    raw = int(item)
                except ValueError:
                    raise MalformedRecordError(
                        f"invalid label {item!r}", doc_id=doc_id, line=line
                    ) from None
                label = raw - self._offset
                if label < 0:
                    raise MalformedRecordError(
                        f"label {raw} out of range for "
                        f"{'0' if self.labels_0_based else '1'}-based ids",
                        doc_id=doc_id,
                        line=line,
                    )
                labels.add(label)
        return labels

    def _parse_binary_label(self, label_tokens: List[str], doc_id: int, line: str) -> Set[int]:
        items = [item for token in label_tokens for item in token.split(",") if item]
        if len(items) != 1:
            raise MalformedRecordError(
                f"binary record needs exactly one label, got {len(items)}",
                doc_id=doc_id,
                line=line,
            )
        try:
            value = float(items[0])
        except ValueError:
            raise MalformedRecordError(
                f"invalid binary label {items[0]!r}", doc_id=doc_id, line=line
            ) from None
        return {0} if value > 0 else set()

    # --------------------------------------------------
    # features
    # --------------------------------------------------
    def _parse_features(self, tokens: List[str], doc_id: int, line: str) -> Dict[int, float]:
        features: Dict[int, float] = {}
        for token in tokens:
            idx_str, sep, val_str = token.partition(":")
            if not sep or not idx_str or not val_str:
                raise MalformedRecordError(
                    f"expected index:value, got {token!r}", doc_id=doc_id, line=line
                )
            try:
                raw = int(idx_str)
                value = float(val_str)
            except ValueError:
                raise MalformedRecordError(
                    f"invalid feature pair {token!r}", doc_id=doc_id, line=line
                ) from None
            if not math.isfinite(value):
                raise MalformedRecordError(
                    f"non-finite feature value in {token!r}", doc_id=doc_id, line=line
                )

            index = raw - self._offset
            if index < 0:
                raise MalformedRecordError(
                    f"feature index {raw} out of range for "
                    f"{'0' if self.labels_0_based else '1'}-based ids",
                    doc_id=doc_id,
                    line=line,
                )
            if index in features:
                raise MalformedRecordError(
                    f"duplicate feature index {raw}", doc_id=doc_id, line=line
                )
            features[index] = value
        return features
