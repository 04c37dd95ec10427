"""rpm-style version ordering used when reporting replace operations."""

from __future__ import annotations

import re
from typing import List, Tuple

from .models import Operation, OpKind

__all__ = [
    "compare_labels",
    "compare_packages",
    "describe_replace",
]

_SEGMENT_RE = re.compile(r"(\d+|[a-zA-Z]+|~|\^)")


def _tokenize(label: str) -> List[str]:
    # Separators other than "~" and "^" only split segments.
    return _SEGMENT_RE.findall(label or "")


def compare_labels(a: str, b: str) -> int:
    """Compare two version (or release) strings the way rpmvercmp does."""

    if a == b:
        return 0
    tok_a = _tokenize(a)
    tok_b = _tokenize(b)
    i = 0
    while True:
        seg_a = tok_a[i] if i < len(tok_a) else None
        seg_b = tok_b[i] if i < len(tok_b) else None

        if seg_a == "~" or seg_b == "~":
            if seg_a != "~":
                return 1
            if seg_b != "~":
                return -1
            i += 1
            continue

        if seg_a == "^" or seg_b == "^":
            if seg_a is None:
                return -1
            if seg_b is None:
                return 1
            if seg_a != "^":
                return 1
            if seg_b != "^":
                return -1
            i += 1
            continue

        if seg_a is None or seg_b is None:
            break

        a_num = seg_a.isdigit()
        b_num = seg_b.isdigit()
        if a_num != b_num:
            # numeric segments are newer than alphabetic ones
            return 1 if a_num else -1
        if a_num:
            c = _cmp(int(seg_a), int(seg_b))
        else:
            c = _cmp(seg_a, seg_b)
        if c:
            return c
        i += 1

    if seg_a is None and seg_b is None:
        return 0
    return -1 if seg_a is None else 1


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_packages(left, right) -> int:
    """Order two packages by version, then release."""

    c = compare_labels(left.version, right.version)
    if c:
        return c
    return compare_labels(left.release, right.release)


def describe_replace(op: Operation) -> Tuple[str, str]:
    """Label a single-package replace as ``upgrade``, ``downgrade`` or ``reinstall``."""

    if op.kind is not OpKind.REPLACE or len(op.sources) != 1 or len(op.targets) != 1:
        return ("replace", op.describe())
    src, tgt = op.sources[0], op.targets[0]
    c = compare_packages(tgt, src)
    kind = "upgrade" if c > 0 else "downgrade" if c < 0 else "reinstall"
    return (kind, f"{src.label} -> {tgt.label}")
