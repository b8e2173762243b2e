from functools import cmp_to_key
from typing import Callable, Iterable, Sequence

from ..shared.parse import lower
from ..shared.types import Candidate

Filter = Callable[[int, Candidate, str], bool]
# Strict less than
Comparator = Callable[[Candidate, Candidate, str], bool]


def _norm(candidate: Candidate, text: str) -> str:
    return lower(text) if candidate.icase else text


def prefix(idx: int, candidate: Candidate, prefix: str) -> bool:
    if not prefix:
        return candidate.empty
    else:
        norm = _norm(candidate, prefix)
        return any(
            _norm(candidate, text).startswith(norm)
            for text in (candidate.word, candidate.abbr)
            if text
        )


def strict_prefix(idx: int, candidate: Candidate, prefix: str) -> bool:
    if not prefix:
        return candidate.empty
    else:
        return candidate.word.startswith(prefix)


def accept_all(idx: int, candidate: Candidate, prefix: str) -> bool:
    return True


def alphabetic(a: Candidate, b: Candidate, prefix: str) -> bool:
    return a.word < b.word


def alphabetic_icase(a: Candidate, b: Candidate, prefix: str) -> bool:
    return lower(a.word) < lower(b.word)


def length(a: Candidate, b: Candidate, prefix: str) -> bool:
    return len(a.word) < len(b.word)


def proximity(a: Candidate, b: Candidate, prefix: str) -> bool:
    lhs, rhs = abs(len(a.word) - len(prefix)), abs(len(b.word) - len(prefix))
    return lhs < rhs


def sort_text(a: Candidate, b: Candidate, prefix: str) -> bool:
    lhs = a.user_data.get("sort_text") or a.word
    rhs = b.user_data.get("sort_text") or b.word
    return lhs < rhs


def chain(*comparators: Comparator) -> Comparator:
    def cmp(a: Candidate, b: Candidate, prefix: str) -> bool:
        for lt in comparators:
            if lt(a, b, prefix):
                return True
            elif lt(b, a, prefix):
                return False
        else:
            return False

    return cmp


def apply(
    filterf: Filter, prefix: str, candidates: Iterable[Candidate]
) -> Sequence[Candidate]:
    return tuple(
        candidate
        for idx, candidate in enumerate(candidates, start=1)
        if filterf(idx, candidate, prefix)
    )


def sort(
    comparator: Comparator, prefix: str, candidates: Iterable[Candidate]
) -> Sequence[Candidate]:
    def cmp(a: Candidate, b: Candidate) -> int:
        if comparator(a, b, prefix):
            return -1
        elif comparator(b, a, prefix):
            return 1
        else:
            return 0

    return tuple(sorted(candidates, key=cmp_to_key(cmp)))
