from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union

from ..shared.parse import PrefixPolicy, word_policy
from ..shared.types import Candidate, Context
from .filters import Comparator, Filter, alphabetic
from .filters import prefix as prefix_filter
from .rt_types import ValidationError

Matches = Callable[[Context], Sequence[Candidate]]
Query = Callable[[Context], Tuple[Sequence[Candidate], str]]

DEFAULT_PREFIX = word_policy({"_"})

_DESC_KEYS = {"matches", "comparator", "filter", "prefix"}


@dataclass(frozen=True)
class Bare:
    matches: Matches


@dataclass(frozen=True)
class Described:
    matches: Matches
    comparator: Optional[Comparator] = None
    filter: Optional[Filter] = None
    prefix: Optional[PrefixPolicy] = None


@dataclass(frozen=True)
class MSource:
    query: Query
    prefix: PrefixPolicy
    comparator: Comparator
    filter: Filter


@dataclass(frozen=True)
class Combined:
    children: Sequence[Union[MSource, "Combined"]]
    prefix: PrefixPolicy
    executor: Optional[Executor] = None


Normalized = Union[MSource, Combined]


def _query(matches: Matches, policy: PrefixPolicy) -> Query:
    def query(context: Context) -> Tuple[Sequence[Candidate], str]:
        candidates = tuple(matches(context))
        return candidates, policy(context.line_before)

    return query


def _callable(name: str, thing: Any) -> None:
    if not callable(thing):
        raise ValidationError(f"Invalid description :: {name} -- {thing!r}")


def _described(desc: Described, default_prefix: PrefixPolicy) -> MSource:
    _callable("matches", desc.matches)
    for name in ("comparator", "filter", "prefix"):
        if (thing := getattr(desc, name)) is not None:
            _callable(name, thing)

    policy = desc.prefix or default_prefix
    return MSource(
        query=_query(desc.matches, policy=policy),
        prefix=policy,
        comparator=desc.comparator or alphabetic,
        filter=desc.filter or prefix_filter,
    )


def normalize(desc: Any, default_prefix: PrefixPolicy = DEFAULT_PREFIX) -> Normalized:
    """
    Resolved once, when the source is declared

    Raises `ValidationError` for anything that is not a source
    """

    if isinstance(desc, (MSource, Combined)):
        return desc
    elif isinstance(desc, Described):
        return _described(desc, default_prefix=default_prefix)
    elif isinstance(desc, Bare):
        described = Described(matches=desc.matches)
        return _described(described, default_prefix=default_prefix)
    elif isinstance(desc, Mapping):
        if "matches" not in desc or not desc.keys() <= _DESC_KEYS:
            raise ValidationError(f"Invalid description :: {sorted(desc.keys())}")
        else:
            described = Described(
                matches=desc["matches"],
                comparator=desc.get("comparator"),
                filter=desc.get("filter"),
                prefix=desc.get("prefix"),
            )
            return _described(described, default_prefix=default_prefix)
    elif callable(desc):
        return _described(Described(matches=desc), default_prefix=default_prefix)
    else:
        raise ValidationError(f"Invalid description :: {desc!r}")
