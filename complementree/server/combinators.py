from concurrent.futures import Executor
from dataclasses import replace
from itertools import chain
from typing import Any, Callable, Optional, Sequence, Tuple

from pynvim_pp.logging import log

from ..shared.parse import PrefixPolicy
from ..shared.runtime import PDisplay
from ..shared.timeit import timeit
from ..shared.types import Candidate, Context
from .filters import apply, sort
from .sources import DEFAULT_PREFIX, Combined, MSource, Normalized, normalize

Emitter = Callable[[Context], bool]


def _pipeline(source: MSource, context: Context) -> Tuple[Sequence[Candidate], str]:
    candidates, prefix = source.query(context)
    filtered = apply(source.filter, prefix=prefix, candidates=candidates)
    return sort(source.comparator, prefix=prefix, candidates=filtered), prefix


def collect(source: Normalized, context: Context) -> Tuple[Sequence[Candidate], str]:
    """
    Filtered + sorted per source, concatenated in declaration order
    """

    if isinstance(source, MSource):
        return _pipeline(source, context=context)
    else:

        def cont(child: Normalized) -> Sequence[Candidate]:
            candidates, _ = collect(child, context=context)
            return candidates

        if source.executor:
            results = tuple(source.executor.map(cont, source.children))
        else:
            results = tuple(map(cont, source.children))

        return tuple(chain.from_iterable(results)), source.prefix(context.line_before)


def combine(
    *descs: Any,
    executor: Optional[Executor] = None,
    prefix: Optional[PrefixPolicy] = None,
    default_prefix: PrefixPolicy = DEFAULT_PREFIX,
) -> Combined:
    children = tuple(normalize(desc, default_prefix=default_prefix) for desc in descs)
    if prefix:
        policy = prefix
    elif children:
        policy = children[0].prefix
    else:
        policy = default_prefix
    return Combined(children=children, prefix=policy, executor=executor)


def non_empty_prefix(
    desc: Any, threshold: int = 1, default_prefix: PrefixPolicy = DEFAULT_PREFIX
) -> Normalized:
    source = normalize(desc, default_prefix=default_prefix)

    if isinstance(source, Combined):
        children = tuple(
            non_empty_prefix(child, threshold=threshold) for child in source.children
        )
        return replace(source, children=children)
    else:

        def query(context: Context) -> Tuple[Sequence[Candidate], str]:
            prefix = source.prefix(context.line_before)
            if len(prefix) > threshold:
                return source.query(context)
            else:
                return (), prefix

        return replace(source, query=query)


def complete(
    display: PDisplay, context: Context, prefix: str, candidates: Sequence[Candidate]
) -> bool:
    if candidates:
        _, col = context.position
        display.complete(col - len(prefix), tuple(c.to_item() for c in candidates))
        return True
    else:
        return False


def wrap(
    desc: Any, display: PDisplay, default_prefix: PrefixPolicy = DEFAULT_PREFIX
) -> Emitter:
    source = normalize(desc, default_prefix=default_prefix)

    def emit(context: Context) -> bool:
        with timeit("COLLECTED -- ALL"):
            candidates, prefix = collect(source, context=context)
        log.debug("EMIT -- %s :: %r", len(candidates), prefix)
        return complete(display, context=context, prefix=prefix, candidates=candidates)

    return emit
