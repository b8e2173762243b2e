from dataclasses import dataclass, replace
from threading import Lock
from typing import Any, MutableMapping, Optional, Sequence, Tuple

from pynvim_pp.logging import log

from ..shared.parse import PrefixPolicy, extend_prefix
from ..shared.timeit import timeit
from ..shared.types import Candidate, Context
from .rt_types import ValidationError
from .sources import DEFAULT_PREFIX, MSource, Query, normalize


@dataclass(frozen=True)
class _CacheEntry:
    candidates: Sequence[Candidate]
    prefix: str
    anchor: int
    policy: PrefixPolicy


class Cache:
    """
    One entry per source kind, valid while the user only appends to the prefix

    Any other edit must be followed by `invalidate`, otherwise hits may carry a
    stale prefix.
    """

    def __init__(self, policy: PrefixPolicy = DEFAULT_PREFIX) -> None:
        self._policy = policy
        self._lock = Lock()
        self._generation = 0
        self._entries: MutableMapping[str, _CacheEntry] = {}

    def __contains__(self, kind: str) -> bool:
        with self._lock:
            return kind in self._entries

    def invalidate(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()
        log.debug("%s", "CACHE -- INVALIDATED")

    invalidate_cache = invalidate

    def query(
        self,
        kind: str,
        fn: Query,
        context: Context,
        policy: Optional[PrefixPolicy] = None,
    ) -> Tuple[Sequence[Candidate], str]:
        """
        Hits re-derive the prefix with the `policy` of the source that filled them
        """

        with self._lock:
            generation = self._generation
            entry = self._entries.get(kind)

        if entry:
            prefix = extend_prefix(
                entry.policy,
                anchor=entry.anchor,
                prefix=entry.prefix,
                line_before=context.line_before,
            )
            log.debug("CACHE HIT -- %s :: %r", kind, prefix)
            return tuple(entry.candidates), prefix
        else:
            with timeit(f"CACHE MISS -- {kind}"):
                candidates, prefix = fn(context)

            entry = _CacheEntry(
                candidates=tuple(candidates),
                prefix=prefix,
                anchor=len(context.line_before) - len(prefix),
                policy=policy or self._policy,
            )
            with self._lock:
                if generation == self._generation:
                    self._entries[kind] = entry
                else:
                    log.debug("CACHE STALE -- %s", kind)

            return tuple(entry.candidates), prefix

    def cached(self, kind: str, desc: Any) -> MSource:
        source = normalize(desc, default_prefix=self._policy)
        if not isinstance(source, MSource):
            raise ValidationError(f"Combined sources are cached per child :: {kind}")

        def query(context: Context) -> Tuple[Sequence[Candidate], str]:
            return self.query(
                kind, fn=source.query, context=context, policy=source.prefix
            )

        return replace(source, query=query)
