from concurrent.futures import Executor
from typing import Any, Iterator, Mapping, Optional, Sequence

from pynvim_pp.logging import log

from ..clients.lsp.worker import Acceptor as LSPAcceptor
from ..clients.lsp.worker import Worker as LSPWorker
from ..clients.paths.worker import Worker as PathsWorker
from ..clients.paths.worker import path_prefix
from ..clients.snippet.worker import Acceptor as SnippetAcceptor
from ..clients.snippet.worker import Worker as SnippetWorker
from ..shared.context import is_append, make_context
from ..shared.types import Acceptance, Candidate, Context
from .accept import Registry
from .cache import Cache
from .combinators import Emitter, combine, non_empty_prefix, wrap
from .filters import alphabetic, chain, sort_text
from .rt_types import AcceptanceError, Stack
from .settings import prefix_policy
from .sources import Described, Normalized, normalize


class Session:
    """
    One completion session per buffer, driven by the host's event loop
    """

    def __init__(self, stack: Stack, executor: Optional[Executor] = None) -> None:
        self._stack = stack
        self._policy = prefix_policy(stack.settings)
        self._executor = executor
        self._last: Optional[Context] = None

        self.cache = Cache(self._policy)
        self.registry = Registry(stack.buffer)
        self.emitters: Sequence[Emitter] = tuple(self._emitters())

    def _source(self, kind: str, desc: Described) -> Normalized:
        if self._stack.settings.cache.enabled:
            return self.cache.cached(kind, desc)
        else:
            return normalize(desc, default_prefix=self._policy)

    def _emitters(self) -> Iterator[Emitter]:
        stack = self._stack
        settings = stack.settings
        lsp, snippets, paths = (
            settings.clients.lsp,
            settings.clients.snippets,
            settings.clients.paths,
        )

        def cont() -> Iterator[Normalized]:
            if lsp.enabled:
                lsp_worker = LSPWorker(stack.lsp, options=lsp, limits=settings.limits)
                source = self._source(
                    lsp.short_name,
                    Described(
                        matches=lsp_worker.matches,
                        comparator=chain(sort_text, alphabetic),
                    ),
                )
                if lsp.non_empty_prefix:
                    yield non_empty_prefix(source, threshold=settings.match.min_prefix)
                else:
                    yield source
                self.registry.register(
                    lsp.short_name,
                    LSPAcceptor(
                        stack.buffer,
                        lsp=stack.lsp,
                        snippets=stack.snippets,
                        limits=settings.limits,
                    ),
                )

            if snippets.enabled:
                snip_worker = SnippetWorker(stack.snippets, options=snippets)
                yield self._source(
                    snippets.short_name, Described(matches=snip_worker.matches)
                )
                self.registry.register(
                    snippets.short_name, SnippetAcceptor(stack.snippets)
                )

        children = tuple(cont())
        if children:
            yield wrap(
                combine(
                    *children, executor=self._executor, default_prefix=self._policy
                ),
                display=stack.display,
                default_prefix=self._policy,
            )

        if paths.enabled:
            paths_worker = PathsWorker(stack.fs, lsp=stack.lsp, options=paths)
            desc = Described(matches=paths_worker.matches, prefix=path_prefix)
            yield wrap(
                non_empty_prefix(desc, threshold=settings.match.min_prefix),
                display=stack.display,
            )

    def observe(self, context: Context) -> None:
        if self._last and not is_append(self._last, context):
            self.cache.invalidate()
        self._last = context

    def trigger(self, filetype: str = "", manual: bool = False) -> bool:
        """
        Collaborator errors propagate, the cache keeps no entry for them
        """

        buffer = self._stack.buffer
        row, col = buffer.get_cursor()
        line = buffer.get_line(row)
        context = make_context((row, col), line=line, filetype=filetype, manual=manual)
        if manual:
            self.cache.invalidate()
        self.observe(context)

        for emit in self.emitters:
            if emit(context):
                return True
        else:
            return False

    def complete_done(self, item: Mapping[str, Any]) -> Optional[Acceptance]:
        if not item or not item.get("word"):
            return None
        else:
            candidate = Candidate.from_item(item)
            try:
                acceptance = self.registry.accept(candidate)
            except AcceptanceError as e:
                log.warn("%s", e)
                self._stack.display.notify(str(e), error=True)
                return None
            else:
                log.debug("ACCEPTED -- %s :: %s", candidate.source, acceptance.trace)
                return acceptance
            finally:
                self.leave()

    def leave(self) -> None:
        self.cache.invalidate()
        self._last = None
