from typing import Any, Iterator, Mapping, Optional, Sequence

from pynvim_pp.logging import log
from std2.pickle.decoder import new_decoder
from std2.pickle.types import DecodeError

from ...server.accept import (
    AcceptanceContext,
    Resolution,
    Resolved,
    Unresolved,
    reconcile,
)
from ...shared.runtime import PLSP, CollaboratorError, PBuffer, PSnippets
from ...shared.settings import Limits, LSPClient
from ...shared.timeit import timeit
from ...shared.types import Acceptance, Candidate, Context
from .parse import (
    decode_item,
    is_snippet,
    parse_item,
    parse_resp,
    snippet_body,
    text_edits,
)
from .types import TextEdit

_edits_decoder = new_decoder[Optional[Sequence[TextEdit]]](
    Optional[Sequence[TextEdit]], strict=False
)


def bounded_resolve(
    lsp: PLSP, client: int, item: Mapping[str, Any], timeout: float
) -> Resolution:
    try:
        with timeit("LSP RESOLVE"):
            resolved = lsp.resolve(client, item, timeout)
    except TimeoutError:
        return Unresolved(reason=f"LSP resolve timed out after {timeout}s")
    except CollaboratorError as e:
        return Unresolved(reason=f"LSP resolve failed :: {e}")
    else:
        raw = (
            resolved.get("additionalTextEdits")
            if isinstance(resolved, Mapping)
            else None
        )
        try:
            edits = _edits_decoder(raw)
        except DecodeError as e:
            return Unresolved(reason=f"LSP resolve returned malformed edits :: {e}")
        else:
            return Resolved(edits=text_edits(edits or ()))


class Worker:
    def __init__(self, lsp: PLSP, options: LSPClient, limits: Limits) -> None:
        self._lsp = lsp
        self._options, self._limits = options, limits

    def matches(self, context: Context) -> Sequence[Candidate]:
        with timeit("LSP"):
            responses = self._lsp.request_completion(
                context.position, timeout=self._limits.completion_timeout
            )

        def cont() -> Iterator[Candidate]:
            for client, resp in responses.items():
                for item in parse_resp(resp):
                    if candidate := parse_item(
                        self._options.short_name, client=client, item=item
                    ):
                        yield candidate

        return tuple(cont())


class Acceptor:
    def __init__(
        self, buffer: PBuffer, lsp: PLSP, snippets: PSnippets, limits: Limits
    ) -> None:
        self._buffer, self._lsp, self._snippets = buffer, lsp, snippets
        self._limits = limits

    def accept(self, candidate: Candidate, context: AcceptanceContext) -> Acceptance:
        item = candidate.user_data.get("item")
        client = candidate.user_data.get("client")

        parsed = decode_item(item) if item else None
        capable = self._lsp.resolve_capable(client) if client is not None else None

        if not parsed or capable is None:
            log.debug("LSP ACCEPT SKIPPED -- %s", client)
            return Acceptance(source=candidate.source)
        else:
            body = snippet_body(parsed)

            def expand(suffix: str) -> None:
                self._snippets.expand(body + suffix)

            extra = parsed.additionalTextEdits
            edits = None if extra is None else text_edits(extra)

            def resolve() -> Resolution:
                return bounded_resolve(
                    self._lsp,
                    client=client,
                    item=item,
                    timeout=self._limits.resolve_timeout,
                )

            return reconcile(
                self._buffer,
                context=context,
                edits=edits,
                resolve=resolve if capable else None,
                expand=expand if is_snippet(parsed) else None,
            )
