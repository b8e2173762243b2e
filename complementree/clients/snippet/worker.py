from typing import Any, Iterator, Mapping, Sequence

from pynvim_pp.logging import log

from ...server.accept import AcceptanceContext
from ...shared.runtime import PSnippets
from ...shared.settings import SnippetClient
from ...shared.timeit import timeit
from ...shared.types import Acceptance, AcceptState, Candidate, Context


def _menu(description: Any) -> str:
    if isinstance(description, str):
        return description
    elif isinstance(description, Sequence):
        return "".join(map(str, description))
    else:
        return ""


def parse_snippet(source: str, snippet: Mapping[str, Any]) -> Candidate:
    trigger = snippet.get("trigger") or ""
    return Candidate(
        word=trigger,
        source=source,
        abbr=snippet.get("name") or trigger,
        kind="S",
        menu=_menu(snippet.get("description")),
        user_data={"word_triggered": bool(snippet.get("wordTriggered", True))},
    )


class Worker:
    def __init__(self, snippets: PSnippets, options: SnippetClient) -> None:
        self._snippets, self._options = snippets, options

    def matches(self, context: Context) -> Sequence[Candidate]:
        with timeit("SNIPPETS"):
            available = self._snippets.list_available(context.filetype)

        def cont() -> Iterator[Candidate]:
            for snippet in available:
                if snippet.get("trigger"):
                    yield parse_snippet(self._options.short_name, snippet=snippet)

        return tuple(cont())


class Acceptor:
    def __init__(self, snippets: PSnippets) -> None:
        self._snippets = snippets

    def accept(self, candidate: Candidate, context: AcceptanceContext) -> Acceptance:
        if self._snippets.is_expandable():
            self._snippets.expand_pending()
            trace = (AcceptState.selected, AcceptState.snippet_expanded)
            return Acceptance(source=candidate.source, trace=trace)
        else:
            log.debug("SNIPPET NOT EXPANDABLE -- %s", candidate.word)
            return Acceptance(source=candidate.source)
