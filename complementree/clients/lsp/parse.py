from typing import Any, Iterator, Mapping, Optional, Sequence

from pynvim_pp.logging import log
from std2.pickle.decoder import new_decoder
from std2.pickle.types import DecodeError

from ...shared.runtime import CollaboratorError
from ...shared.types import Candidate, TextEdit
from .protocol import CompletionItemKind, InsertTextFormat
from .types import CompletionItem
from .types import TextEdit as LSPTextEdit

_item_decoder = new_decoder[CompletionItem](CompletionItem, strict=False)


def _falsy(thing: Any) -> bool:
    return thing is None or thing is False or thing == 0 or thing == ""


def parse_resp(resp: Any) -> Sequence[Any]:
    if _falsy(resp):
        return ()
    elif isinstance(resp, Mapping):
        return resp.get("items") or ()
    elif isinstance(resp, Sequence) and not isinstance(resp, str):
        return resp
    else:
        raise CollaboratorError(f"Unknown LSP resp -- {type(resp)}")


def decode_item(item: Any) -> Optional[CompletionItem]:
    try:
        parsed = _item_decoder(item)
    except DecodeError as e:
        log.warn("%s", e)
        return None
    else:
        return parsed


def is_snippet(item: CompletionItem) -> bool:
    return InsertTextFormat.get(item.insertTextFormat) == "Snippet"


def word(item: CompletionItem) -> str:
    """
    Text inserted by the editor before the item is accepted
    """

    kind = CompletionItemKind.get(item.kind, "")
    new_text = item.textEdit.newText if item.textEdit else None

    if kind == "Snippet":
        return item.label
    elif is_snippet(item):
        if item.textEdit:
            return item.insertText or new_text or item.label
        elif item.insertText:
            shorter = len(item.label) < len(item.insertText)
            return item.label if shorter else item.insertText
        else:
            return item.label
    else:
        return new_text or item.insertText or item.label


def snippet_body(item: CompletionItem) -> str:
    if item.textEdit:
        return item.textEdit.newText
    else:
        return item.insertText or item.label


def text_edits(edits: Sequence[LSPTextEdit]) -> Sequence[TextEdit]:
    def cont() -> Iterator[TextEdit]:
        for edit in edits:
            start, end = edit.range.start, edit.range.end
            yield TextEdit(
                begin=(start.line, start.character),
                end=(end.line, end.character),
                new_text=edit.newText,
            )

    return tuple(cont())


def parse_item(source: str, client: int, item: Any) -> Optional[Candidate]:
    if not item:
        return None
    elif not (parsed := decode_item(item)):
        return None
    else:
        user_data = {"client": client, "item": item, "sort_text": parsed.sortText}
        candidate = Candidate(
            word=word(parsed),
            source=source,
            abbr=parsed.label,
            kind=CompletionItemKind.get(parsed.kind, ""),
            menu=parsed.detail or "",
            user_data=user_data,
        )
        return candidate
