from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

# https://microsoft.github.io/language-server-protocol/specification


@dataclass(frozen=True)
class _Position:
    line: int
    character: int


@dataclass(frozen=True)
class _Range:
    start: _Position
    end: _Position


@dataclass(frozen=True)
class _TextEdit:
    newText: str


@dataclass(frozen=True)
class TextEdit(_TextEdit):
    range: _Range


@dataclass(frozen=True)
class InsertReplaceEdit(_TextEdit):
    insert: _Range
    replace: _Range


_CompletionItemKind = int
_InsertTextFormat = int


@dataclass(frozen=True)
class CompletionItem:
    label: str
    kind: Optional[_CompletionItemKind] = None
    detail: Optional[str] = None

    sortText: Optional[str] = None
    filterText: Optional[str] = None

    insertText: Optional[str] = None
    insertTextFormat: Optional[_InsertTextFormat] = None

    textEdit: Union[TextEdit, InsertReplaceEdit, None] = None
    additionalTextEdits: Optional[Sequence[TextEdit]] = None

    data: Optional[Any] = None
