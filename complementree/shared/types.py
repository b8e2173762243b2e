from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Mapping, MutableMapping, Sequence, Tuple

# Row is 0 based, col is a character offset into the row
Position = Tuple[int, int]


@dataclass(frozen=True)
class Context:
    """
    |...                 line                 ...|
    |...   line_before   🐭   line_after      ...|
    |...      <prefix>🐭                       ...|
    """

    manual: bool
    position: Position
    line: str
    line_before: str
    line_after: str
    filetype: str


@dataclass(frozen=True)
class Candidate:
    word: str
    source: str
    abbr: str = ""
    kind: str = ""
    menu: str = ""
    icase: bool = True
    dup: bool = True
    empty: bool = True
    equal: bool = False
    user_data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return self.abbr or self.word

    def to_item(self) -> Mapping[str, Any]:
        user_data: MutableMapping[str, Any] = {**self.user_data}
        user_data["source"] = self.source
        return {
            "word": self.word,
            "abbr": self.abbr or self.word,
            "kind": self.kind,
            "menu": self.menu,
            "icase": int(self.icase),
            "dup": int(self.dup),
            "empty": int(self.empty),
            "equal": int(self.equal),
            "user_data": user_data,
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "Candidate":
        raw = item.get("user_data")
        user_data: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
        return cls(
            word=item.get("word") or "",
            source=user_data.get("source") or "",
            abbr=item.get("abbr") or "",
            kind=item.get("kind") or "",
            menu=item.get("menu") or "",
            icase=bool(item.get("icase", True)),
            dup=bool(item.get("dup", True)),
            empty=bool(item.get("empty", True)),
            equal=bool(item.get("equal", False)),
            user_data={k: v for k, v in user_data.items() if k != "source"},
        )


@dataclass(frozen=True)
class TextEdit:
    """
    End exclusive, like LSP
    """

    begin: Position
    end: Position
    new_text: str


class AcceptState(Enum):
    selected = auto()
    tidy_pending = auto()
    edits_applied = auto()
    snippet_expanded = auto()


@dataclass(frozen=True)
class Acceptance:
    source: str
    trace: Sequence[AcceptState] = (AcceptState.selected,)
