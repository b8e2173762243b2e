from dataclasses import dataclass
from typing import (
    Callable,
    MutableMapping,
    MutableSequence,
    Optional,
    Protocol,
    Sequence,
    Union,
)

from pynvim_pp.logging import log

from ..shared.runtime import PBuffer
from ..shared.types import (
    Acceptance,
    AcceptState,
    Candidate,
    Position,
    TextEdit,
)
from .rt_types import AcceptanceError


@dataclass(frozen=True)
class AcceptanceContext:
    candidate: Candidate
    position: Position
    line: str

    @property
    def suffix(self) -> str:
        _, col = self.position
        return self.line[col:]


class Acceptor(Protocol):
    def accept(
        self, candidate: Candidate, context: AcceptanceContext
    ) -> Acceptance: ...


@dataclass(frozen=True)
class Resolved:
    edits: Sequence[TextEdit]


@dataclass(frozen=True)
class Unresolved:
    reason: str


Resolution = Union[Resolved, Unresolved]


class Tidy:
    """
    Removes the word the editor inserted on its own, up to the end of the line

    Runs at most once
    """

    def __init__(self, buffer: PBuffer, context: AcceptanceContext) -> None:
        row, col = context.position
        self._buffer = buffer
        self._row = row
        self._begin = max(0, col - len(context.candidate.word))
        self._removed = context.line[self._begin :]
        self._done = False

    def bound(self, row: int, length: int) -> int:
        """
        Length of `row` once tidied
        """

        return self._begin if row == self._row else length

    def __call__(self) -> None:
        if not self._done:
            self._done = True
            self._buffer.set_text(
                self._row,
                self._begin,
                self._row,
                self._begin + len(self._removed),
                ("",),
            )

    def undo(self) -> None:
        if self._done:
            self._done = False
            self._buffer.set_text(
                self._row, self._begin, self._row, self._begin, (self._removed,)
            )


def apply_text_edits(buffer: PBuffer, edits: Sequence[TextEdit]) -> None:
    """
    Bottom up, so earlier positions are not shifted by later edits
    """

    ordered = sorted(
        enumerate(edits), key=lambda e: (e[1].begin, e[1].end, e[0]), reverse=True
    )
    for _, edit in ordered:
        (b_row, b_col), (e_row, e_col) = edit.begin, edit.end
        buffer.set_text(b_row, b_col, e_row, e_col, edit.new_text.split("\n"))


def _check_edits(
    buffer: PBuffer, tidy: Optional[Tidy], edits: Sequence[TextEdit]
) -> None:
    """
    Nothing is touched unless every edit fits the tidied buffer
    """

    for edit in edits:
        b_row, _ = edit.begin
        if edit.end < edit.begin or b_row < 0:
            raise AcceptanceError(f"Edit out of range :: {edit}")
        for row, col in (edit.begin, edit.end):
            try:
                line = buffer.get_line(row)
            except Exception as e:
                raise AcceptanceError(f"Edit out of range :: {edit}") from e
            limit = tidy.bound(row, length=len(line)) if tidy else len(line)
            if not 0 <= col <= limit:
                raise AcceptanceError(f"Edit out of range :: {edit}")


def _edit(
    buffer: PBuffer,
    tidy: Optional[Tidy],
    edits: Sequence[TextEdit],
    trace: MutableSequence[AcceptState],
) -> None:
    _check_edits(buffer, tidy=tidy, edits=edits)
    if tidy:
        trace.append(AcceptState.tidy_pending)
        tidy()
    try:
        apply_text_edits(buffer, edits=edits)
    except Exception as e:
        if tidy:
            tidy.undo()
        raise AcceptanceError(f"Failed to apply edits :: {e}") from e
    else:
        trace.append(AcceptState.edits_applied)


def reconcile(
    buffer: PBuffer,
    context: AcceptanceContext,
    edits: Optional[Sequence[TextEdit]],
    resolve: Optional[Callable[[], Resolution]],
    expand: Optional[Callable[[str], None]],
) -> Acceptance:
    """
    selected -> tidy_pending -> edits_applied -> snippet_expanded
    selected -> edits_applied

    `resolve` only runs when `edits` is `None`, an empty sequence means none
    `expand` is only given for snippet insertions, it receives the line suffix
    """

    trace: MutableSequence[AcceptState] = [AcceptState.selected]
    tidy = Tidy(buffer, context=context) if expand else None

    if edits is None and resolve:
        resolution = resolve()
        if isinstance(resolution, Unresolved):
            raise AcceptanceError(resolution.reason)
        else:
            edits = resolution.edits

    if edits:
        _edit(buffer, tidy=tidy, edits=edits, trace=trace)
    elif tidy:
        trace.append(AcceptState.tidy_pending)
        tidy()

    if expand:
        expand(context.suffix)
        trace.append(AcceptState.snippet_expanded)

    return Acceptance(source=context.candidate.source, trace=tuple(trace))


class Registry:
    def __init__(self, buffer: PBuffer) -> None:
        self._buffer = buffer
        self._acceptors: MutableMapping[str, Acceptor] = {}

    def __contains__(self, kind: str) -> bool:
        return kind in self._acceptors

    def register(self, kind: str, acceptor: Acceptor) -> None:
        self._acceptors[kind] = acceptor

    def accept(self, candidate: Candidate) -> Acceptance:
        acceptor = self._acceptors.get(candidate.source)
        if not acceptor:
            log.debug("NO ACCEPTOR -- %s", candidate.source)
            return Acceptance(source=candidate.source)
        else:
            row, col = self._buffer.get_cursor()
            line = self._buffer.get_line(row)
            context = AcceptanceContext(
                candidate=candidate, position=(row, col), line=line
            )
            return acceptor.accept(candidate, context=context)
