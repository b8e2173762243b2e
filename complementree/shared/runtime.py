from typing import Any, Mapping, Optional, Protocol, Sequence

from .types import Position


class CollaboratorError(Exception): ...


class PBuffer(Protocol):
    def get_line(self, row: int) -> str: ...

    def set_text(
        self, row: int, col_start: int, row_end: int, col_end: int, lines: Sequence[str]
    ) -> None: ...

    def get_cursor(self) -> Position: ...


class PDisplay(Protocol):
    def complete(self, col: int, items: Sequence[Mapping[str, Any]]) -> None: ...

    def notify(self, msg: str, error: bool = False) -> None: ...


class PLSP(Protocol):
    def request_completion(
        self, position: Position, timeout: float
    ) -> Mapping[int, Any]: ...

    def resolve_capable(self, client_id: int) -> Optional[bool]:
        """
        `None` <-> no such client
        """

    def resolve(self, client_id: int, item: Mapping[str, Any], timeout: float) -> Any:
        """
        Raises `TimeoutError` past `timeout`, `CollaboratorError` on a protocol error
        """

    def root_dirs(self) -> Sequence[str]: ...


class PSnippets(Protocol):
    def list_available(self, filetype: str) -> Sequence[Mapping[str, Any]]: ...

    def expand(self, body: str) -> None: ...

    def is_expandable(self) -> bool: ...

    def expand_pending(self) -> None: ...


class PFilesystem(Protocol):
    def scan(
        self,
        root: str,
        max_depth: int,
        ignore_hidden: bool,
        match_patterns: Sequence[str],
    ) -> Sequence[str]: ...

    def relative_path(self, path: str, root: str) -> str: ...
