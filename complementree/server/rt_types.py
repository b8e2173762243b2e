from dataclasses import dataclass

from ..shared.runtime import PBuffer, PDisplay, PFilesystem, PLSP, PSnippets
from ..shared.settings import Settings


class ValidationError(Exception): ...


class AcceptanceError(Exception): ...


@dataclass(frozen=True)
class Stack:
    settings: Settings
    buffer: PBuffer
    display: PDisplay
    lsp: PLSP
    snippets: PSnippets
    fs: PFilesystem
