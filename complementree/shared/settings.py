from dataclasses import dataclass
from typing import AbstractSet, Optional, Sequence


@dataclass(frozen=True)
class MatchOptions:
    unifying_chars: AbstractSet[str]
    min_prefix: int


@dataclass(frozen=True)
class CacheOptions:
    enabled: bool
    prefix_pattern: Optional[str]


@dataclass(frozen=True)
class Limits:
    completion_timeout: float
    resolve_timeout: float


@dataclass(frozen=True)
class BaseClient:
    enabled: bool
    short_name: str


@dataclass(frozen=True)
class LSPClient(BaseClient):
    non_empty_prefix: bool


@dataclass(frozen=True)
class SnippetClient(BaseClient):
    ...


@dataclass(frozen=True)
class PathsClient(BaseClient):
    max_depth: int
    ignore_hidden: bool
    relative_paths: bool
    root_dirs: Optional[Sequence[str]]
    match_patterns: Sequence[str]


@dataclass(frozen=True)
class Clients:
    lsp: LSPClient
    snippets: SnippetClient
    paths: PathsClient


@dataclass(frozen=True)
class Settings:
    match: MatchOptions
    cache: CacheOptions
    limits: Limits
    clients: Clients
