from os import curdir
from typing import Iterator, Optional, Sequence

from ...shared.parse import regex_policy
from ...shared.runtime import PLSP, PFilesystem
from ...shared.settings import PathsClient
from ...shared.timeit import timeit
from ...shared.types import Candidate, Context

KIND = "[path]"

path_prefix = regex_policy(r"[\w\-.~/\\]")


class Worker:
    def __init__(
        self, fs: PFilesystem, lsp: Optional[PLSP], options: PathsClient
    ) -> None:
        self._fs, self._lsp, self._options = fs, lsp, options

    def root_dirs(self) -> Sequence[str]:
        if self._options.root_dirs is not None:
            return self._options.root_dirs
        else:
            roots = tuple(self._lsp.root_dirs()) if self._lsp else ()
            return roots or (curdir,)

    def matches(self, context: Context) -> Sequence[Candidate]:
        def cont() -> Iterator[Candidate]:
            for root in self.root_dirs():
                with timeit(f"PATHS -- {root}"):
                    paths = self._fs.scan(
                        root,
                        max_depth=self._options.max_depth,
                        ignore_hidden=self._options.ignore_hidden,
                        match_patterns=self._options.match_patterns,
                    )

                for path in paths:
                    display = (
                        self._fs.relative_path(path, root=root)
                        if self._options.relative_paths
                        else path
                    )
                    yield Candidate(
                        word=path,
                        source=self._options.short_name,
                        abbr=display,
                        kind=KIND,
                        user_data={"root_dir": root},
                    )

        return tuple(cont())
