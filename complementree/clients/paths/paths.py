from fnmatch import fnmatch
from os import scandir
from os.path import relpath
from typing import Iterator, Sequence


def _walk(
    root: str, depth: int, ignore_hidden: bool, match_patterns: Sequence[str]
) -> Iterator[str]:
    try:
        entries = sorted(scandir(root), key=lambda e: e.name)
    except (FileNotFoundError, NotADirectoryError, PermissionError):
        return

    for entry in entries:
        if ignore_hidden and entry.name.startswith("."):
            continue
        elif entry.is_dir(follow_symlinks=False):
            if depth > 1:
                yield from _walk(
                    entry.path,
                    depth=depth - 1,
                    ignore_hidden=ignore_hidden,
                    match_patterns=match_patterns,
                )
        elif not match_patterns or any(
            fnmatch(entry.name, pattern) for pattern in match_patterns
        ):
            yield entry.path


class LocalFilesystem:
    def scan(
        self,
        root: str,
        max_depth: int,
        ignore_hidden: bool,
        match_patterns: Sequence[str],
    ) -> Sequence[str]:
        return tuple(
            _walk(
                root,
                depth=max_depth,
                ignore_hidden=ignore_hidden,
                match_patterns=match_patterns,
            )
        )

    def relative_path(self, path: str, root: str) -> str:
        return relpath(path, start=root)
