from contextlib import contextmanager
from typing import Iterator

from pynvim_pp.logging import log
from std2.locale import si_prefixed_smol
from std2.timeit import timeit as _timeit

from ..consts import DEBUG


@contextmanager
def timeit(name: str) -> Iterator[None]:
    """
    Debug log of how long `name` took, only under `COMPLEMENTREE_DEBUG`
    """

    if DEBUG:
        with _timeit() as t:
            yield None
        elapsed = si_prefixed_smol(t().total_seconds(), precision=0)
        log.debug("TIME -- %s :: %ss", name, elapsed)
    else:
        yield None
