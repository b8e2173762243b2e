from argparse import ArgumentParser, Namespace
from sys import exit

from pynvim import attach
from pynvim_pp.logging import log

from .nvim.host import Host, stack
from .server.rt_types import ValidationError
from .server.session import Session


def parse_args() -> Namespace:
    parser = ArgumentParser()
    parser.add_argument("socket")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    nvim = attach("socket", path=args.socket)

    try:
        s = stack(nvim)
    except ValidationError as e:
        log.warn("%s", e)
        nvim.err_write(f"complementree :: bad settings -- {e}\n")
        return 1
    else:
        Host(nvim, session=Session(s), stack=s).run()
        return 0


exit(main())
