from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

from pynvim import Nvim
from pynvim_pp.logging import log, suppress_and_log

from ..clients.paths.paths import LocalFilesystem
from ..consts import SETTINGS_VAR
from ..server.rt_types import Stack
from ..server.session import Session
from ..server.settings import load_settings
from ..shared.runtime import CollaboratorError
from .buffer import NvimBuffer, NvimDisplay
from .lsp import NvimLSP
from .snippets import LuaSnip

_LUA = Path(__file__).resolve(strict=True).with_name("autocmds.lua").read_text("UTF-8")


def stack(nvim: Nvim) -> Stack:
    """
    Raises `ValidationError` on bad user settings
    """

    settings = load_settings(nvim.vars.get(SETTINGS_VAR))
    buffer = NvimBuffer(nvim)
    return Stack(
        settings=settings,
        buffer=buffer,
        display=NvimDisplay(nvim, buffer=buffer),
        lsp=NvimLSP(nvim),
        snippets=LuaSnip(nvim),
        fs=LocalFilesystem(),
    )


class Host:
    def __init__(self, nvim: Nvim, session: Session, stack: Stack) -> None:
        self._nvim, self._session, self._stack = nvim, session, stack
        self._handlers: Mapping[str, Callable[..., Any]] = {
            "complementree_trigger": self._trigger,
            "complementree_complete_done": self._complete_done,
            "complementree_leave": self._session.leave,
        }

    def _trigger(self, filetype: str = "") -> None:
        try:
            self._session.trigger(filetype)
        except (CollaboratorError, TimeoutError) as e:
            log.warn("%s", e)
            self._stack.display.notify(str(e), error=True)

    def _complete_done(self, item: Any = None) -> None:
        self._session.complete_done(item if isinstance(item, Mapping) else {})

    def _on_request(self, name: str, args: Sequence[Any]) -> None:
        log.warn("UNKNOWN REQUEST -- %s", name)

    def _on_notification(self, name: str, args: Sequence[Any]) -> None:
        if handler := self._handlers.get(name):
            with suppress_and_log():
                handler(*args)
        else:
            log.warn("UNKNOWN NOTIFICATION -- %s", name)

    def _setup(self) -> None:
        self._nvim.api.exec_lua(_LUA, (self._nvim.channel_id,))

    def run(self) -> None:
        self._nvim.run_loop(
            self._on_request, self._on_notification, setup_cb=self._setup
        )
