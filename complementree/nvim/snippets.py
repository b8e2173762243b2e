from pathlib import Path
from typing import Any, Mapping, Sequence

from pynvim import Nvim

from ..shared.runtime import CollaboratorError

_LUA = Path(__file__).resolve(strict=True).with_name("snippets.lua").read_text("UTF-8")


class LuaSnip:
    def __init__(self, nvim: Nvim) -> None:
        self._nvim = nvim

    def _call(self, method: str, *args: Any) -> Any:
        resp = self._nvim.api.exec_lua(_LUA, (method, args))
        if not isinstance(resp, Mapping) or "err" in resp:
            raise CollaboratorError(f"Snippets {method} -- {resp!r}")
        else:
            return resp.get("ok")

    def list_available(self, filetype: str) -> Sequence[Mapping[str, Any]]:
        return tuple(self._call("available", filetype) or ())

    def expand(self, body: str) -> None:
        self._call("expand", body)

    def is_expandable(self) -> bool:
        return bool(self._call("expandable"))

    def expand_pending(self) -> None:
        self._call("expand_pending")
