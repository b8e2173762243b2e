from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional, Sequence

from pynvim import Nvim

from ..shared.runtime import CollaboratorError
from ..shared.types import Position

_LUA = Path(__file__).resolve(strict=True).with_name("lsp.lua").read_text("UTF-8")


def _unwrap(method: str, resp: Any) -> Any:
    if not isinstance(resp, Mapping):
        raise CollaboratorError(f"LSP {method} -- unexpected reply {resp!r}")
    elif resp.get("timeout"):
        raise TimeoutError(f"LSP {method} -- {resp.get('err')}")
    elif "err" in resp:
        raise CollaboratorError(f"LSP {method} -- {resp['err']}")
    else:
        return resp.get("ok")


class NvimLSP:
    def __init__(self, nvim: Nvim) -> None:
        self._nvim = nvim

    def _call(self, method: str, *args: Any) -> Any:
        return self._nvim.api.exec_lua(_LUA, (method, args))

    def request_completion(
        self, position: Position, timeout: float
    ) -> Mapping[int, Any]:
        row, col = position
        resp = self._call("completion", row, col, int(timeout * 1000))
        acc: MutableMapping[int, Any] = {}
        for client, result in _unwrap("completion", resp) or ():
            acc[client] = result
        return acc

    def resolve_capable(self, client_id: int) -> Optional[bool]:
        return self._call("resolve_capable", client_id)

    def resolve(self, client_id: int, item: Mapping[str, Any], timeout: float) -> Any:
        resp = self._call("resolve", client_id, item, int(timeout * 1000))
        return _unwrap("resolve", resp)

    def root_dirs(self) -> Sequence[str]:
        return tuple(self._call("root_dirs") or ())
