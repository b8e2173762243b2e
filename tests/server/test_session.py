from typing import Any, Mapping, Optional
from unittest import TestCase

from complementree.server.rt_types import Stack
from complementree.server.session import Session
from complementree.server.settings import load_settings
from complementree.shared.runtime import CollaboratorError
from complementree.shared.types import AcceptState, Candidate

from ..fakes import LSP, Buffer, Display, Filesystem, Snippets

_IMPORT_Y = {
    "range": {
        "start": {"line": 0, "character": 0},
        "end": {"line": 0, "character": 0},
    },
    "newText": "import y\n",
}


def _session(
    buffer: Buffer,
    lsp: LSP,
    snippets: Optional[Snippets] = None,
    fs: Optional[Filesystem] = None,
    user_config: Optional[Mapping[str, Any]] = None,
) -> Session:
    stack = Stack(
        settings=load_settings(user_config),
        buffer=buffer,
        display=Display(),
        lsp=lsp,
        snippets=snippets or Snippets(),
        fs=fs or Filesystem(),
    )
    return Session(stack)


def _display(session: Session) -> Display:
    display = session._stack.display
    assert isinstance(display, Display)
    return display


def _lsp_item(item: Mapping[str, Any]) -> Mapping[str, Any]:
    candidate = Candidate(
        word=item["label"],
        source="LSP",
        user_data={"client": 1, "item": item, "sort_text": None},
    )
    return candidate.to_item()


class Trigger(TestCase):
    def test_1(self) -> None:
        buffer = Buffer(["  fo"], cursor=(0, 4))
        lsp = LSP({1: [{"label": "fox"}, {"label": "foobar"}, {"label": "foo"}]})
        session = _session(buffer, lsp=lsp)
        display = _display(session)

        self.assertTrue(session.trigger())
        col, _ = display.completed[-1]
        self.assertEqual(col, 2)
        self.assertEqual(display.words, ("foo", "foobar", "fox"))

        buffer.lines, buffer.cursor = ["  fox"], (0, 5)
        self.assertTrue(session.trigger())
        self.assertEqual(display.words, ("fox",))
        self.assertEqual(lsp.requests, 1)

        buffer.lines, buffer.cursor = ["  fo"], (0, 4)
        self.assertTrue(session.trigger())
        self.assertEqual(display.words, ("foo", "foobar", "fox"))
        self.assertEqual(lsp.requests, 2)

    def test_2(self) -> None:
        buffer = Buffer(["  fo"], cursor=(0, 4))
        lsp = LSP({1: {"isIncomplete": False, "items": [{"label": "foo"}]}})
        session = _session(buffer, lsp=lsp)

        session.trigger()
        session.trigger(manual=True)
        self.assertEqual(lsp.requests, 2)

    def test_3(self) -> None:
        buffer = Buffer(["  fo"], cursor=(0, 4))
        lsp = LSP({1: [{"label": "foo"}]})
        session = _session(buffer, lsp=lsp, user_config={"cache": {"enabled": False}})

        session.trigger()
        buffer.lines, buffer.cursor = ["  foo"], (0, 5)
        session.trigger()
        self.assertEqual(lsp.requests, 2)

    def test_4(self) -> None:
        buffer = Buffer(["  fo"], cursor=(0, 4))
        lsp = LSP({1: "garbage"})
        session = _session(buffer, lsp=lsp)

        with self.assertRaises(CollaboratorError):
            session.trigger()
        self.assertNotIn("LSP", session.cache)

    def test_5(self) -> None:
        buffer = Buffer(["x ./sr"], cursor=(0, 6))
        fs = Filesystem(paths=("./src/a.py", "./doc/b.md"))
        session = _session(buffer, lsp=LSP(), fs=fs)
        display = _display(session)

        self.assertTrue(session.trigger())
        self.assertEqual(display.words, ("./src/a.py",))
        col, _ = display.completed[-1]
        self.assertEqual(col, 2)

    def test_6(self) -> None:
        buffer = Buffer(["x"], cursor=(0, 1))
        fs = Filesystem(paths=("./x.py",))
        session = _session(buffer, lsp=LSP(), fs=fs)

        self.assertFalse(session.trigger())
        self.assertEqual(fs.roots, [])
        self.assertEqual(_display(session).completed, [])

    def test_7(self) -> None:
        buffer = Buffer(["  fo"], cursor=(0, 4))
        snippets = Snippets(available=({"trigger": "for", "name": "for loop"},))
        session = _session(buffer, lsp=LSP({1: [{"label": "foo"}]}), snippets=snippets)
        display = _display(session)

        self.assertTrue(session.trigger())
        self.assertEqual(display.words, ("foo", "for"))


class CompleteDone(TestCase):
    def test_1(self) -> None:
        buffer = Buffer(["import x", "  foobar"], cursor=(1, 8))
        snippets = Snippets()
        session = _session(buffer, lsp=LSP(), snippets=snippets)
        item = {
            "label": "foobar",
            "insertTextFormat": 2,
            "insertText": "foobar($1)",
            "additionalTextEdits": [_IMPORT_Y],
        }

        acceptance = session.complete_done(_lsp_item(item))
        assert acceptance
        self.assertEqual(buffer.lines, ["import y", "import x", "  "])
        self.assertEqual(buffer.mutations, 2)
        self.assertEqual(snippets.expanded, ["foobar($1)"])
        self.assertEqual(
            acceptance.trace,
            (
                AcceptState.selected,
                AcceptState.tidy_pending,
                AcceptState.edits_applied,
                AcceptState.snippet_expanded,
            ),
        )

    def test_2(self) -> None:
        buffer = Buffer(["import x", "  foobar"], cursor=(1, 8))

        def resolved() -> Any:
            raise TimeoutError()

        lsp = LSP(resolve_capable=True, resolved=resolved)
        session = _session(buffer, lsp=lsp)
        item = {"label": "foobar", "insertTextFormat": 2, "insertText": "foobar($1)"}

        self.assertIsNone(session.complete_done(_lsp_item(item)))
        self.assertEqual(buffer.mutations, 0)
        self.assertEqual(lsp.resolves, 1)
        ((_, error),) = _display(session).messages
        self.assertTrue(error)

    def test_3(self) -> None:
        buffer = Buffer(["import x", "  foobar"], cursor=(1, 8))
        lsp = LSP(
            resolve_capable=True,
            resolved=lambda: {"additionalTextEdits": [_IMPORT_Y]},
        )
        session = _session(buffer, lsp=lsp)

        acceptance = session.complete_done(_lsp_item({"label": "foobar"}))
        assert acceptance
        self.assertEqual(buffer.lines, ["import y", "import x", "  foobar"])
        self.assertEqual(
            acceptance.trace, (AcceptState.selected, AcceptState.edits_applied)
        )

    def test_4(self) -> None:
        buffer = Buffer(["  foobar"], cursor=(0, 8))
        lsp = LSP(resolve_capable=None)
        session = _session(buffer, lsp=lsp)

        acceptance = session.complete_done(_lsp_item({"label": "foobar"}))
        assert acceptance
        self.assertEqual(acceptance.trace, (AcceptState.selected,))
        self.assertEqual((buffer.mutations, lsp.resolves), (0, 0))

    def test_5(self) -> None:
        buffer = Buffer(["  fo"], cursor=(0, 4))
        session = _session(buffer, lsp=LSP())
        self.assertIsNone(session.complete_done({}))
        self.assertIsNone(session.complete_done({"word": ""}))

    def test_6(self) -> None:
        buffer = Buffer(["  for"], cursor=(0, 5))
        snippets = Snippets(expandable=True)
        session = _session(buffer, lsp=LSP(), snippets=snippets)
        item = Candidate(word="for", source="SNIP").to_item()

        acceptance = session.complete_done(item)
        assert acceptance
        self.assertEqual(snippets.pending, 1)
        self.assertEqual(
            acceptance.trace, (AcceptState.selected, AcceptState.snippet_expanded)
        )

    def test_7(self) -> None:
        buffer = Buffer(["  fo"], cursor=(0, 4))
        lsp = LSP({1: [{"label": "foo"}]})
        session = _session(buffer, lsp=lsp)

        session.trigger()
        self.assertIn("LSP", session.cache)
        session.complete_done(Candidate(word="foo", source="LSP").to_item())
        self.assertNotIn("LSP", session.cache)

    def test_8(self) -> None:
        buffer = Buffer(["  foobar"], cursor=(0, 8))
        snippets = Snippets()

        def resolved() -> Any:
            raise TimeoutError()

        lsp = LSP(resolve_capable=True, resolved=resolved)
        session = _session(buffer, lsp=lsp, snippets=snippets)
        item = {
            "label": "foobar",
            "insertTextFormat": 2,
            "insertText": "foobar($1)",
            "additionalTextEdits": [],
        }

        acceptance = session.complete_done(_lsp_item(item))
        assert acceptance
        self.assertEqual(lsp.resolves, 0)
        self.assertEqual(snippets.expanded, ["foobar($1)"])
        self.assertEqual(buffer.lines, ["  "])
        self.assertEqual(_display(session).messages, [])
