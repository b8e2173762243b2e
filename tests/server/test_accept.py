from unittest import TestCase

from complementree.server.accept import (
    AcceptanceContext,
    Registry,
    Resolved,
    Unresolved,
    apply_text_edits,
    reconcile,
)
from complementree.server.rt_types import AcceptanceError
from complementree.shared.types import Acceptance, AcceptState, Candidate, TextEdit

from ..fakes import Buffer

_IMPORT = TextEdit(begin=(0, 0), end=(0, 0), new_text="import y\n")


def _context(buffer: Buffer, word: str = "foobar") -> AcceptanceContext:
    row, col = buffer.get_cursor()
    return AcceptanceContext(
        candidate=Candidate(word=word, source="test"),
        position=(row, col),
        line=buffer.get_line(row),
    )


class ApplyTextEdits(TestCase):
    def test_1(self) -> None:
        buffer = Buffer(["abc def"], cursor=(0, 0))
        edits = (
            TextEdit(begin=(0, 0), end=(0, 3), new_text="x"),
            TextEdit(begin=(0, 4), end=(0, 7), new_text="yy"),
        )
        apply_text_edits(buffer, edits=edits)
        self.assertEqual(buffer.lines, ["x yy"])

    def test_2(self) -> None:
        buffer = Buffer(["a", "b"], cursor=(0, 0))
        apply_text_edits(buffer, edits=(_IMPORT,))
        self.assertEqual(buffer.lines, ["import y", "a", "b"])


class Reconcile(TestCase):
    def test_1(self) -> None:
        buffer = Buffer(["import x", "  foobar"], cursor=(1, 8))
        expanded = []
        acceptance = reconcile(
            buffer,
            context=_context(buffer),
            edits=(_IMPORT,),
            resolve=None,
            expand=expanded.append,
        )
        self.assertEqual(buffer.lines, ["import y", "import x", "  "])
        self.assertEqual(buffer.mutations, 2)
        self.assertEqual(expanded, [""])
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
        acceptance = reconcile(
            buffer,
            context=_context(buffer),
            edits=(_IMPORT,),
            resolve=None,
            expand=None,
        )
        self.assertEqual(buffer.lines, ["import y", "import x", "  foobar"])
        self.assertEqual(
            acceptance.trace, (AcceptState.selected, AcceptState.edits_applied)
        )

    def test_3(self) -> None:
        buffer = Buffer(["  foo(x)"], cursor=(0, 5))
        expanded = []
        acceptance = reconcile(
            buffer,
            context=_context(buffer, word="foo"),
            edits=(),
            resolve=None,
            expand=expanded.append,
        )
        self.assertEqual(buffer.lines, ["  "])
        self.assertEqual(buffer.mutations, 1)
        self.assertEqual(expanded, ["(x)"])
        self.assertEqual(
            acceptance.trace,
            (
                AcceptState.selected,
                AcceptState.tidy_pending,
                AcceptState.snippet_expanded,
            ),
        )

    def test_4(self) -> None:
        buffer = Buffer(["import x", "  foobar"], cursor=(1, 8))
        calls = []

        def resolve() -> Resolved:
            calls.append(None)
            return Resolved(edits=(_IMPORT,))

        reconcile(
            buffer, context=_context(buffer), edits=None, resolve=resolve, expand=None
        )
        self.assertEqual(len(calls), 1)
        self.assertEqual(buffer.lines, ["import y", "import x", "  foobar"])

    def test_5(self) -> None:
        buffer = Buffer(["import x", "  foobar"], cursor=(1, 8))
        expanded = []

        with self.assertRaises(AcceptanceError):
            reconcile(
                buffer,
                context=_context(buffer),
                edits=None,
                resolve=lambda: Unresolved(reason="timeout"),
                expand=expanded.append,
            )
        self.assertEqual(buffer.mutations, 0)
        self.assertEqual(expanded, [])

    def test_6(self) -> None:
        buffer = Buffer(["import x", "  foobar"], cursor=(1, 8))
        bad = TextEdit(begin=(9, 0), end=(9, 0), new_text="boom")

        with self.assertRaises(AcceptanceError):
            reconcile(
                buffer,
                context=_context(buffer),
                edits=(bad,),
                resolve=None,
                expand=lambda _: None,
            )
        self.assertEqual(buffer.lines, ["import x", "  foobar"])

    def test_7(self) -> None:
        buffer = Buffer(["ab"], cursor=(0, 2))
        resolve_calls = []

        def resolve() -> Resolved:
            resolve_calls.append(None)
            return Resolved(edits=())

        reconcile(
            buffer,
            context=_context(buffer),
            edits=(TextEdit(begin=(0, 0), end=(0, 0), new_text="x"),),
            resolve=resolve,
            expand=None,
        )
        self.assertEqual(resolve_calls, [])
        self.assertEqual(buffer.lines, ["xab"])

    def test_8(self) -> None:
        buffer = Buffer(["import x", "  foobar"], cursor=(1, 8))
        expanded = []
        edits = (
            TextEdit(begin=(1, 0), end=(1, 0), new_text="z\n"),
            TextEdit(begin=(0, 0), end=(9, 0), new_text=""),
        )

        with self.assertRaises(AcceptanceError):
            reconcile(
                buffer,
                context=_context(buffer),
                edits=edits,
                resolve=None,
                expand=expanded.append,
            )
        self.assertEqual(buffer.lines, ["import x", "  foobar"])
        self.assertEqual(buffer.mutations, 0)
        self.assertEqual(expanded, [])

    def test_9(self) -> None:
        buffer = Buffer(["  foobar"], cursor=(0, 8))
        edit = TextEdit(begin=(0, 5), end=(0, 8), new_text="baz")

        with self.assertRaises(AcceptanceError):
            reconcile(
                buffer,
                context=_context(buffer),
                edits=(edit,),
                resolve=None,
                expand=lambda _: None,
            )
        self.assertEqual(buffer.mutations, 0)

    def test_10(self) -> None:
        buffer = Buffer(["  foobar"], cursor=(0, 8))
        expanded, resolve_calls = [], []

        def resolve() -> Resolved:
            resolve_calls.append(None)
            return Resolved(edits=())

        acceptance = reconcile(
            buffer,
            context=_context(buffer),
            edits=(),
            resolve=resolve,
            expand=expanded.append,
        )
        self.assertEqual(resolve_calls, [])
        self.assertEqual(expanded, [""])
        self.assertEqual(buffer.lines, ["  "])
        self.assertEqual(
            acceptance.trace,
            (
                AcceptState.selected,
                AcceptState.tidy_pending,
                AcceptState.snippet_expanded,
            ),
        )


class _Acceptor:
    def __init__(self) -> None:
        self.contexts = []

    def accept(self, candidate: Candidate, context: AcceptanceContext) -> Acceptance:
        self.contexts.append(context)
        return Acceptance(source=candidate.source, trace=(AcceptState.edits_applied,))


class Dispatch(TestCase):
    def test_1(self) -> None:
        buffer = Buffer(["foo"], cursor=(0, 3))
        registry = Registry(buffer)
        acceptance = registry.accept(Candidate(word="foo", source="nothing"))
        self.assertEqual(acceptance, Acceptance(source="nothing"))
        self.assertEqual(buffer.mutations, 0)

    def test_2(self) -> None:
        buffer = Buffer(["a", "  foo bar"], cursor=(1, 5))
        registry, acceptor = Registry(buffer), _Acceptor()
        registry.register("test", acceptor)
        self.assertIn("test", registry)

        acceptance = registry.accept(Candidate(word="foo", source="test"))
        self.assertEqual(acceptance.trace, (AcceptState.edits_applied,))
        (context,) = acceptor.contexts
        self.assertEqual(context.position, (1, 5))
        self.assertEqual(context.suffix, " bar")
