from .types import Context, Position


def make_context(
    position: Position, line: str, filetype: str = "", manual: bool = False
) -> Context:
    _, col = position
    context = Context(
        manual=manual,
        position=position,
        line=line,
        line_before=line[:col],
        line_after=line[col:],
        filetype=filetype,
    )
    return context


def is_append(before: Context, after: Context) -> bool:
    """
    Whether `after` can be reached from `before` by typing forward only
    """

    (b_row, _), (a_row, _) = before.position, after.position
    return b_row == a_row and after.line_before.startswith(before.line_before)
