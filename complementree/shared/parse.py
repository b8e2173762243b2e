from re import Pattern, compile
from typing import AbstractSet, Callable

from pynvim_pp.text_object import is_word

PrefixPolicy = Callable[[str], str]


def lower(text: str) -> str:
    return text.casefold()


def word_before(unifying_chars: AbstractSet[str], line_before: str) -> str:
    idx = len(line_before)
    while idx and is_word(unifying_chars, chr=line_before[idx - 1]):
        idx -= 1
    return line_before[idx:]


def prefix_pattern(pattern: str) -> Pattern:
    """
    Anchors a char class style pattern to the end of the line
    """

    return compile(f"(?:{pattern})*$")


def word_policy(unifying_chars: AbstractSet[str]) -> PrefixPolicy:
    def policy(line_before: str) -> str:
        return word_before(unifying_chars, line_before=line_before)

    return policy


def regex_policy(pattern: str) -> PrefixPolicy:
    re = prefix_pattern(pattern)

    def policy(line_before: str) -> str:
        match = re.search(line_before)
        return match.group() if match else ""

    return policy


def extend_prefix(
    policy: PrefixPolicy, anchor: int, prefix: str, line_before: str
) -> str:
    """
    Assumes only prefix chars were appended since `prefix` started at `anchor`
    """

    tail = line_before[anchor:]
    if anchor <= len(line_before) and tail.startswith(prefix):
        appended = tail[len(prefix) :]
        extension = policy(appended)
        if extension == appended:
            return prefix + appended
        else:
            return policy(line_before)
    else:
        return policy(line_before)
