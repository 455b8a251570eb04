from typing import Iterator, Optional

from more_itertools import peekable


def non_empty_lines(text: str) -> Iterator[str]:
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line:
            yield line


class LineScanner:
    """Forward-only cursor over the non-blank lines of a document, stripped
    of their surrounding whitespace. The current line can be looked at as
    many times as needed before moving on to the next one"""

    def __init__(self, text: str) -> None:
        self._lines = peekable(non_empty_lines(text))

    def current(self) -> Optional[str]:
        """The line under the cursor, None once the input is exhausted"""
        return self._lines.peek(None)

    def advance(self) -> Optional[str]:
        """Consume the current line and return the next one"""
        next(self._lines, None)
        return self.current()
