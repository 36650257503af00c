"""
Indented line output for generated Ruby.
"""

from __future__ import annotations

from .ruby_source import INDENT, closes_block, continues_block, opens_block


class RubyWriter:
    """
    Collects generated lines at the current indentation level.

    Blank lines are requested rather than written: a pending blank line is
    dropped at the start of a block, before a clause such as ``end`` or
    ``else``, and when another blank line is already pending.
    """

    def __init__(self):
        self.lines: list[str] = []
        self.level = 0
        self._blank_pending = False
        self._at_block_start = True

    def line(self, text: str) -> None:
        if self._blank_pending and not self._at_block_start and not (closes_block(text) or continues_block(text)):
            self.lines.append("")
        self._blank_pending = False
        self._at_block_start = False
        self.lines.append(f"{INDENT * self.level}{text}" if text else "")

    def blank(self) -> None:
        self._blank_pending = True

    def indent(self) -> None:
        self.level += 1
        self._at_block_start = True

    def dedent(self, floor: int = 0) -> None:
        self.level = max(floor, self.level - 1)

    def open_block(self, text: str) -> None:
        self.line(text)
        self.indent()

    def close_block(self, text: str = "end", floor: int = 0) -> None:
        self.dedent(floor)
        self.line(text)

    def statement(self, code: str, floor: int = 0) -> None:
        """
        Write embedded Ruby as it is, following its block structure.

        Every line is indented on its own: closers dedent (never below floor),
        clauses such as ``else`` dedent then indent, openers indent.
        """
        for raw_line in code.splitlines() or [""]:
            text = raw_line.strip()
            if not text:
                continue
            if closes_block(text):
                self.dedent(floor)
                self.line(text)
                if opens_block(text):
                    self.indent()
            elif continues_block(text):
                self.dedent(floor)
                self.line(text)
                self.indent()
            else:
                self.line(text)
                if opens_block(text):
                    self.indent()

    def comment(self, text: str) -> None:
        for raw_line in text.splitlines() or [""]:
            self.line(f"# {raw_line.strip()}".rstrip())

    def getvalue(self) -> str:
        return "\n".join(self.lines).strip("\n")
