"""
Tests for plain output merging and the Ruby source helpers behind it.
"""

from __future__ import annotations

import pytest

from erb_to_phlex.pipeline.backends import PlainOutputBuffer
from erb_to_phlex.pipeline.backends.ruby_source import (
    RubyLiterals,
    closes_block,
    continues_block,
    escape_double_quoted,
    escape_parens,
    is_control_statement,
    leading_name,
    one_line,
    opens_block,
    quote,
)
from erb_to_phlex.pipeline.backends.ruby_writer import RubyWriter


@pytest.fixture
def emitted():
    return []


@pytest.fixture
def buffer(emitted):
    return PlainOutputBuffer(emitted.append)


class TestPlainOutputBuffer:
    def test_single_text(self, buffer, emitted):
        buffer.add_text("Hello")
        buffer.flush()
        assert emitted == ["plain %(Hello)"]

    def test_single_code(self, buffer, emitted):
        buffer.add_code(" some_local ")
        buffer.flush()
        assert emitted == ["plain some_local"]

    def test_text_and_code(self, buffer, emitted):
        buffer.add_text('Total: "')
        buffer.add_code("@order.total")
        buffer.flush()
        assert emitted == ['plain "Total: \\"#{@order.total}"']

    def test_double_quoted_literal_is_inlined(self, buffer, emitted):
        buffer.add_text("a")
        buffer.add_code('"#{b} c"')
        buffer.flush()
        assert emitted == ['plain "a#{b} c"']

    def test_percent_literal_is_inlined(self, buffer, emitted):
        buffer.add_text("a")
        buffer.add_code('%(say "hi")')
        buffer.flush()
        assert emitted == ['plain "asay \\"hi\\""']

    def test_flush_empties_the_buffer(self, buffer, emitted):
        buffer.add_text("a")
        buffer.flush()
        buffer.flush()
        assert emitted == ["plain %(a)"]
        assert not buffer

    def test_drained(self, buffer, emitted):
        with buffer.drained():
            buffer.add_text("a")
            buffer.add_code("b")
            assert emitted == []
        assert emitted == ['plain "a#{b}"']
        assert len(buffer) == 0


class TestRubyLiterals:
    @pytest.fixture
    def literals(self):
        return RubyLiterals()

    @pytest.mark.parametrize(
        "code,inlined",
        [
            ('"plain"', "plain"),
            ('"#{x}_text"', "#{x}_text"),
            ("'single \"quoted\"'", 'single \\"quoted\\"'),
            ("'back\\\\slash'", "back\\\\slash"),
            ("%Q(a \"b\")", 'a \\"b\\"'),
            ("%q(a)", "#{%q(a)}"),
            ("[1, 2].join", "#{[1, 2].join}"),
            ('"a" + "b"', '#{"a" + "b"}'),
        ],
    )
    def test_inline_in_double_quotes(self, literals, code, inlined):
        assert literals.inline_in_double_quotes(code) == inlined

    def test_invalid_code_is_not_a_literal(self, literals):
        assert not literals.is_string_literal('"unterminated')


class TestEscaping:
    def test_escape_parens(self):
        assert escape_parens("a (b) \\ #{c}") == "a \\(b\\) \\\\ \\#{c}"

    def test_quote(self):
        assert quote("px-2)") == "%(px-2\\))"

    def test_escape_double_quoted(self):
        assert escape_double_quoted('say "hi" (now)') == 'say \\"hi\\" \\(now\\)'

    def test_one_line(self):
        assert one_line("\n  total = 1\n\n  label = 2\n") == "total = 1; label = 2"


class TestBlockStructure:
    @pytest.mark.parametrize(
        "line",
        [
            "if foo",
            "unless foo?",
            "@items.each do |item|",
            "items.map { |item|",
            "form_with model: @user do |f|",
            "@greeting = capture do",
            "x = if y",
            "case kind",
        ],
    )
    def test_opens_block(self, line):
        assert opens_block(line)

    @pytest.mark.parametrize(
        "line",
        [
            "foo",
            "items.each { |item| item.save }",
            "if a then b end",
            "render Card.new",
            "x = y if z",
        ],
    )
    def test_does_not_open_block(self, line):
        assert not opens_block(line)

    def test_clauses(self):
        assert continues_block("else")
        assert continues_block("elsif x")
        assert continues_block("when 1")
        assert not continues_block("elsewhere")
        assert closes_block("end")
        assert closes_block("}")
        assert not closes_block("ending")

    def test_control_statements(self):
        assert is_control_statement("yield")
        assert is_control_statement("if x")
        assert not is_control_statement("yielded")

    def test_leading_name(self):
        assert leading_name("link_to 'a', b") == "link_to"
        assert leading_name("valid?(x)") == "valid?"
        assert leading_name("@user.name") is None


class TestRubyWriter:
    def test_blank_lines_are_collapsed(self):
        out = RubyWriter()
        out.line("a")
        out.blank()
        out.blank()
        out.line("b")
        assert out.getvalue() == "a\n\nb"

    def test_no_blank_at_block_start_or_before_end(self):
        out = RubyWriter()
        out.open_block("div do")
        out.blank()
        out.line("p")
        out.blank()
        out.close_block("end")
        assert out.getvalue() == "div do\n  p\nend"

    def test_statement_follows_block_structure(self):
        out = RubyWriter()
        out.statement("if a\nb\nelse\nc\nend")
        assert out.getvalue() == "if a\n  b\nelse\n  c\nend"

    def test_statement_never_dedents_below_floor(self):
        out = RubyWriter()
        out.open_block("div do")
        out.statement("end", floor=1)
        out.line("p")
        assert out.getvalue() == "div do\n  end\n  p"

    def test_comment(self):
        out = RubyWriter()
        out.comment("one\n two")
        assert out.getvalue() == "# one\n# two"
