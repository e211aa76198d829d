"""Tests for program parsing and variant rendering."""

from __future__ import annotations

import pytest

from pytest_mender.errors import ParseError
from pytest_mender.hotspots import detect
from pytest_mender.search.assignment import Assignment
from pytest_mender.search.builder import build
from pytest_mender.source import parse_program, read_program, render_variant


def render(source, choices):
    program = parse_program(source)
    detection = detect(program.tree)
    return render_variant(program, detection, build(detection, Assignment(choices)))


@pytest.mark.small
class TestParseProgram:
    """Tests for parse_program."""

    def test_parses_valid_source(self):
        program = parse_program('x = 1\n', 'module.py')

        assert program.source == 'x = 1\n'
        assert program.filename == 'module.py'
        assert program.module_name == 'module'

    def test_syntax_error_raises_parse_error(self):
        """Invalid source is reported with its file and line."""
        with pytest.raises(ParseError, match=r'broken\.py:2') as excinfo:
            parse_program('x = 1\ndef (:\n', 'broken.py')

        assert excinfo.value.filename == 'broken.py'
        assert excinfo.value.line_number == 2

    def test_read_program_reads_file(self, tmp_path):
        path = tmp_path / 'people.py'
        path.write_text('ADULT = 18\n', encoding='utf-8')

        program = read_program(path)

        assert program.source == 'ADULT = 18\n'
        assert program.module_name == 'people'


@pytest.mark.small
class TestRenderVariant:
    """Tests for splicing variants into the original text."""

    def test_identity_assignment_reproduces_source(self):
        source = 'def f(x):\n    # check\n    return x  >  5   # odd spacing\n'

        assert render(source, {0: 0}) == source

    def test_only_changed_expression_is_rewritten(self):
        source = 'def f(x):\n    # check\n    return x  >  5   # odd spacing\n'

        assert render(source, {0: 3}) == 'def f(x):\n    # check\n    return x <= 5   # odd spacing\n'

    def test_several_changes_on_one_line(self):
        assert render('ok = a < 1 and b == 2\n', {0: 0, 1: 1}) == 'ok = a > 1 and b != 2\n'

    def test_non_ascii_text_before_the_change_is_kept(self):
        source = "label = 'größer'; ok = n >= 3\n"

        assert render(source, {0: 2}) == "label = 'größer'; ok = n < 3\n"

    def test_changed_node_type_is_parenthesized(self):
        """A negated call is wrapped so it binds as one operand."""
        assert render('ok = is_ready(x) + 1\n', {0: 1}) == 'ok = (not is_ready(x)) + 1\n'

    def test_multiline_expression_is_replaced_whole(self):
        source = 'ok = all(\n    v == 1\n    for v in vs\n)\n'

        rendered = render(source, {0: 0, 1: 1})

        assert rendered == 'ok = (not any((v == 1 for v in vs)))\n'
