"""
Tests for line-oriented input file handling.
"""

import io
import tempfile
from functools import partial
from pathlib import Path

import pytest

from gwinspiral.infile import write_inopt, parse_inopt_line, write_infile, read_infile
from gwinspiral.inspiral import (
    InspiralState,
    InvalidOptionError,
    write_options_gwinspiral,
    read_options_gwinspiral
)


class TestLineFormat:
    """Tests for writing and parsing single lines."""

    def test_write_real(self):
        stream = io.StringIO()
        write_inopt(stream, 'stop_ratio', 0.005, 'merger ratio')
        line = stream.getvalue()
        assert line.endswith("! merger ratio\n")
        assert parse_inopt_line(line) == ('stop_ratio', '0.005')

    def test_write_int_and_bool(self):
        stream = io.StringIO()
        write_inopt(stream, 'nout', 10, 'outputs')
        write_inopt(stream, 'iverbose', True, 'verbose')
        lines = stream.getvalue().splitlines()
        assert parse_inopt_line(lines[0]) == ('nout', '10')
        assert parse_inopt_line(lines[1]) == ('iverbose', 'T')

    @pytest.mark.parametrize("line", ["", "   \n", "# a comment", "! also a comment", "no equals sign"])
    def test_ignored_lines(self, line):
        assert parse_inopt_line(line) is None

    def test_comment_with_equals(self):
        """An '=' inside the trailing comment is not part of the value."""
        assert parse_inopt_line("tmax = 10.  ! end time, t = tmax") == ('tmax', '10.')


class TestInfile:
    """Tests for whole input files."""

    def test_round_trip(self):
        """Writing then reading restores stop_ratio."""
        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = Path(tmpdir) / "run.in"
            write_infile(str(filepath), [partial(write_options_gwinspiral, InspiralState(stop_ratio=0.0125))],
                         title="runtime options")

            state = InspiralState()
            gotall = read_infile(str(filepath), [partial(read_options_gwinspiral, state)])
            assert gotall
            assert state.stop_ratio == 0.0125

    def test_missing_option(self):
        """A file without stop_ratio reports that not everything was read."""
        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = Path(tmpdir) / "run.in"
            filepath.write_text("# empty\n")

            state = InspiralState()
            gotall = read_infile(str(filepath), [partial(read_options_gwinspiral, state)])
            assert not gotall
            assert state.stop_ratio == 0.005

    def test_unknown_option_warns(self):
        """Options no reader claims are reported and skipped."""
        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = Path(tmpdir) / "run.in"
            filepath.write_text("tmax = 10.0\nstop_ratio = 0.2\n")

            state = InspiralState()
            with pytest.warns(UserWarning, match="tmax"):
                gotall = read_infile(str(filepath), [partial(read_options_gwinspiral, state)])
            assert gotall
            assert state.stop_ratio == 0.2

    def test_second_reader_gets_unmatched(self):
        """Options are handed on until a reader matches."""
        seen = {}

        def read_tmax(name, valstring):
            if name == 'tmax':
                seen['tmax'] = float(valstring)
                return True, True
            return False, 'tmax' in seen

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = Path(tmpdir) / "run.in"
            filepath.write_text("stop_ratio = 0.3\ntmax = 7.5\n")

            state = InspiralState()
            gotall = read_infile(str(filepath), [partial(read_options_gwinspiral, state), read_tmax])
            assert gotall
            assert state.stop_ratio == 0.3
            assert seen['tmax'] == 7.5

    def test_invalid_value_propagates(self):
        """A bad stop_ratio stops the read."""
        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = Path(tmpdir) / "run.in"
            filepath.write_text("stop_ratio = 1.5   ! too big\n")

            state = InspiralState()
            with pytest.raises(InvalidOptionError):
                read_infile(str(filepath), [partial(read_options_gwinspiral, state)])
            assert state.stop_ratio == 0.005

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            read_infile('nonexistent.in', [])

    def test_example_infile(self):
        """The shipped example input file is valid."""
        filepath = Path(__file__).parent.parent / 'configs' / 'binary_ns.in'
        state = InspiralState()
        assert read_infile(str(filepath), [partial(read_options_gwinspiral, state)])
        assert state.stop_ratio == 0.005
