"""
Line-oriented input (options) file handling.

Each option occupies one line:

            stop_ratio =          0.005    ! ratio of particles crossing CoM to indicate a merger

Blank lines and lines starting with '#' or '!' are ignored. Modules take part
through a pair of hooks: a writer that takes an open stream, and a reader
called as reader(name, valstring) -> (imatch, igotall).
"""

import warnings
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple


def write_inopt(stream, name: str, value, descript: str) -> None:
    """
    Write one option line.

    Reals are written with repr so that reading back gives the same value.
    """
    if isinstance(value, bool):
        valstring = 'T' if value else 'F'
    elif isinstance(value, float):
        valstring = repr(value)
    else:
        valstring = str(value)
    stream.write(f"{name:>20} = {valstring:>14}    ! {descript}\n")


def parse_inopt_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Split an input file line into (name, valstring).

    Returns:
        None for blank lines, comment lines and lines without '='
    """
    stripped = line.strip()
    if not stripped or stripped[0] in '#!':
        return None

    # Drop trailing comment
    stripped = stripped.split('!', 1)[0]
    if '=' not in stripped:
        return None

    name, valstring = stripped.split('=', 1)
    return name.strip(), valstring.strip()


def write_infile(filepath: str, writers: Iterable[Callable], title: str = "") -> None:
    """
    Write an input file from a sequence of option writers.

    Args:
        filepath: Path to input file
        writers: Callables taking an open text stream
        title: Optional comment written at the top
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, 'w') as f:
        if title:
            f.write(f"# {title}\n")
        for writer in writers:
            writer(f)


def read_infile(filepath: str, readers: Iterable[Callable]) -> bool:
    """
    Read an input file, passing each option to the readers until one matches.

    Args:
        filepath: Path to input file
        readers: Callables reader(name, valstring) -> (imatch, igotall)

    Returns:
        True if every reader reported it got all of its options

    Raises:
        FileNotFoundError: If the input file doesn't exist
        Exceptions raised by readers (e.g. invalid values) propagate
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Input file not found: {filepath}")

    readers = list(readers)
    gotall = {reader: False for reader in readers}

    with open(filepath, 'r') as f:
        for lineno, line in enumerate(f, start=1):
            parsed = parse_inopt_line(line)
            if parsed is None:
                continue
            name, valstring = parsed

            matched = False
            for reader in readers:
                imatch, igotall = reader(name, valstring)
                gotall[reader] = igotall
                if imatch:
                    matched = True
                    break

            if not matched:
                warnings.warn(f"{filepath.name}:{lineno}: unknown option '{name}' ignored")

    return all(gotall.values())
