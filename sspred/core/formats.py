"""
Readers for profile and structure-label files.

These readers turn files on disk into the shapes the prediction engines
consume: ``(L, 20)`` numpy profiles and H/E/C label strings. Any unreadable
file raises ``MissingResourceError`` and any unparsable content raises
``MalformedInputError``; nothing is silently dropped except PSSM lines that
are not residue rows.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Union

import numpy as np

from .exceptions import MalformedInputError, MissingResourceError
from .sequence import AA_ORDER, reduce_dssp

logger = logging.getLogger(__name__)

# Header line of the DSSP residue table
DSSP_TABLE_HEADER = "  #  RESIDUE AA STRUCTURE"

# 0-based column of the secondary-structure code in classic DSSP output
DSSP_STRUCTURE_COLUMN = 16


def _read_lines(path: Path, kind: str) -> list[str]:
    try:
        with open(path, "r") as f:
            return f.read().splitlines()
    except OSError as e:
        raise MissingResourceError(f"Unable to read {kind} file {path}: {e}") from e


def parse_pssm(path: Union[str, Path]) -> np.ndarray:
    """
    Read a PSI-BLAST ASCII PSSM as an ``(L, 20)`` probability profile.

    The three header lines and six trailing footer lines are dropped. Each
    remaining line with at least 24 fields contributes the weighted
    observed percentages (fields ``[22:-2]``) divided by 100. Files of nine
    lines or fewer yield an empty profile.

    Args:
        path: Path to a ``.pssm`` file

    Returns:
        Profile with columns in ``AA_ORDER``
    """
    path = Path(path)
    lines = _read_lines(path, "PSSM")

    if len(lines) <= 9:
        return np.zeros((0, len(AA_ORDER)))

    rows = []
    for line in lines[3:-6]:
        fields = line.split()
        if len(fields) < 24:
            continue
        try:
            rows.append([float(v) / 100.0 for v in fields[22:-2]])
        except ValueError as e:
            raise MalformedInputError(f"Bad PSSM value in {path}: {e}") from e

    if not rows:
        return np.zeros((0, len(AA_ORDER)))

    widths = {len(r) for r in rows}
    if widths != {len(AA_ORDER)}:
        raise MalformedInputError(
            f"PSSM {path} has {sorted(widths)} probability columns, "
            f"expected {len(AA_ORDER)}"
        )

    return np.array(rows, dtype=float)


def parse_label_file(path: Union[str, Path]) -> str:
    """
    Read a two-line structure-label file (header, then labels).

    Returns:
        The stripped, upper-cased second line
    """
    path = Path(path)
    lines = _read_lines(path, "label")
    if not lines:
        raise MalformedInputError(f"Empty label file: {path}")
    if len(lines) < 2:
        return ""
    return lines[1].strip().upper()


def parse_dssp(path: Union[str, Path]) -> str:
    """
    Read a DSSP file and return its 3-state H/E/C string.

    Every line after the residue-table header that is long enough to hold
    the structure column contributes one label.
    """
    path = Path(path)
    lines = _read_lines(path, "DSSP")

    states = []
    in_table = False
    for line in lines:
        if not in_table:
            if line.startswith(DSSP_TABLE_HEADER):
                in_table = True
            continue
        if len(line) <= DSSP_STRUCTURE_COLUMN:
            continue
        states.append(line[DSSP_STRUCTURE_COLUMN])

    return reduce_dssp("".join(states))


def read_labels(path: Union[str, Path]) -> str:
    """
    Read training labels from either a full DSSP file or a two-line label file.

    The format is detected from the DSSP residue-table header.
    """
    path = Path(path)
    lines = _read_lines(path, "label")
    if any(line.startswith(DSSP_TABLE_HEADER) for line in lines):
        return parse_dssp(path)
    return parse_label_file(path)


def read_id_list(path: Union[str, Path]) -> list[str]:
    """Read example identifiers, one per line, ignoring blank lines."""
    path = Path(path)
    return [line.strip() for line in _read_lines(path, "id list") if line.strip()]


def iter_training_examples(
    ids: list[str],
    pssm_dir: Union[str, Path],
    label_dir: Union[str, Path],
) -> Iterator[tuple[str, np.ndarray, str]]:
    """
    Load ``(id, profile, labels)`` for each identifier.

    Profiles are read from ``<pssm_dir>/<id>.pssm`` and labels from
    ``<label_dir>/<id>.dssp``. The first unreadable or malformed file
    aborts iteration.
    """
    pssm_dir = Path(pssm_dir)
    label_dir = Path(label_dir)

    for example_id in ids:
        profile = parse_pssm(pssm_dir / f"{example_id}.pssm")
        labels = read_labels(label_dir / f"{example_id}.dssp")
        logger.debug(f"Loaded {example_id}: {len(profile)} positions")
        yield example_id, profile, labels
