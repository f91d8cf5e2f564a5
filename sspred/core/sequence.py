"""
Sequence handling utilities for SSPred.

Tools for cleaning and validating protein sequences, parsing them from
FASTA and plain-text files, encoding them as one-hot profiles, and
converting label strings to runs of the three structure classes.
"""

from __future__ import annotations

import hashlib
from io import StringIO
from pathlib import Path
from typing import Iterator, Optional, Union

import numpy as np
from Bio import SeqIO

from .exceptions import MalformedInputError, MissingResourceError
from .models import (
    AMBIGUOUS_RESIDUES,
    VALID_RESIDUES,
    Conformation,
    ProteinRecord,
    Region,
)


# Standard amino acid alphabet
STANDARD_AA = set("ACDEFGHIKLMNPQRSTVWY")

# Column order of profiles and statistical-model matrices
AA_ORDER: tuple[str, ...] = (
    "A", "R", "N", "D", "C", "Q", "E", "G", "H", "I",
    "L", "K", "M", "F", "P", "S", "T", "W", "Y", "V",
)

# DSSP 8-state to 3-state reduction
DSSP_TO_3STATE = {
    "H": "H", "G": "H", "I": "H",
    "E": "E", "B": "E",
}


class SequenceError(MalformedInputError):
    """Exception raised for sequence-related errors."""
    pass


class SequenceValidator:
    """
    Validates protein sequences before prediction.

    Empty sequences are valid (they predict to an empty string); unknown
    and ambiguous residue codes are accepted unless disabled.
    """

    def __init__(
        self,
        allow_ambiguous: bool = True,
        max_length: Optional[int] = None,
        max_nonstandard_fraction: Optional[float] = None,
    ):
        """
        Initialize validator with specific constraints.

        Args:
            allow_ambiguous: Allow ambiguous amino acid codes (B, Z, J, U, O)
            max_length: Optional maximum sequence length
            max_nonstandard_fraction: Optional cap on the fraction of
                residues outside the 20 standard amino acids
        """
        self.allow_ambiguous = allow_ambiguous
        self.max_length = max_length
        self.max_nonstandard_fraction = max_nonstandard_fraction

        self.allowed_chars = set(VALID_RESIDUES)
        if allow_ambiguous:
            self.allowed_chars |= AMBIGUOUS_RESIDUES

    def validate(self, sequence: str) -> tuple[bool, list[str]]:
        """
        Validate a sequence and return status with error messages.

        Args:
            sequence: Protein sequence to validate

        Returns:
            Tuple of (is_valid, list_of_error_messages)
        """
        errors = []
        seq = clean_sequence(sequence)

        if self.max_length is not None and len(seq) > self.max_length:
            errors.append(f"Sequence too long: {len(seq)} > {self.max_length}")

        invalid_chars = set(seq) - self.allowed_chars
        if invalid_chars:
            errors.append(f"Invalid characters: {sorted(invalid_chars)}")

        limit = self.max_nonstandard_fraction
        if limit is not None and seq:
            unknown = sum(1 for aa in seq if aa not in STANDARD_AA)
            if unknown / len(seq) > limit:
                errors.append(f"More than {limit:.0%} non-standard residues")

        return len(errors) == 0, errors


def clean_sequence(sequence: str) -> str:
    """Upper-case a sequence and drop all whitespace."""
    return "".join(sequence.split()).upper()


def sequence_hash(sequence: str) -> str:
    """
    Generate a stable hash for a sequence.

    Used for result caching. MD5 is used for speed, not security.
    """
    return hashlib.md5(clean_sequence(sequence).encode()).hexdigest()


def parse_fasta(
    source: Union[str, Path, StringIO],
    validator: Optional[SequenceValidator] = None,
) -> Iterator[ProteinRecord]:
    """
    Parse protein sequences from FASTA format.

    Args:
        source: File path, FASTA string, or StringIO object
        validator: Custom validator (uses default if None)

    Yields:
        ProteinRecord objects for each sequence

    Raises:
        MissingResourceError: If the file cannot be opened
        SequenceError: If a sequence fails validation
    """
    if validator is None:
        validator = SequenceValidator()

    if isinstance(source, str) and (source.startswith(">") or "\n>" in source):
        handle = StringIO(source)
        owned = False
    elif isinstance(source, (str, Path)):
        try:
            handle = open(source, "r")
        except OSError as e:
            raise MissingResourceError(f"Unable to read FASTA file {source}: {e}") from e
        owned = True
    else:
        handle = source
        owned = False

    try:
        for record in SeqIO.parse(handle, "fasta"):
            seq_str = str(record.seq)
            is_valid, errors = validator.validate(seq_str)
            if not is_valid:
                raise SequenceError(
                    f"Sequence '{record.id}' failed validation: {'; '.join(errors)}"
                )

            name = None
            parts = record.description.split(None, 1)
            if len(parts) > 1:
                name = parts[1]

            yield ProteinRecord(id=record.id, name=name, sequence=seq_str)
    finally:
        if owned:
            handle.close()


def read_sequence_file(path: Union[str, Path]) -> str:
    """
    Read a raw sequence from a text file.

    A file starting with ``>`` is read as FASTA and its first record is
    returned. Otherwise all whitespace is dropped and the text is
    upper-cased.

    Raises:
        MissingResourceError: If the file cannot be read
        SequenceError: If the file holds no sequence
    """
    path = Path(path)
    try:
        content = path.read_text()
    except OSError as e:
        raise MissingResourceError(f"Unable to read the file {path}: {e}") from e

    if content.lstrip().startswith(">"):
        records = list(parse_fasta(content.lstrip()))
        sequence = records[0].sequence if records else ""
    else:
        sequence = clean_sequence(content)

    if not sequence:
        raise SequenceError(f"No sequence found in {path}")
    return sequence


def sequence_to_profile(
    sequence: str,
    aa_order: tuple[str, ...] | list[str] = AA_ORDER,
) -> np.ndarray:
    """
    One-hot encode a sequence as an ``(L, 20)`` profile.

    Characters outside ``aa_order`` (unknown or ambiguous codes) give an
    all-zero row.
    """
    index = {aa: i for i, aa in enumerate(aa_order)}
    profile = np.zeros((len(sequence), len(aa_order)))
    for i, residue in enumerate(sequence):
        j = index.get(residue)
        if j is not None:
            profile[i, j] = 1.0
    return profile


def reduce_dssp(states: str) -> str:
    """
    Reduce an 8-state DSSP string to H/E/C.

    ``{H, G, I} -> H``, ``{E, B} -> E``, everything else ``C``.
    """
    return "".join(DSSP_TO_3STATE.get(s, "C") for s in states)


def find_runs(labels: str, conformation: Conformation) -> list[Region]:
    """
    Find maximal runs of one class in a label string.

    Args:
        labels: H/E/C string
        conformation: Class to collect

    Returns:
        Sorted, disjoint regions covering every position with that label
    """
    code = conformation.value
    regions = []
    start = None

    for i, label in enumerate(labels):
        if label == code and start is None:
            start = i
        elif label != code and start is not None:
            regions.append(Region(start=start, end=i))
            start = None

    if start is not None:
        regions.append(Region(start=start, end=len(labels)))

    return regions
