"""
Tests for sequence parsing, validation, encoding and label runs.
"""

from io import StringIO

import numpy as np
import pytest

from sspred.core.exceptions import MalformedInputError, MissingResourceError
from sspred.core.models import Conformation, Region
from sspred.core.sequence import (
    AA_ORDER,
    SequenceError,
    SequenceValidator,
    clean_sequence,
    find_runs,
    parse_fasta,
    read_sequence_file,
    reduce_dssp,
    sequence_hash,
    sequence_to_profile,
)


FASTA_TWO = """>sp|P02185|MYG_PHYMC Myoglobin
VLSEGEWQLVLHVWAKVEAD
VAGHGQDILI
>ubq Ubiquitin
MQIFVKTLTGKTITLEVEPS
"""


class TestSequenceValidator:
    """Tests for sequence validation."""

    def test_valid_sequence(self):
        is_valid, errors = SequenceValidator().validate("MVLSEGEWQL")
        assert is_valid
        assert errors == []

    def test_empty_sequence_valid(self):
        assert SequenceValidator().validate("")[0]

    def test_invalid_characters(self):
        is_valid, errors = SequenceValidator().validate("MVL*QL")
        assert not is_valid
        assert "Invalid characters" in errors[0]

    def test_ambiguous_codes_can_be_disabled(self):
        assert SequenceValidator().validate("MBZL")[0]
        assert not SequenceValidator(allow_ambiguous=False).validate("MBZL")[0]

    def test_max_length(self):
        is_valid, errors = SequenceValidator(max_length=5).validate("MVLSEG")
        assert not is_valid
        assert "too long" in errors[0]

    def test_nonstandard_fraction_is_opt_in(self):
        assert SequenceValidator().validate("XXXXA")[0]
        is_valid, errors = SequenceValidator(max_nonstandard_fraction=0.1).validate("XXXXA")
        assert not is_valid
        assert "non-standard" in errors[0]


class TestSequenceUtilities:

    def test_clean_sequence(self):
        assert clean_sequence(" mv l\ts\n") == "MVLS"

    def test_hash_ignores_case_and_whitespace(self):
        assert sequence_hash("mvl s") == sequence_hash("MVLS")
        assert sequence_hash("MVLS") != sequence_hash("MVLT")

    def test_reduce_dssp(self):
        assert reduce_dssp("HGIEBTS ") == "HHHEECCC"

    def test_reduce_dssp_empty(self):
        assert reduce_dssp("") == ""


class TestParseFasta:
    """Tests for FASTA parsing."""

    def test_parse_string(self):
        records = list(parse_fasta(FASTA_TWO))
        assert [r.id for r in records] == ["sp|P02185|MYG_PHYMC", "ubq"]
        assert records[0].sequence == "VLSEGEWQLVLHVWAKVEADVAGHGQDILI"
        assert records[0].name == "Myoglobin"

    def test_parse_file(self, tmp_path):
        path = tmp_path / "seqs.fasta"
        path.write_text(FASTA_TWO)
        assert len(list(parse_fasta(path))) == 2

    def test_parse_stringio(self):
        assert len(list(parse_fasta(StringIO(FASTA_TWO)))) == 2

    def test_invalid_sequence_raises(self):
        with pytest.raises(SequenceError, match="failed validation"):
            list(parse_fasta(">bad\nMVL*QL\n"))

    def test_sequence_error_is_malformed_input(self):
        assert issubclass(SequenceError, MalformedInputError)

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingResourceError):
            list(parse_fasta(tmp_path / "missing.fasta"))


class TestReadSequenceFile:

    def test_plain_text(self, tmp_path):
        path = tmp_path / "seq.txt"
        path.write_text("mvlseg\newql\n")
        assert read_sequence_file(path) == "MVLSEGEWQL"

    def test_fasta_first_record(self, tmp_path):
        path = tmp_path / "seq.fasta"
        path.write_text(FASTA_TWO)
        assert read_sequence_file(path).startswith("VLSEGEWQ")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("\n  \n")
        with pytest.raises(SequenceError, match="No sequence"):
            read_sequence_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingResourceError):
            read_sequence_file(tmp_path / "nope.txt")


class TestSequenceToProfile:
    """Tests for one-hot profile encoding."""

    def test_shape_and_rows(self):
        profile = sequence_to_profile("ARV")
        assert profile.shape == (3, 20)
        assert profile.sum(axis=1).tolist() == [1.0, 1.0, 1.0]
        assert profile[0, AA_ORDER.index("A")] == 1.0
        assert profile[2, AA_ORDER.index("V")] == 1.0

    def test_unknown_residue_is_zero_row(self):
        profile = sequence_to_profile("AXB")
        assert profile[1].sum() == 0.0
        assert profile[2].sum() == 0.0

    def test_empty(self):
        assert sequence_to_profile("").shape == (0, 20)

    def test_custom_column_order(self):
        order = list(reversed(AA_ORDER))
        profile = sequence_to_profile("V", order)
        assert np.argmax(profile[0]) == 0


class TestFindRuns:
    """Tests for label-run extraction."""

    def test_runs_of_each_class(self):
        labels = "HHHCCEEHC"
        assert find_runs(labels, Conformation.HELIX) == [
            Region(start=0, end=3),
            Region(start=7, end=8),
        ]
        assert find_runs(labels, Conformation.STRAND) == [Region(start=5, end=7)]
        assert find_runs(labels, Conformation.COIL) == [
            Region(start=3, end=5),
            Region(start=8, end=9),
        ]

    def test_run_at_end(self):
        assert find_runs("CCEE", Conformation.STRAND) == [Region(start=2, end=4)]

    def test_no_runs(self):
        assert find_runs("CCCC", Conformation.HELIX) == []
        assert find_runs("", Conformation.HELIX) == []
