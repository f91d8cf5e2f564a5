"""
Core data structures and utilities for SSPred.

This module provides the foundational components for working with protein
sequences, propensity tables, profiles and prediction results. The design
separates biological data representation from the prediction engines.

Modules:
    models: Pydantic-based data models for records, regions, and results
    sequence: Sequence parsing, validation, and one-hot encoding
    propensity: Immutable conformational parameter tables
    formats: PSSM, DSSP and label file readers
    exceptions: Error hierarchy
"""

from .exceptions import MalformedInputError, MissingResourceError, SSPredError
from .models import Conformation, PredictionResult, ProteinRecord, Region
from .propensity import (
    CHOU_FASMAN_SCALES,
    JIANG_SCALES,
    PropensityScales,
    PropensityTable,
)
from .sequence import (
    AA_ORDER,
    STANDARD_AA,
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
from .formats import parse_dssp, parse_label_file, parse_pssm, read_labels

__all__ = [
    # Errors
    "SSPredError",
    "MalformedInputError",
    "MissingResourceError",
    "SequenceError",
    # Models
    "Conformation",
    "ProteinRecord",
    "Region",
    "PredictionResult",
    # Propensity tables
    "PropensityTable",
    "PropensityScales",
    "CHOU_FASMAN_SCALES",
    "JIANG_SCALES",
    # Sequence utilities
    "AA_ORDER",
    "STANDARD_AA",
    "SequenceValidator",
    "clean_sequence",
    "find_runs",
    "parse_fasta",
    "read_sequence_file",
    "reduce_dssp",
    "sequence_hash",
    "sequence_to_profile",
    # File formats
    "parse_pssm",
    "parse_dssp",
    "parse_label_file",
    "read_labels",
]
