"""
Core data models for SSPred.

This module defines the fundamental data structures used throughout the
pipeline: the three secondary-structure classes, sequence intervals,
input protein records and prediction results. Records use Pydantic for
validation and serialization.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Conformation(str, Enum):
    """
    Three-state secondary-structure classes.

    The values are the single-letter codes used in label strings:
    - HELIX: α-helix (DSSP H, G, I)
    - STRAND: β-strand / extended (DSSP E, B)
    - COIL: everything else
    """
    HELIX = "H"
    STRAND = "E"
    COIL = "C"

    @classmethod
    def from_label(cls, label: str) -> Conformation:
        """Map a label character to its class; unknown characters are coil."""
        if label == "H":
            return cls.HELIX
        if label == "E":
            return cls.STRAND
        return cls.COIL


# Standard 20 amino acids plus the unknown-residue code
VALID_RESIDUES = set("ACDEFGHIKLMNPQRSTVWYX")
AMBIGUOUS_RESIDUES = set("BZJUO")


class Region(BaseModel):
    """
    Half-open interval ``[start, end)`` over sequence positions.

    The conformation a region belongs to is implied by the collection that
    holds it. Regions are immutable so they can be compared and hashed.
    """
    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0, description="0-indexed start position (inclusive)")
    end: int = Field(..., ge=0, description="0-indexed end position (exclusive)")
    score: Optional[float] = Field(
        None, description="Average propensity of the holding conformation"
    )

    @field_validator("end")
    @classmethod
    def end_after_start(cls, v: int, info) -> int:
        if "start" in info.data and v <= info.data["start"]:
            raise ValueError("end must be greater than start")
        return v

    @property
    def length(self) -> int:
        """Length of the region in residues."""
        return self.end - self.start

    def overlaps(self, other: Region) -> bool:
        """Check whether the two intervals share at least one position."""
        return self.start < other.end and other.start < self.end

    def touches(self, other: Region) -> bool:
        """
        Check whether ``other`` (starting at or after this region) can be
        merged into it: overlapping or directly abutting.
        """
        return self.end >= other.start

    def merge(self, other: Region) -> Region:
        """Merge two overlapping or abutting regions into their hull."""
        first, second = (self, other) if self.start <= other.start else (other, self)
        if not first.touches(second):
            raise ValueError("Cannot merge separated regions")
        return Region(start=first.start, end=max(first.end, second.end))

    def positions(self) -> range:
        """Sequence positions covered by the region."""
        return range(self.start, self.end)


class ProteinRecord(BaseModel):
    """
    Protein input record.

    This is the primary input object for the prediction pipeline. The
    sequence is upper-cased and stripped of whitespace on validation; an
    empty sequence is allowed and predicts to an empty structure string.
    """
    id: str = Field(..., description="Sequence identifier")
    name: Optional[str] = Field(None, description="Protein name")
    sequence: str = Field("", description="Amino acid sequence")

    # Known annotation, e.g. a DSSP-derived H/E/C string
    observed_structure: Optional[str] = Field(
        None, description="Observed 3-state structure for benchmarking"
    )

    @property
    def sequence_length(self) -> int:
        """Length of the protein sequence."""
        return len(self.sequence)

    @field_validator("sequence")
    @classmethod
    def validate_sequence(cls, v: str) -> str:
        """Validate that sequence contains only amino acid characters."""
        v = "".join(v.split()).upper()
        invalid = set(v) - VALID_RESIDUES - AMBIGUOUS_RESIDUES

        if invalid:
            raise ValueError(f"Invalid amino acid characters: {sorted(invalid)}")

        return v

    @field_validator("observed_structure")
    @classmethod
    def validate_observed(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return "".join(v.split()).upper()


class PredictionResult(BaseModel):
    """
    Complete prediction result from a single predictor.

    Holds the per-residue H/E/C string together with the final disjoint
    helix, strand and coil regions it was assembled from.
    """
    # Input identification
    sequence_id: str = Field(..., description="Identifier for the input sequence")
    sequence: str = Field(..., description="The protein sequence")

    # Predictor info
    predictor_name: str = Field(..., description="Name of the prediction method")
    predictor_version: Optional[str] = None

    # Results
    structure: str = Field(..., description="Per-residue H/E/C prediction")
    helix_regions: list[Region] = Field(default_factory=list)
    strand_regions: list[Region] = Field(default_factory=list)
    coil_regions: list[Region] = Field(default_factory=list)

    # Metadata
    runtime_seconds: Optional[float] = Field(None, ge=0)

    @field_validator("structure")
    @classmethod
    def validate_structure(cls, v: str, info) -> str:
        if "sequence" in info.data and len(v) != len(info.data["sequence"]):
            raise ValueError(
                f"structure length ({len(v)}) must match sequence length "
                f"({len(info.data['sequence'])})"
            )
        invalid = set(v) - {"H", "E", "C"}
        if invalid:
            raise ValueError(f"Invalid structure labels: {sorted(invalid)}")
        return v

    def regions(self, conformation: Conformation) -> list[Region]:
        """Regions predicted for one conformation."""
        return {
            Conformation.HELIX: self.helix_regions,
            Conformation.STRAND: self.strand_regions,
            Conformation.COIL: self.coil_regions,
        }[conformation]

    def region_sequence(self, region: Region) -> str:
        """Residues spanned by a region."""
        return self.sequence[region.start:region.end]

    def composition(self) -> dict[str, float]:
        """Fraction of residues assigned to each class."""
        n = len(self.structure)
        if n == 0:
            return {c.value: 0.0 for c in Conformation}
        return {c.value: self.structure.count(c.value) / n for c in Conformation}
