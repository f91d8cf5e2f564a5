"""
Conformational parameter tables.

Each table maps a one-letter residue code to a scalar: the tendency of that
amino acid to occur in a helix or a strand, or its hydrophobicity. Tables
are immutable and are bundled into a ``PropensityScales`` object that is
injected into the region and signal engines, so alternative parameter sets
can be substituted without touching the algorithms.

References
----------
- Chou & Fasman (1978) Adv Enzymol 47:45-148 - classical Pα / Pβ
- Jiang et al. (1998) Protein Eng 11:1231-1239 - folding-type-specific
  propensities for α/β proteins, with the hydrophobicity scale used for
  wavelet nucleation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

import numpy as np

from .models import Conformation


# Neutral value returned for residues a propensity table does not list
NEUTRAL_PROPENSITY = 1.0

# Hydrophobicity has no published value for unknown residues; zero keeps
# them from contributing to the wavelet signal
DEFAULT_HYDROPHOBICITY = 0.0


# =============================================================================
# CHOU-FASMAN PARAMETERS
# =============================================================================

CHOU_FASMAN_ALPHA = {
    'A': 1.42, 'R': 0.98, 'N': 0.67, 'D': 1.01, 'C': 0.70,
    'Q': 1.11, 'E': 1.51, 'G': 0.57, 'H': 1.00, 'I': 1.08,
    'L': 1.21, 'K': 1.16, 'M': 1.45, 'F': 1.13, 'P': 0.57,
    'S': 0.77, 'T': 0.83, 'W': 1.08, 'Y': 0.69, 'V': 1.06,
    'X': 1.00,
}

CHOU_FASMAN_BETA = {
    'A': 0.83, 'R': 0.93, 'N': 0.89, 'D': 0.54, 'C': 1.19,
    'Q': 1.10, 'E': 0.37, 'G': 0.75, 'H': 0.87, 'I': 1.60,
    'L': 1.30, 'K': 0.74, 'M': 1.05, 'F': 1.38, 'P': 0.55,
    'S': 0.75, 'T': 1.19, 'W': 1.37, 'Y': 1.47, 'V': 1.70,
    'X': 1.00,
}


# =============================================================================
# JIANG et al. (1998) PARAMETERS FOR α/β PROTEINS
# =============================================================================

JIANG_ALPHA = {
    'A': 1.02, 'R': 0.98, 'N': 0.67, 'D': 1.01, 'C': 0.70,
    'Q': 1.11, 'E': 1.51, 'G': 0.57, 'H': 1.00, 'I': 1.08,
    'L': 1.21, 'K': 1.16, 'M': 1.45, 'F': 1.13, 'P': 0.57,
    'S': 0.77, 'T': 0.83, 'W': 1.08, 'Y': 0.69, 'V': 1.06,
}

JIANG_BETA = {
    'A': 0.83, 'R': 0.93, 'N': 0.89, 'D': 0.54, 'C': 1.19,
    'Q': 1.10, 'E': 0.37, 'G': 0.75, 'H': 0.87, 'I': 1.60,
    'L': 1.30, 'K': 0.74, 'M': 1.05, 'F': 1.38, 'P': 0.55,
    'S': 0.75, 'T': 1.19, 'W': 1.37, 'Y': 1.47, 'V': 1.70,
}

JIANG_HYDROPHOBICITY = {
    'G': 0.00, 'Q': 0.00, 'S': 0.07, 'T': 0.07, 'N': 0.09,
    'D': 0.66, 'E': 0.67, 'R': 0.85, 'A': 0.87, 'H': 0.87,
    'C': 1.52, 'K': 1.64, 'M': 1.67, 'V': 1.87, 'L': 2.17,
    'Y': 2.76, 'P': 2.77, 'F': 2.87, 'I': 3.15, 'W': 3.77,
}


@dataclass(frozen=True)
class PropensityTable:
    """
    Immutable residue -> value lookup with a default for unmapped residues.

    Attributes:
        name: Human-readable table name
        values: Residue code to parameter mapping
        default: Value returned for residues not in ``values``
    """
    name: str
    values: Mapping[str, float]
    default: float = NEUTRAL_PROPENSITY

    def __post_init__(self):
        # Read-only copy
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def score(self, residue: str) -> float:
        """Parameter for one residue; unmapped residues get the default."""
        return self.values.get(residue, self.default)

    def __contains__(self, residue: str) -> bool:
        return residue in self.values


@dataclass(frozen=True)
class PropensityScales:
    """
    The set of tables one prediction method runs with.

    Helix and strand tables are looked up by conformation; coil has no
    table and scores the neutral value.
    """
    helix: PropensityTable
    strand: PropensityTable
    hydrophobicity_table: PropensityTable = field(
        default_factory=lambda: PropensityTable(
            "hydrophobicity", JIANG_HYDROPHOBICITY, DEFAULT_HYDROPHOBICITY
        )
    )

    def table_for(self, conformation: Conformation) -> PropensityTable | None:
        """Propensity table of a conformation (None for coil)."""
        if conformation == Conformation.HELIX:
            return self.helix
        if conformation == Conformation.STRAND:
            return self.strand
        return None

    def score(self, residue: str, conformation: Conformation) -> float:
        """Conformational parameter of ``residue`` for ``conformation``."""
        table = self.table_for(conformation)
        if table is None:
            return NEUTRAL_PROPENSITY
        return table.score(residue)

    def hydrophobicity(self, residue: str) -> float:
        """Hydrophobicity of ``residue``."""
        return self.hydrophobicity_table.score(residue)

    def values(self, sequence: str, conformation: Conformation) -> np.ndarray:
        """Per-residue parameters of a whole sequence."""
        return np.array(
            [self.score(aa, conformation) for aa in sequence], dtype=float
        )

    def hydrophobicity_profile(self, sequence: str) -> np.ndarray:
        """Per-residue hydrophobicity of a whole sequence."""
        return np.array([self.hydrophobicity(aa) for aa in sequence], dtype=float)


CHOU_FASMAN_SCALES = PropensityScales(
    helix=PropensityTable("chou_fasman_alpha", CHOU_FASMAN_ALPHA),
    strand=PropensityTable("chou_fasman_beta", CHOU_FASMAN_BETA),
)

JIANG_SCALES = PropensityScales(
    helix=PropensityTable("jiang_alpha", JIANG_ALPHA),
    strand=PropensityTable("jiang_beta", JIANG_BETA),
)
