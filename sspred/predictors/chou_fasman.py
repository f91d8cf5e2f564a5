"""
Classical Chou-Fasman secondary-structure prediction.

The pipeline runs the region algebra once per class and then reconciles
the two classes:

    nucleate -> extend -> filter -> merge -> resolve conflicts
             -> coil fill -> assemble

Helix nuclei are 6-residue windows with at least four residues of
Pα > 1.0 where helix dominates strand on average; strand nuclei are
5-residue windows with at least three residues of Pβ > 1.0 where strand
strictly dominates. Nuclei are extended while a 4-residue terminal window
averages >= 1.0, and extended regions survive only if their whole-region
average reaches 1.03 (helix) or 1.05 (strand).

Reference:
    Chou PY, Fasman GD (1974) Prediction of protein conformation.
    Biochemistry 13:222-245
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Optional

from ..core.models import Conformation, PredictionResult
from ..core.propensity import CHOU_FASMAN_SCALES, PropensityScales
from .base import (
    BasePredictor,
    PredictorCapability,
    PredictorConfig,
    PredictorType,
    register_predictor,
)
from .regions import RegionAlgebra

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChouFasmanParameters:
    """Window sizes and thresholds of the classical pipeline."""
    helix_window: int = 6
    helix_count: int = 4
    helix_min_param: float = 1.0
    strand_window: int = 5
    strand_count: int = 3
    strand_min_param: float = 1.0
    extension_threshold: float = 1.0
    helix_filter: float = 1.03
    strand_filter: float = 1.05


@register_predictor
class ChouFasmanPredictor(BasePredictor):
    """
    Rule-based helix/strand/coil predictor using Chou-Fasman parameters.

    Example:
        >>> predictor = ChouFasmanPredictor()
        >>> predictor.predict_sequence("EEEEEEEEEE").structure
        'HHHHHHHHHH'
    """

    name = "ChouFasman"
    version = "1.0"
    predictor_type = PredictorType.RULE_BASED
    capabilities = {PredictorCapability.REGION_OUTPUT}
    citation = "Chou PY, Fasman GD (1974) Biochemistry 13:222-245"
    description = "Nucleation/extension region algorithm with classical propensities"

    def __init__(
        self,
        config: Optional[PredictorConfig] = None,
        parameters: Optional[ChouFasmanParameters] = None,
        scales: Optional[PropensityScales] = None,
    ):
        self.parameters = parameters or ChouFasmanParameters()
        self.algebra = RegionAlgebra(scales or CHOU_FASMAN_SCALES)
        super().__init__(config)

    def _config_signature(self) -> str:
        scales = self.algebra.scales
        return f"{asdict(self.parameters)}|{scales.helix.name}|{scales.strand.name}"

    def _candidate_regions(self, sequence: str, conformation: Conformation):
        """Nucleate, extend, filter and merge regions of one class."""
        p = self.parameters
        if conformation == Conformation.HELIX:
            count, window, min_param, cutoff = (
                p.helix_count, p.helix_window, p.helix_min_param, p.helix_filter
            )
        else:
            count, window, min_param, cutoff = (
                p.strand_count, p.strand_window, p.strand_min_param, p.strand_filter
            )

        algebra = self.algebra
        regions = algebra.find_nucleation_regions(sequence, count, window, min_param, conformation)
        regions = algebra.extend_all(sequence, regions, conformation, p.extension_threshold)
        regions = algebra.filter(sequence, regions, conformation, cutoff)
        return algebra.merge(regions)

    def _predict_impl(self, sequence: str) -> PredictionResult:
        algebra = self.algebra
        n = len(sequence)

        helix = self._candidate_regions(sequence, Conformation.HELIX)
        strand = self._candidate_regions(sequence, Conformation.STRAND)

        # Both sides are judged against the other's unresolved set
        helix_final = algebra.resolve_conflicts(
            sequence, helix, Conformation.HELIX, strand, Conformation.STRAND
        )
        strand_final = algebra.resolve_conflicts(
            sequence, strand, Conformation.STRAND, helix, Conformation.HELIX
        )

        coil = algebra.coil_fill(helix_final, strand_final, n)
        structure = algebra.assemble(helix_final, strand_final, n)

        logger.debug(
            f"{self.name}: {len(helix_final)} helix, {len(strand_final)} strand, "
            f"{len(coil)} coil regions"
        )

        return PredictionResult(
            sequence_id="",
            sequence=sequence,
            predictor_name=self.name,
            predictor_version=self.version,
            structure=structure,
            helix_regions=algebra.annotate(sequence, helix_final, Conformation.HELIX),
            strand_regions=algebra.annotate(sequence, strand_final, Conformation.STRAND),
            coil_regions=coil,
        )
