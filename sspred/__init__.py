"""
SSPred: three-state protein secondary-structure prediction.

This package assigns every residue of a protein sequence to helix (H),
strand (E) or coil (C) with two families of methods:

- rule-based region prediction in the Chou-Fasman tradition, where short
  windows rich in helix- or strand-forming residues nucleate a structure
  that is extended, filtered, merged and reconciled with the other class;
  a refined variant finds the nucleation sites in a wavelet transform of
  the hydrophobicity signal;
- the GOR windowed statistical method, trained on sequence profiles with
  known structure and scoring each residue from its local window.

Key components:
    - core: Data models, propensity tables, sequence and file readers
    - predictors: Region algebra, predictor implementations, export
    - benchmark: Q3, per-class and segment-overlap metrics
    - cli: Command-line interface

Basic usage:
    >>> from sspred import predict
    >>> from sspred.core.models import ProteinRecord
    >>>
    >>> protein = ProteinRecord(id="test", sequence="MVLSPADKTNVKAAWGKVGAHAGEYGAEALERMF")
    >>> result = predict(protein)
    >>> print(result.structure)
    >>> for region in result.helix_regions:
    ...     print(f"  Helix: {region.start}-{region.end}")
"""

__version__ = "0.1.0"

from .core.models import Conformation, PredictionResult, ProteinRecord, Region
from .core.sequence import parse_fasta, sequence_hash
from .predictors.base import (
    BasePredictor,
    PredictorConfig,
    PredictorType,
    get_predictor,
    list_predictors,
)

# Import concrete predictors to register them
from .predictors import chou_fasman, gor, wavelet  # noqa: F401


def predict(
    protein: ProteinRecord | str,
    method: str = "ChouFasman",
    **kwargs,
) -> PredictionResult:
    """
    Predict the secondary structure of a protein.

    This is the main high-level interface. For more control, use the
    predictor classes directly.

    Args:
        protein: ProteinRecord or bare sequence string
        method: Registered predictor name (case-insensitive)
        **kwargs: Passed to the predictor constructor, e.g. ``model_path``
            for GOR

    Returns:
        PredictionResult with one H/E/C label per residue

    Example:
        >>> from sspred import predict
        >>> predict("EEEEEEEEEE").structure
        'HHHHHHHHHH'
        >>> result = predict(protein, method="GOR", model_path="gor_model.json")
    """
    if isinstance(protein, str):
        protein = ProteinRecord(id="query", sequence=protein)

    predictor = get_predictor(method, **kwargs)
    return predictor.predict(protein)


__all__ = [
    # Version
    "__version__",
    # Main function
    "predict",
    # Models
    "Conformation",
    "ProteinRecord",
    "Region",
    "PredictionResult",
    # Sequence utilities
    "parse_fasta",
    "sequence_hash",
    # Predictor system
    "BasePredictor",
    "PredictorConfig",
    "PredictorType",
    "get_predictor",
    "list_predictors",
]
