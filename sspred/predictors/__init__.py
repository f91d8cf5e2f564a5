"""
Secondary-structure predictor implementations.

The predictor architecture follows the Strategy pattern: every method
implements ``BasePredictor`` and is registered by name, so the CLI and
benchmarking code can swap algorithms freely.

Predictor Categories:

**Rule-based region predictors**
Chou-Fasman style methods that nucleate helix and strand regions from
residue propensities, extend them, and reconcile overlapping classes.
``ChouFasman`` uses classical sliding-window nucleation;
``ImprovedChouFasman`` locates nucleation sites in a wavelet-transformed
hydrophobicity signal.

**Statistical predictors**
``GOR`` scores each residue from class-conditional amino-acid frequencies
over a window and must be trained (or loaded) before use.

Submodules:
    base: Abstract base classes and predictor registry
    regions: Region algebra shared by the rule-based methods
    chou_fasman: Classical Chou-Fasman pipeline
    wavelet: Wavelet-nucleated Chou-Fasman pipeline
    gor: GOR model, training and prediction
    export: TSV/JSON export of results
"""

from .base import (
    BasePredictor,
    PredictorCapability,
    PredictorConfig,
    PredictorError,
    PredictorType,
    TrainablePredictor,
    get_predictor,
    list_predictors,
    register_predictor,
)
from .regions import RegionAlgebra

# Importing the concrete predictors registers them
from .chou_fasman import ChouFasmanParameters, ChouFasmanPredictor
from .wavelet import ImprovedChouFasmanPredictor, WaveletParameters
from .gor import GORModel, GORPredictor, predict_gor, train_from_directory, train_gor

from .export import (
    export_batch_results,
    export_regions_to_tsv,
    export_to_json,
    export_to_tsv,
)

__all__ = [
    # Base classes
    "BasePredictor",
    "TrainablePredictor",
    "PredictorConfig",
    "PredictorType",
    "PredictorCapability",
    "PredictorError",
    # Registry functions
    "register_predictor",
    "get_predictor",
    "list_predictors",
    # Engines
    "RegionAlgebra",
    "ChouFasmanParameters",
    "ChouFasmanPredictor",
    "WaveletParameters",
    "ImprovedChouFasmanPredictor",
    "GORModel",
    "GORPredictor",
    "train_gor",
    "predict_gor",
    "train_from_directory",
    # Export
    "export_to_tsv",
    "export_regions_to_tsv",
    "export_to_json",
    "export_batch_results",
]
