"""
Benchmarking framework for secondary-structure predictor evaluation.

Predictions are compared with observed three-state structure (for example
DSSP reduced to H/E/C). Unresolved residues, labeled ``X`` in the observed
string, are excluded from every metric.

Evaluation Metrics
------------------
- Q3 accuracy (per sequence and pooled)
- Per-class sensitivity, precision and MCC
- Segment overlap (SOV) per class

Quick Start
-----------
    >>> from sspred.benchmark import BenchmarkRunner, read_benchmark_file
    >>>
    >>> records = read_benchmark_file("benchmark.txt")
    >>> runner = BenchmarkRunner()
    >>> runner.add_predictor("ChouFasman")
    >>> runner.add_predictor("ImprovedChouFasman")
    >>> for r in runner.run(records):
    ...     print(f"{r.predictor_name}: Q3={r.mean_q3:.3f}")
"""

from .metrics import (
    BenchmarkResult,
    ClassMetrics,
    StructureMetrics,
    calculate_class_metrics,
    calculate_mcc,
    calculate_sov,
    compare_predictors,
    evaluate_structure,
    q3_accuracy,
    rank_predictors,
)
from .runner import BenchmarkRunner, RunnerConfig, read_benchmark_file, results_to_frame

__all__ = [
    # Metrics
    "BenchmarkResult",
    "ClassMetrics",
    "StructureMetrics",
    "q3_accuracy",
    "calculate_class_metrics",
    "calculate_mcc",
    "calculate_sov",
    "evaluate_structure",
    "compare_predictors",
    "rank_predictors",
    # Runner
    "BenchmarkRunner",
    "RunnerConfig",
    "read_benchmark_file",
    "results_to_frame",
]
