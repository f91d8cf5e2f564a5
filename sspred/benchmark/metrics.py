"""
Performance metrics for secondary-structure prediction.

This module evaluates predicted H/E/C strings against observed structure
at two levels:

1. **Per-residue**: Q3 accuracy and per-class confusion counts
2. **Per-segment**: how well predicted helix/strand segments overlap the
   observed ones

Metrics Implemented
-------------------

**Q3**: fraction of residues whose predicted class equals the observed one.
Positions whose observed label is ``X`` (unresolved in the experimental
structure) are excluded. When the two strings differ in length only the
common prefix is compared.

**Per-class metrics** (one class against the other two):
- Sensitivity: TP / (TP + FN)
- Precision: TP / (TP + FP)
- MCC: Matthews Correlation Coefficient

**Segment Overlap (SOV)**: segment-level agreement for one class.

References
----------
- Rost & Sander (1993) - Q3 for three-state prediction
- Matthews (1975) - correlation coefficient
- Zemla et al. (1999) - SOV score for secondary structure
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from ..core.models import Conformation

logger = logging.getLogger(__name__)

# Observed label for residues without experimental structure
UNRESOLVED_LABEL = "X"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class ClassMetrics:
    """
    One-versus-rest metrics for a single structure class.

    Attributes:
        conformation: Class being scored
        tp, tn, fp, fn: Residue counts
    """
    conformation: Conformation
    tp: int = 0
    tn: int = 0
    fp: int = 0
    fn: int = 0

    sensitivity: float = 0.0
    precision: float = 0.0
    mcc: float = 0.0
    sov: float = 0.0

    def summary(self) -> str:
        return (
            f"{self.conformation.name:<7} "
            f"Sens={self.sensitivity:.3f} Prec={self.precision:.3f} "
            f"MCC={self.mcc:.3f} SOV={self.sov:.3f}"
        )


@dataclass
class StructureMetrics:
    """
    Agreement between one predicted and one observed structure string.

    Attributes:
        n_compared: Residues compared (resolved positions of the common prefix)
        n_correct: Residues whose class matches
        q3: ``n_correct / n_compared``, 0.0 when nothing is compared
        per_class: One-versus-rest metrics for H, E and C
    """
    n_compared: int = 0
    n_correct: int = 0
    q3: float = 0.0
    per_class: dict[str, ClassMetrics] = field(default_factory=dict)

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            "Structure Metrics",
            "=" * 40,
            f"Residues compared: {self.n_compared}",
            f"Correct:           {self.n_correct}",
            f"Q3:                {self.q3:.3f}",
            "",
        ]
        lines.extend(m.summary() for m in self.per_class.values())
        return "\n".join(lines)


@dataclass
class BenchmarkResult:
    """
    Benchmark results for a predictor on a dataset.

    Attributes:
        predictor_name: Name of evaluated predictor
        dataset_name: Name of benchmark dataset
        n_samples: Number of sequences evaluated
        mean_q3: Mean of per-sequence Q3
        overall: Metrics pooled over every residue of the dataset
        per_sample_results: Individual scores for analysis
    """
    predictor_name: str
    dataset_name: str
    n_samples: int
    mean_q3: float = 0.0
    overall: Optional[StructureMetrics] = None
    per_sample_results: list[dict] = field(default_factory=list)
    runtime_seconds: float = 0.0

    def summary(self) -> str:
        """Generate complete summary."""
        lines = [
            f"Benchmark Results: {self.predictor_name} on {self.dataset_name}",
            "=" * 60,
            f"Samples evaluated: {self.n_samples}",
            f"Runtime: {self.runtime_seconds:.2f} seconds",
            f"Mean Q3: {self.mean_q3:.3f}",
        ]

        if self.overall:
            lines.append("")
            lines.append(self.overall.summary())

        return "\n".join(lines)


# =============================================================================
# Metric Calculation Functions
# =============================================================================

def _aligned(predicted: str, observed: str) -> tuple[np.ndarray, np.ndarray]:
    """Common prefix of both strings with unresolved observed positions removed."""
    n = min(len(predicted), len(observed))
    pred = np.array(list(predicted[:n]), dtype="<U1")
    obs = np.array(list(observed[:n]), dtype="<U1")
    keep = obs != UNRESOLVED_LABEL
    return pred[keep], obs[keep]


def q3_accuracy(predicted: str, observed: Optional[str]) -> float:
    """
    Fraction of resolved positions predicted correctly.

    Returns 0.0 when there is no observed structure or nothing to compare.

    Example:
        >>> q3_accuracy("HHEC", "HXEE")
        0.6666666666666666
    """
    if not observed:
        return 0.0
    pred, obs = _aligned(predicted, observed)
    if len(obs) == 0:
        return 0.0
    return float(np.mean(pred == obs))


def calculate_mcc(tp: int, tn: int, fp: int, fn: int) -> float:
    """
    Calculate Matthews Correlation Coefficient.

    MCC = (TP*TN - FP*FN) / sqrt((TP+FP)(TP+FN)(TN+FP)(TN+FN))
    """
    numerator = tp * tn - fp * fn
    denominator = np.sqrt(
        float(tp + fp) * float(tp + fn) * float(tn + fp) * float(tn + fn)
    )

    if denominator == 0:
        return 0.0

    return float(numerator / denominator)


def calculate_class_metrics(
    predicted: str,
    observed: str,
    conformation: Conformation,
) -> ClassMetrics:
    """
    One-versus-rest metrics for a class over resolved positions.

    Observed labels other than H and E count as coil.
    """
    pred, obs = _aligned(predicted, observed)
    obs = np.array([Conformation.from_label(o).value for o in obs], dtype="<U1")

    code = conformation.value
    true_mask = obs == code
    pred_mask = pred == code

    tp = int(np.sum(true_mask & pred_mask))
    tn = int(np.sum(~true_mask & ~pred_mask))
    fp = int(np.sum(~true_mask & pred_mask))
    fn = int(np.sum(true_mask & ~pred_mask))

    return ClassMetrics(
        conformation=conformation,
        tp=tp,
        tn=tn,
        fp=fp,
        fn=fn,
        sensitivity=tp / (tp + fn) if (tp + fn) > 0 else 0.0,
        precision=tp / (tp + fp) if (tp + fp) > 0 else 0.0,
        mcc=calculate_mcc(tp, tn, fp, fn),
        sov=calculate_sov(true_mask, pred_mask),
    )


def evaluate_structure(predicted: str, observed: str) -> StructureMetrics:
    """Q3 and per-class metrics of one prediction."""
    pred, obs = _aligned(predicted, observed)
    n_correct = int(np.sum(pred == obs))

    return StructureMetrics(
        n_compared=len(obs),
        n_correct=n_correct,
        q3=n_correct / len(obs) if len(obs) > 0 else 0.0,
        per_class={
            c.value: calculate_class_metrics(predicted, observed, c)
            for c in Conformation
        },
    )


def calculate_sov(
    true_labels: np.ndarray,
    pred_labels: np.ndarray,
) -> float:
    """
    Calculate Segment OVerlap (SOV) score for one class.

    SOV = (1/N) * Σ [(min_overlap(s1,s2) + δ(s1,s2)) / max_extent(s1,s2)] * len(s1)

    Only the first overlapping predicted segment counts for each observed
    segment.
    """
    true_segments = _find_segments(true_labels)
    pred_segments = _find_segments(pred_labels)

    if not true_segments:
        return 1.0 if not pred_segments else 0.0

    total_length = sum(s[1] - s[0] for s in true_segments)

    sov_sum = 0.0

    for t_start, t_end in true_segments:
        t_len = t_end - t_start

        for p_start, p_end in pred_segments:
            overlap_start = max(t_start, p_start)
            overlap_end = min(t_end, p_end)

            if overlap_start < overlap_end:
                overlap = overlap_end - overlap_start
                max_extent = max(t_end, p_end) - min(t_start, p_start)

                # Boundary tolerance
                delta = min(
                    max_extent - overlap,
                    overlap,
                    t_len // 2,
                    (p_end - p_start) // 2,
                )

                sov_sum += ((overlap + delta) / max_extent) * t_len
                break

    return sov_sum / total_length


def _find_segments(labels: Sequence[bool]) -> list[tuple[int, int]]:
    """Find contiguous True segments in a boolean array."""
    segments = []
    in_segment = False
    start = 0

    for i, val in enumerate(labels):
        if val and not in_segment:
            in_segment = True
            start = i
        elif not val and in_segment:
            in_segment = False
            segments.append((start, i))

    if in_segment:
        segments.append((start, len(labels)))

    return segments


# =============================================================================
# Comparison Functions
# =============================================================================

def compare_predictors(
    results: list[BenchmarkResult],
) -> dict[str, dict[str, float]]:
    """
    Compare multiple predictors on the same dataset.

    Returns:
        Dictionary of predictor -> metric -> value
    """
    comparison = {}

    for result in results:
        row = {"mean_q3": result.mean_q3}
        if result.overall is not None:
            row["q3"] = result.overall.q3
            for code, metrics in result.overall.per_class.items():
                row[f"mcc_{code}"] = metrics.mcc
                row[f"sov_{code}"] = metrics.sov
        comparison[result.predictor_name] = row

    return comparison


def rank_predictors(
    comparison: dict[str, dict[str, float]],
    by: str = "mean_q3",
) -> list[tuple[str, float]]:
    """
    Rank predictors by a specific metric.

    Returns:
        List of (predictor_name, metric_value) sorted descending
    """
    rankings = [
        (name, metrics.get(by, 0))
        for name, metrics in comparison.items()
    ]

    return sorted(rankings, key=lambda x: x[1], reverse=True)
