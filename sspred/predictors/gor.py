"""
GOR windowed statistical secondary-structure prediction.

The model holds, for each of the three classes, a ``W x 20`` matrix: one
row per offset from the window centre, one column per amino acid. Training
adds each windowed profile row into the matrix of the centre residue's
observed class and normalizes every row to a distribution. Prediction
scores a residue by summing, over its window, the dot products of the
profile rows with the matching matrix rows, and picks the highest-scoring
class.

Profiles are either PSI-BLAST position-specific probabilities or one-hot
encodings of a raw sequence (see ``sspred.core.sequence.sequence_to_profile``).

Tie-break policy:
    H is evaluated first, then E, then C; a later class replaces the current
    best only with a strictly greater score, so exact ties favour helix.

Reference:
    Garnier J, Osguthorpe DJ, Robson B (1978) J Mol Biol 120:97-120
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..core.exceptions import MalformedInputError, MissingResourceError
from ..core.formats import iter_training_examples, read_id_list
from ..core.models import Conformation, PredictionResult
from ..core.sequence import AA_ORDER, find_runs, sequence_to_profile
from .base import (
    PredictorCapability,
    PredictorConfig,
    PredictorError,
    PredictorType,
    TrainablePredictor,
    register_predictor,
)

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 17

# Class evaluation order; earlier classes win ties
CLASS_ORDER = ("H", "E", "C")


# =============================================================================
# MODEL
# =============================================================================

class GORModel(BaseModel):
    """
    Trained GOR probability tables.

    Attributes:
        window_size: Odd, positive window width W
        aa_list: Column order of the matrices (20 one-letter codes)
        H, E, C: ``W x 20`` per-offset amino-acid distributions per class
    """
    model_config = ConfigDict(frozen=True)

    window_size: int = Field(DEFAULT_WINDOW_SIZE, gt=0)
    aa_list: list[str] = Field(default_factory=lambda: list(AA_ORDER))
    H: list[list[float]]
    E: list[list[float]]
    C: list[list[float]]

    @field_validator("window_size")
    @classmethod
    def window_is_odd(cls, v: int) -> int:
        if v % 2 == 0:
            raise ValueError(f"window_size must be odd, got {v}")
        return v

    @field_validator("aa_list")
    @classmethod
    def twenty_codes(cls, v: list[str]) -> list[str]:
        if len(v) != len(AA_ORDER):
            raise ValueError(f"aa_list must hold {len(AA_ORDER)} codes, got {len(v)}")
        return v

    @model_validator(mode="after")
    def matrix_shapes(self) -> GORModel:
        expected = (self.window_size, len(self.aa_list))
        for label in CLASS_ORDER:
            matrix = getattr(self, label)
            if len(matrix) != expected[0] or any(len(row) != expected[1] for row in matrix):
                raise ValueError(f"matrix {label} must be {expected[0]}x{expected[1]}")
        return self

    @property
    def half_window(self) -> int:
        return (self.window_size - 1) // 2

    def matrix(self, label: str) -> np.ndarray:
        """Matrix of one class (``"H"``, ``"E"`` or ``"C"``) as an array."""
        return np.array(getattr(self, label), dtype=float)

    def save(self, path: Union[str, Path]):
        """Write the model as indented JSON."""
        path = Path(path)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
        logger.info(f"GOR model saved to {path}")

    @classmethod
    def load(cls, path: Union[str, Path]) -> GORModel:
        """
        Read a model written by ``save``.

        Raises:
            MissingResourceError: If the file cannot be opened
            MalformedInputError: If the content is not a valid model
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = json.load(f)
        except OSError as e:
            raise MissingResourceError(f"Unable to read GOR model {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise MalformedInputError(f"GOR model {path} is not valid JSON: {e}") from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedInputError(f"Invalid GOR model {path}: {e}") from e


# =============================================================================
# TRAINING AND PREDICTION
# =============================================================================

def as_profile(profile, width: int = len(AA_ORDER)) -> np.ndarray:
    """
    Coerce a profile to a float ``(L, width)`` array.

    An empty profile becomes ``(0, width)``.

    Raises:
        MalformedInputError: If the profile is not two-dimensional with
            ``width`` columns
    """
    array = np.asarray(profile, dtype=float)
    if array.size == 0:
        return np.zeros((0, width))
    if array.ndim != 2 or array.shape[1] != width:
        raise MalformedInputError(
            f"Profile must have shape (L, {width}), got {array.shape}"
        )
    return array


def _window_bounds(i: int, length: int, half: int) -> tuple[int, int]:
    return max(0, i - half), min(length, i + half + 1)


def train_gor(
    examples: Iterable[tuple[np.ndarray, str]],
    window_size: int = DEFAULT_WINDOW_SIZE,
    aa_list: Sequence[str] = AA_ORDER,
) -> GORModel:
    """
    Train a GOR model from ``(profile, labels)`` pairs.

    Examples whose profile has zero total mass are skipped. Label ``H``
    feeds the helix matrix, ``E`` the strand matrix and any other character
    the coil matrix.

    Args:
        examples: Profiles with their per-position labels
        window_size: Odd window width
        aa_list: Column order of the profiles

    Returns:
        Trained, row-normalized model

    Raises:
        MalformedInputError: On a malformed profile or a profile/label
            length mismatch; no partial model is returned
    """
    if window_size <= 0 or window_size % 2 == 0:
        raise MalformedInputError(f"window_size must be odd and positive, got {window_size}")

    width = len(aa_list)
    half = (window_size - 1) // 2
    counts = {label: np.zeros((window_size, width)) for label in CLASS_ORDER}

    used = skipped = 0
    for index, (profile, labels) in enumerate(examples):
        profile = as_profile(profile, width)
        if profile.sum() == 0:
            logger.warning(f"Skipping training example {index}: profile has zero mass")
            skipped += 1
            continue

        if len(labels) != len(profile):
            raise MalformedInputError(
                f"Length mismatch in training example {index}: "
                f"profile={len(profile)} labels={len(labels)}"
            )

        n = len(profile)
        for i, label in enumerate(labels):
            matrix = counts[Conformation.from_label(label).value]
            start, end = _window_bounds(i, n, half)
            rows = np.arange(start, end) - i + half
            matrix[rows] += profile[start:end]
        used += 1

    for matrix in counts.values():
        totals = matrix.sum(axis=1, keepdims=True)
        np.divide(matrix, totals, out=matrix, where=totals > 0)

    logger.info(f"Trained GOR model (window {window_size}) on {used} examples, skipped {skipped}")

    return GORModel(
        window_size=window_size,
        aa_list=list(aa_list),
        **{label: counts[label].tolist() for label in CLASS_ORDER},
    )


def score_profile(model: GORModel, profile) -> np.ndarray:
    """
    Per-position class scores as an ``(L, 3)`` array in H, E, C order.
    """
    profile = as_profile(profile, len(model.aa_list))
    n = len(profile)
    half = model.half_window
    matrices = [model.matrix(label) for label in CLASS_ORDER]

    scores = np.zeros((n, len(CLASS_ORDER)))
    for offset in range(-half, half + 1):
        # positions i whose neighbour j = i + offset lies inside the sequence
        lo, hi = max(0, -offset), min(n, n - offset)
        if lo >= hi:
            continue
        neighbours = profile[lo + offset:hi + offset]
        for c, matrix in enumerate(matrices):
            scores[lo:hi, c] += neighbours @ matrix[offset + half]

    return scores


def predict_gor(model: GORModel, profile) -> str:
    """
    Predict an H/E/C string from a profile.

    Returns:
        Label string of the profile's length (empty for an empty profile)
    """
    scores = score_profile(model, profile)
    labels = []
    for h, e, c in scores:
        label, best = "H", h
        if e > best:
            label, best = "E", e
        if c > best:
            label = "C"
        labels.append(label)
    return "".join(labels)


def train_from_directory(
    id_list: Union[str, Path],
    pssm_dir: Union[str, Path],
    label_dir: Union[str, Path],
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> GORModel:
    """
    Train from an id list and directories of ``<id>.pssm`` / ``<id>.dssp``.

    Any unreadable or malformed file aborts training.
    """
    ids = read_id_list(id_list)
    logger.info(f"Training GOR model on {len(ids)} listed examples")
    examples = (
        (profile, labels)
        for _, profile, labels in iter_training_examples(ids, pssm_dir, label_dir)
    )
    return train_gor(examples, window_size)


# =============================================================================
# PREDICTOR
# =============================================================================

@register_predictor
class GORPredictor(TrainablePredictor):
    """
    Predictor wrapping a trained ``GORModel``.

    Sequences are one-hot encoded before scoring; use ``predict_profile``
    to score a PSSM profile directly.

    Example:
        >>> predictor = GORPredictor(model_path="gor_model.json")
        >>> predictor.predict_sequence("MVLSEGEWQL").structure
    """

    name = "GOR"
    version = "1.0"
    predictor_type = PredictorType.STATISTICAL
    capabilities = {
        PredictorCapability.TRAINABLE,
        PredictorCapability.PROFILE_INPUT,
        PredictorCapability.REGION_OUTPUT,
    }
    citation = "Garnier J et al. (1978) J Mol Biol 120:97-120"
    description = "Windowed class-conditional amino-acid statistics"

    def __init__(
        self,
        config: Optional[PredictorConfig] = None,
        model: Optional[GORModel] = None,
        model_path: Optional[Union[str, Path]] = None,
    ):
        super().__init__(config)
        self.model = model
        if model_path is not None:
            self.load(model_path)

    @property
    def is_trained(self) -> bool:
        return self.model is not None

    def _require_model(self) -> GORModel:
        if self.model is None:
            raise PredictorError(f"{self.name} has no model; train or load one first")
        return self.model

    def _config_signature(self) -> str:
        if self.model is None:
            return ""
        return self.model.model_dump_json()

    def fit(self, examples, window_size: int = DEFAULT_WINDOW_SIZE) -> GORPredictor:
        self.model = train_gor(examples, window_size)
        return self

    def save(self, path: Union[str, Path]):
        self._require_model().save(path)

    def load(self, path: Union[str, Path]) -> GORPredictor:
        self.model = GORModel.load(path)
        logger.debug(f"{self.name}: loaded model from {path}")
        return self

    def _result(self, sequence: str, structure: str) -> PredictionResult:
        return PredictionResult(
            sequence_id="",
            sequence=sequence,
            predictor_name=self.name,
            predictor_version=self.version,
            structure=structure,
            helix_regions=find_runs(structure, Conformation.HELIX),
            strand_regions=find_runs(structure, Conformation.STRAND),
            coil_regions=find_runs(structure, Conformation.COIL),
        )

    def _predict_impl(self, sequence: str) -> PredictionResult:
        model = self._require_model()
        profile = sequence_to_profile(sequence, model.aa_list)
        return self._result(sequence, predict_gor(model, profile))

    def predict_profile(
        self,
        profile,
        sequence: Optional[str] = None,
        sequence_id: str = "query",
    ) -> PredictionResult:
        """
        Predict from a precomputed profile (e.g. a parsed PSSM).

        Args:
            profile: ``(L, 20)`` profile in the model's column order
            sequence: Residues matching the profile; ``X`` placeholders
                are used when omitted
            sequence_id: Identifier recorded on the result

        Raises:
            MalformedInputError: If ``sequence`` and ``profile`` lengths differ
        """
        model = self._require_model()
        profile = as_profile(profile, len(model.aa_list))
        if sequence is None:
            sequence = "X" * len(profile)
        if len(sequence) != len(profile):
            raise MalformedInputError(
                f"Sequence length {len(sequence)} does not match profile length {len(profile)}"
            )

        result = self._result(sequence, predict_gor(model, profile))
        result.sequence_id = sequence_id
        return result
