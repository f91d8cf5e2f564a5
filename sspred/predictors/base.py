"""
Abstract base classes for secondary-structure predictors.

This module defines the interface that all predictors implement, enabling a
unified API for the CLI, the top-level ``predict`` function and
benchmarking. The design follows the Strategy pattern: the rule-based,
signal-refined and statistical methods are interchangeable behind
``BasePredictor.predict``.

Key design principles:
1. All predictors expose the same interface for predictions
2. Every prediction is a pure function of the sequence and the predictor's
   immutable configuration
3. Optional on-disk caching avoids recomputing identical queries
4. Fatal errors propagate; no partial result is ever returned
"""

from __future__ import annotations

import hashlib
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, TypeVar

from diskcache import Cache

from ..core.exceptions import SSPredError
from ..core.models import PredictionResult, ProteinRecord
from ..core.sequence import sequence_hash

logger = logging.getLogger(__name__)

# Type variable for predictor subclasses
P = TypeVar("P", bound="BasePredictor")


class PredictorType(str, Enum):
    """Classification of predictor types by methodology."""

    RULE_BASED = "rule_based"  # Chou-Fasman region algebra
    SIGNAL_REFINED = "signal_refined"  # Wavelet-nucleated Chou-Fasman
    STATISTICAL = "statistical"  # GOR windowed information model


class PredictorCapability(Enum):
    """Capabilities that predictors may support."""

    REGION_OUTPUT = auto()  # Reports helix/strand/coil regions
    PROFILE_INPUT = auto()  # Accepts position-specific profiles
    TRAINABLE = auto()  # Can be trained on labeled data


@dataclass
class PredictorConfig:
    """
    Runtime configuration shared by all predictors.

    Algorithm parameters live in each predictor's own parameter object;
    this holds the cross-cutting concerns.
    """
    # Caching
    use_cache: bool = False
    cache_dir: Optional[Path] = None
    cache_ttl: int = 86400 * 30  # 30 days default

    def __post_init__(self):
        if self.cache_dir is None:
            self.cache_dir = Path.home() / ".cache" / "sspred"
        self.cache_dir = Path(self.cache_dir)
        if self.use_cache:
            self.cache_dir.mkdir(parents=True, exist_ok=True)


class PredictorError(SSPredError):
    """Base exception for predictor misuse (unknown method, untrained model)."""
    pass


class BasePredictor(ABC):
    """
    Abstract base class for all secondary-structure predictors.

    Subclasses implement ``_predict_impl`` with the actual prediction logic
    while this base class handles caching, timing and result enrichment.

    Implementation guide for new predictors:
    1. Inherit from BasePredictor
    2. Set class attributes (name, version, type, capabilities)
    3. Implement _predict_impl() returning a PredictionResult
    4. Override _config_signature() if parameters change the output
    """

    # Class attributes - must be set by subclasses
    name: str = "BasePredictor"
    version: str = "0.0"
    predictor_type: PredictorType = PredictorType.RULE_BASED
    capabilities: set[PredictorCapability] = set()

    # Documentation
    citation: Optional[str] = None
    description: str = ""

    def __init__(self, config: Optional[PredictorConfig] = None):
        """
        Initialize predictor with configuration.

        Args:
            config: Predictor configuration (uses defaults if None)
        """
        self.config = config or PredictorConfig()
        self._cache: Optional[Cache] = None

        if self.config.use_cache:
            cache_path = self.config.cache_dir / self.name.lower().replace(" ", "_")
            self._cache = Cache(str(cache_path))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, version={self.version!r})"

    def _config_signature(self) -> str:
        """String identifying every parameter that affects predictions."""
        return ""

    def _get_cache_key(self, sequence: str) -> str:
        """Generate cache key for a sequence."""
        seq_hash = sequence_hash(sequence)
        config_hash = hashlib.md5(self._config_signature().encode()).hexdigest()[:8]
        return f"{self.name}:{self.version}:{seq_hash}:{config_hash}"

    def _check_cache(self, sequence: str) -> Optional[PredictionResult]:
        """Check if result is cached."""
        if not self._cache:
            return None

        key = self._get_cache_key(sequence)
        return self._cache.get(key)

    def _store_cache(self, sequence: str, result: PredictionResult):
        """Store result in cache."""
        if not self._cache:
            return

        key = self._get_cache_key(sequence)
        self._cache.set(key, result, expire=self.config.cache_ttl)

    @abstractmethod
    def _predict_impl(self, sequence: str) -> PredictionResult:
        """
        Internal prediction implementation.

        Args:
            sequence: Cleaned, upper-case protein sequence (may be empty)

        Returns:
            PredictionResult with ``structure`` populated
        """
        pass

    def predict(self, protein: ProteinRecord) -> PredictionResult:
        """
        Run prediction on a protein.

        This is the main public interface for predictions. It handles
        cache lookup, timing and result standardization.

        Args:
            protein: ProteinRecord with sequence

        Returns:
            PredictionResult with a structure string of the sequence's length
        """
        sequence = protein.sequence

        cached = self._check_cache(sequence)
        if cached is not None:
            logger.debug(f"{self.name}: Using cached result for {protein.id}")
            return cached.model_copy(update={"sequence_id": protein.id})

        start_time = time.time()
        result = self._predict_impl(sequence)

        result.sequence_id = protein.id
        result.predictor_name = self.name
        result.predictor_version = self.version
        result.runtime_seconds = time.time() - start_time

        logger.debug(
            f"{self.name}: {protein.id} ({len(sequence)} residues) "
            f"predicted in {result.runtime_seconds:.3f}s"
        )

        self._store_cache(sequence, result)

        return result

    def predict_sequence(self, sequence: str, sequence_id: str = "query") -> PredictionResult:
        """Convenience wrapper predicting a bare sequence string."""
        return self.predict(ProteinRecord(id=sequence_id, sequence=sequence))

    def predict_batch(
        self,
        proteins: Sequence[ProteinRecord],
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> list[PredictionResult]:
        """
        Run predictions on multiple proteins.

        Args:
            proteins: Sequence of ProteinRecord objects
            progress_callback: Optional callback(current, total) for progress

        Returns:
            List of PredictionResult objects
        """
        results = []
        total = len(proteins)

        for i, protein in enumerate(proteins):
            results.append(self.predict(protein))

            if progress_callback:
                progress_callback(i + 1, total)

        return results

    def get_info(self) -> dict[str, Any]:
        """
        Get predictor information for documentation/logging.

        Returns:
            Dictionary with predictor metadata
        """
        return {
            "name": self.name,
            "version": self.version,
            "type": self.predictor_type.value,
            "capabilities": [c.name for c in self.capabilities],
            "citation": self.citation,
            "description": self.description,
        }

    def clear_cache(self):
        """Clear the prediction cache for this predictor."""
        if self._cache:
            self._cache.clear()


class TrainablePredictor(BasePredictor):
    """
    Base class for predictors that are trained from labeled data.

    A trainable predictor starts untrained; ``fit`` or ``load`` moves it to
    a usable state, and ``save`` persists it.
    """

    capabilities: set[PredictorCapability] = {PredictorCapability.TRAINABLE}

    @property
    @abstractmethod
    def is_trained(self) -> bool:
        """Whether the predictor holds a model."""
        pass

    @abstractmethod
    def fit(self, examples: Sequence[Any]) -> "TrainablePredictor":
        """
        Train the predictor on labeled data.

        Returns:
            Self for method chaining
        """
        pass

    @abstractmethod
    def save(self, path: Path):
        """Save trained model to disk."""
        pass

    @abstractmethod
    def load(self, path: Path) -> "TrainablePredictor":
        """Load trained model from disk."""
        pass


# Registry for available predictors
_PREDICTOR_REGISTRY: dict[str, type[BasePredictor]] = {}


def register_predictor(predictor_class: type[BasePredictor]) -> type[BasePredictor]:
    """
    Decorator to register a predictor class.

    Usage:
        @register_predictor
        class MyPredictor(BasePredictor):
            name = "MyPredictor"
            ...
    """
    _PREDICTOR_REGISTRY[predictor_class.name] = predictor_class
    return predictor_class


def get_predictor(name: str, config: Optional[PredictorConfig] = None, **kwargs) -> BasePredictor:
    """
    Get a predictor instance by name.

    Args:
        name: Predictor name (case-insensitive)
        config: Optional configuration
        **kwargs: Extra constructor arguments (e.g. ``model_path``)

    Returns:
        Predictor instance

    Raises:
        PredictorError: If predictor not found, or a model path is given
            for a predictor that is not trainable
    """
    lookup = {key.lower(): cls for key, cls in _PREDICTOR_REGISTRY.items()}
    cls = lookup.get(name.lower())
    if cls is None:
        available = ", ".join(_PREDICTOR_REGISTRY.keys())
        raise PredictorError(f"Predictor '{name}' not found. Available: {available}")
    if "model_path" in kwargs and not issubclass(cls, TrainablePredictor):
        raise PredictorError(f"{cls.name} is rule-based and does not load a trained model")

    return cls(config, **kwargs)


def list_predictors() -> list[dict[str, Any]]:
    """
    List all registered predictors with their info.

    Returns:
        List of predictor info dictionaries
    """
    return [cls(PredictorConfig()).get_info() for cls in _PREDICTOR_REGISTRY.values()]
