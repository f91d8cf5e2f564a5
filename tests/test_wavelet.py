"""
Tests for the wavelet transform, nucleation sites and coverage extension.
"""

import numpy as np
import pytest

from sspred.core.models import Conformation
from sspred.predictors.wavelet import (
    ImprovedChouFasmanPredictor,
    WaveletParameters,
    cleanup_structure,
    continuous_wavelet_transform,
    coverage,
    extend_bounds,
    find_nucleation_sites,
    morlet,
    resolve_coverage,
)


class TestTransform:
    """Tests for the single-scale Morlet transform."""

    def test_morlet_at_zero(self):
        assert morlet(0.0) == 1.0

    def test_morlet_is_even(self):
        t = np.linspace(0.1, 3.0, 7)
        np.testing.assert_allclose(morlet(t), morlet(-t))

    def test_zero_signal(self):
        np.testing.assert_array_equal(continuous_wavelet_transform(np.zeros(12)), np.zeros(12))

    def test_empty_signal(self):
        assert continuous_wavelet_transform([]).shape == (0,)

    def test_single_impulse(self):
        # Only k == b contributes: morlet(0) / sqrt(scale)
        coefficients = continuous_wavelet_transform([2.0], scale=4.0)
        assert coefficients[0] == pytest.approx(1.0)

    def test_matches_direct_sum(self):
        signal = np.array([0.87, 2.17, 0.0, 3.15, 1.52, 0.07, 2.87])
        scale = 2.0
        half = int(3 * scale)
        expected = []
        for b in range(len(signal)):
            total = 0.0
            for k in range(b - half, b + half + 1):
                if 0 <= k < len(signal):
                    total += signal[k] * morlet((k - b) / scale)
            expected.append(total / np.sqrt(scale))
        np.testing.assert_allclose(continuous_wavelet_transform(signal, scale), expected)


class TestNucleationSites:

    def test_interior_extrema(self):
        assert find_nucleation_sites([0.0, 1.0, 0.0, -1.0, 0.0]) == [1, 3]

    def test_endpoints_never_sites(self):
        assert find_nucleation_sites([-5.0, 1.0, -5.0, 1.0]) == [1, 2]

    def test_noise_floor_is_strict(self):
        assert find_nucleation_sites([0.0, 0.1, 0.0]) == []
        assert find_nucleation_sites([0.0, 0.11, 0.0]) == [1]

    def test_plateau_is_not_extremum(self):
        assert find_nucleation_sites([0.0, 1.0, 1.0, 0.0]) == []


class TestExtendBounds:
    """Tests for inclusive bound extension from a site."""

    def test_uniform_high_scores(self):
        scores = [1.5] * 12
        # left stops once it falls below 4; right stops at n - 4
        assert extend_bounds(6, scores, 1.0) == (3, 8)

    def test_low_scores_do_not_move(self):
        assert extend_bounds(6, [0.5] * 12, 1.0) == (6, 6)

    def test_seed_near_edges(self):
        scores = [1.5] * 12
        assert extend_bounds(1, scores, 1.0) == (1, 8)
        assert extend_bounds(10, scores, 1.0) == (3, 10)

    def test_coverage_marks_inclusive_span(self):
        mask = coverage([6], [1.5] * 12, 1.0)
        assert mask.tolist() == [False] * 3 + [True] * 6 + [False] * 3

    def test_coverage_without_sites(self):
        assert not coverage([], [1.5] * 5, 1.0).any()


class TestResolution:

    def test_resolve_coverage(self):
        helix_mask = [True, True, False, False]
        strand_mask = [True, False, True, False]
        assert resolve_coverage(helix_mask, strand_mask, [1.0, 1, 1, 1], [1.0, 1, 1, 1]) == "HHEC"

    def test_single_position_propensity_decides(self):
        assert resolve_coverage([True], [True], [0.9], [1.2]) == "E"

    def test_cleanup_short_runs(self):
        assert cleanup_structure("HHCHHHCEC") == "CCCHHHCCC"
        assert cleanup_structure("EECE") == "EECC"

    def test_cleanup_keeps_long_runs(self):
        assert cleanup_structure("HHHEE") == "HHHEE"


class TestImprovedPipeline:

    def test_noise_floor_above_signal_gives_coil(self):
        predictor = ImprovedChouFasmanPredictor(parameters=WaveletParameters(noise_floor=1e9))
        sequence = "VLSEGEWQLVLHVWAKVEADVAGHGQDILIRLFKSHPETLEKF"
        assert predictor.predict_structure(sequence) == "C" * len(sequence)

    def test_empty(self):
        assert ImprovedChouFasmanPredictor().predict_structure("") == ""

    def test_extension_at_exact_threshold(self):
        # T,C,M,A averages exactly 1.0 on the helix scale
        sequence = "VEKLAVWNMLTTCMAA"
        predictor = ImprovedChouFasmanPredictor()
        helix_scores = predictor.scales.values(sequence, Conformation.HELIX)
        assert extend_bounds(14, helix_scores, 1.0) == (13, 14)
        assert predictor.predict_structure(sequence) == "CCCCCEEECEEEECCC"
