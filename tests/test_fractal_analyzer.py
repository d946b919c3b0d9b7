import math
import pathlib
import sys
import unittest

import numpy as np

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from signalcomplexity.analysis.features import (  # noqa: E402
    BoxCountingResult,
    CorrelationResult,
    HiguchiResult,
)
from signalcomplexity.analysis.fractal import (  # noqa: E402
    FractalAnalyzer,
    assess_complexity,
    classify_dfa_exponent,
    correlation_integrals,
    count_boxes,
    dfa_fluctuation,
    higuchi_length,
)
from signalcomplexity.errors import ConfigurationError  # noqa: E402

DFA_CLASSES = {"anti-persistent", "random", "persistent", "non-stationary"}


def _walk_floats(payload):
    if isinstance(payload, dict):
        for value in payload.values():
            yield from _walk_floats(value)
    elif isinstance(payload, (list, tuple)):
        for value in payload:
            yield from _walk_floats(value)
    elif isinstance(payload, (int, float)) and not isinstance(payload, bool):
        yield float(payload)


class DegenerateInputTest(unittest.TestCase):
    def test_constant_signal_yields_unit_dimensions(self):
        result = FractalAnalyzer().analyze(np.full(128, 3.0))

        self.assertEqual(result.box_counting.dimension, 1.0)
        self.assertEqual(result.correlation.dimension, 1.0)
        self.assertEqual(result.higuchi.dimension, 1.0)
        self.assertEqual(result.dfa.exponent, 0.5)
        self.assertEqual(result.dfa.classification, "random")

    def test_empty_signal(self):
        result = FractalAnalyzer().analyze([])

        self.assertEqual(result.box_counting, BoxCountingResult())
        self.assertEqual(result.correlation, CorrelationResult())
        self.assertEqual(result.higuchi, HiguchiResult())
        self.assertEqual(result.dfa.exponent, 0.5)
        self.assertEqual(result.complexity.average_dimension, 1.0)
        self.assertEqual(result.complexity.dimension_variance, 0.0)
        self.assertEqual(result.complexity.complexity, "low")
        self.assertEqual(result.complexity.consistency, "high")

    def test_too_short_for_two_box_sizes(self):
        result = FractalAnalyzer().box_counting_dimension([0.0, 1.0, 0.5, 0.2, 0.9])
        self.assertEqual(result.dimension, 1.0)

    def test_every_field_finite_for_all_lengths(self):
        rng = np.random.default_rng(5)
        analyzer = FractalAnalyzer()
        for n in range(0, 80):
            for signal in (rng.normal(size=n), np.zeros(n), np.arange(n, dtype=float)):
                with self.subTest(n=n):
                    values = list(_walk_floats(analyzer.analyze(signal).to_mapping()))
                    self.assertTrue(all(math.isfinite(v) for v in values))

    def test_non_finite_samples_are_dropped(self):
        rng = np.random.default_rng(9)
        clean = rng.normal(size=120)
        dirty = np.insert(clean, [5, 40, 90], [np.nan, np.inf, -np.inf])
        analyzer = FractalAnalyzer()

        expected = analyzer.analyze(clean)
        actual = analyzer.analyze(dirty)

        self.assertEqual(actual.box_counting.dimension, expected.box_counting.dimension)
        self.assertEqual(actual.higuchi.dimension, expected.higuchi.dimension)
        self.assertEqual(actual.dfa.exponent, expected.dfa.exponent)


class BoxCountingTest(unittest.TestCase):
    def test_count_boxes(self):
        self.assertEqual(count_boxes(np.array([0.0, 0.5, 1.0, 0.25]), 2), 4)
        self.assertEqual(count_boxes(np.zeros(8), 4), 2)

    def test_box_sizes_and_goodness(self):
        rng = np.random.default_rng(1)
        result = FractalAnalyzer().box_counting_dimension(rng.normal(size=256))

        self.assertEqual([size for size, _ in result.boxes], [2, 4, 8, 16, 32, 64])
        self.assertGreaterEqual(result.goodness, 0.0)
        self.assertLessEqual(result.goodness, 1.0)
        self.assertTrue(math.isfinite(result.dimension))

    def test_dimension_is_negated_log_log_slope(self):
        rng = np.random.default_rng(2)
        result = FractalAnalyzer().box_counting_dimension(rng.normal(size=256))
        sizes = np.log([s for s, _ in result.boxes])
        counts = np.log([c for _, c in result.boxes])

        slope = np.polyfit(sizes, counts, 1)[0]

        self.assertAlmostEqual(result.dimension, -slope)


class CorrelationDimensionTest(unittest.TestCase):
    def test_correlation_integrals(self):
        points = np.array([[0.0, 0.0], [3.0, 4.0], [0.0, 1.0]])
        radii = np.array([0.5, 1.0, 1.5, 5.0, 5.1])

        integrals = correlation_integrals(points, radii)

        np.testing.assert_allclose(integrals, [0.0, 0.0, 1 / 3, 2 / 3, 1.0])

    def test_correlation_integrals_independent_of_block_size(self):
        rng = np.random.default_rng(5)
        points = rng.uniform(size=(57, 2))
        radii = np.exp(np.linspace(np.log(0.01), 0.0, 25))

        full = correlation_integrals(points, radii, block_rows=1000)
        for block_rows in (1, 7, 56):
            with self.subTest(block_rows=block_rows):
                np.testing.assert_allclose(
                    correlation_integrals(points, radii, block_rows=block_rows), full
                )
        self.assertTrue(np.all(np.diff(full) >= 0))

    def test_curve_shape(self):
        rng = np.random.default_rng(3)
        result = FractalAnalyzer().correlation_dimension(rng.uniform(size=200))

        self.assertEqual(len(result.correlations), 100)
        distances = [d for d, _ in result.correlations]
        values = [c for _, c in result.correlations]
        self.assertAlmostEqual(distances[0], 0.01)
        self.assertLess(distances[-1], 1.0)
        self.assertTrue(all(0.0 <= c <= 1.0 for c in values))
        self.assertTrue(all(b >= a for a, b in zip(values, values[1:])))
        self.assertGreaterEqual(result.dimension, 0.0)

    def test_custom_radius_grid(self):
        analyzer = FractalAnalyzer(correlation={"numPoints": 10, "minDistance": 0.1})
        result = analyzer.correlation_dimension(np.sin(np.arange(64) / 3.0))

        self.assertEqual(len(result.correlations), 10)
        self.assertAlmostEqual(result.correlations[0][0], 0.1)


class HiguchiTest(unittest.TestCase):
    def test_higuchi_length_of_ramp(self):
        self.assertAlmostEqual(higuchi_length(np.arange(10, dtype=float), 2), 4.5)

    def test_white_noise_is_rough(self):
        rng = np.random.default_rng(4)
        result = FractalAnalyzer().higuchi_dimension(rng.normal(size=1024))

        self.assertGreater(result.dimension, 1.7)
        self.assertLessEqual(result.dimension, 2.0)
        self.assertEqual([k for k, _ in result.curves], list(range(2, 21)))

    def test_smooth_curve_is_near_one(self):
        signal = np.sin(2 * np.pi * np.arange(512) / 200.0)
        result = FractalAnalyzer().higuchi_dimension(signal)

        self.assertGreaterEqual(result.dimension, 1.0)
        self.assertLess(result.dimension, 1.2)


class DFATest(unittest.TestCase):
    def test_window_sizes_grow_geometrically(self):
        rng = np.random.default_rng(6)
        result = FractalAnalyzer().detrended_fluctuation(rng.normal(size=64))

        self.assertEqual(
            [size for size, _ in result.fluctuations],
            [4, 5, 6, 7, 8, 9, 10, 12, 14, 16],
        )

    def test_white_noise_exponent_near_half(self):
        rng = np.random.default_rng(8)
        result = FractalAnalyzer().detrended_fluctuation(rng.normal(size=2048))

        self.assertGreater(result.exponent, 0.3)
        self.assertLess(result.exponent, 0.8)

    def test_random_walk_is_non_stationary(self):
        rng = np.random.default_rng(10)
        result = FractalAnalyzer().detrended_fluctuation(np.cumsum(rng.normal(size=2048)))

        self.assertGreater(result.exponent, 1.2)
        self.assertEqual(result.classification, "non-stationary")

    def test_exponent_bounded_and_classified(self):
        rng = np.random.default_rng(12)
        analyzer = FractalAnalyzer()
        signals = [
            rng.normal(size=16),
            rng.normal(size=300),
            np.cumsum(np.cumsum(rng.normal(size=300))),
            np.tile([1.0, -1.0], 100),
            np.sin(np.arange(200) / 5.0),
        ]
        for signal in signals:
            result = analyzer.detrended_fluctuation(signal)
            self.assertGreaterEqual(result.exponent, 0.0)
            self.assertLessEqual(result.exponent, 2.0)
            self.assertIn(result.classification, DFA_CLASSES)

    def test_short_signal_sentinel(self):
        result = FractalAnalyzer().detrended_fluctuation(np.arange(15, dtype=float))
        self.assertEqual(result.exponent, 0.5)
        self.assertEqual(result.classification, "random")
        self.assertEqual(result.fluctuations, ())

    def test_linear_profile_has_no_fluctuation(self):
        self.assertAlmostEqual(dfa_fluctuation(np.arange(32, dtype=float), 8), 0.0)

    def test_classification_boundaries(self):
        self.assertEqual(classify_dfa_exponent(0.3), "anti-persistent")
        self.assertEqual(classify_dfa_exponent(0.5), "random")
        self.assertEqual(classify_dfa_exponent(0.7), "persistent")
        self.assertEqual(classify_dfa_exponent(1.0), "non-stationary")
        self.assertEqual(classify_dfa_exponent(1.7), "non-stationary")


class ComplexityAssessmentTest(unittest.TestCase):
    @staticmethod
    def _assess(box, corr, hig):
        return assess_complexity(
            BoxCountingResult(dimension=box),
            CorrelationResult(dimension=corr),
            HiguchiResult(dimension=hig),
        )

    def test_levels(self):
        self.assertEqual(self._assess(1.0, 1.0, 1.0).complexity, "low")
        self.assertEqual(self._assess(1.3, 1.3, 1.3).complexity, "medium")
        self.assertEqual(self._assess(2.0, 2.0, 2.0).complexity, "high")

    def test_low_variance_is_high_consistency(self):
        assessment = self._assess(1.0, 1.5, 1.8)

        self.assertAlmostEqual(assessment.average_dimension, 4.3 / 3)
        self.assertAlmostEqual(assessment.dimension_variance, np.var([1.0, 1.5, 1.8]))
        self.assertEqual(assessment.consistency, "medium")
        self.assertEqual(self._assess(1.2, 1.2, 1.3).consistency, "high")
        self.assertEqual(self._assess(0.0, 1.0, 2.0).consistency, "low")


class FractalConfigurationTest(unittest.TestCase):
    def test_reconfigure_merges_nested_sections(self):
        analyzer = FractalAnalyzer()
        config = analyzer.reconfigure(higuchi={"maxK": 5}, maxBoxSize=16)

        self.assertEqual(config.higuchi.max_k, 5)
        self.assertEqual(config.higuchi.min_k, 2)
        self.assertEqual(config.max_box_size, 16)
        self.assertIs(analyzer.config, config)

    def test_dfa_section_accepts_overlap(self):
        analyzer = FractalAnalyzer(
            dfa={"minWindowSize": 4, "maxWindowSize": 64, "overlap": 0.5}
        )
        self.assertEqual(analyzer.config.dfa.overlap, 0.5)

        config = analyzer.reconfigure(dfa={"overlap": 0.25})
        self.assertEqual(config.dfa.overlap, 0.25)
        self.assertEqual(config.dfa.max_window_size, 64)

    def test_invalid_configuration_rejected(self):
        with self.assertRaises(ConfigurationError):
            FractalAnalyzer(min_box_size=0)
        with self.assertRaises(ConfigurationError):
            FractalAnalyzer(higuchi={"min_k": 5, "max_k": 2})
        with self.assertRaises(ConfigurationError):
            FractalAnalyzer(correlation={"min_distance": -1.0})

    def test_result_mapping_keys(self):
        payload = FractalAnalyzer().analyze(np.sin(np.arange(64) / 4.0)).to_mapping()

        self.assertEqual(
            set(payload),
            {"boxCounting", "correlation", "higuchi", "dfa", "complexity", "timestamp"},
        )
        self.assertEqual(
            set(payload["complexity"]),
            {"averageDimension", "dimensionVariance", "complexity", "consistency"},
        )


def test_any_long_noisy_signal_gets_a_dfa_class() -> None:
    rng = np.random.default_rng(13)
    for n in (16, 17, 64, 500):
        result = FractalAnalyzer().analyze(rng.normal(size=n))
        assert result.dfa.classification in DFA_CLASSES
        assert 1.0 <= result.higuchi.dimension <= 2.0


if __name__ == "__main__":
    unittest.main()
