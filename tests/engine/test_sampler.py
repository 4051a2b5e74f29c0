"""
Tests for range sampling.

Tests cover:
- Sample count and positions
- Invalid samples kept in place with their reason
- Range validation
- Lazy, single-pass iteration
- Sampling in slices
"""

import logging
import math

import pytest

from grapher.core.config import GrapherSettings
from grapher.core.errors import InvalidReason, RangeError, UnknownIdentifierError
from grapher.expression import Expression
from grapher.points import InvalidPoint, Point
from grapher.sampler import SampleRange, sample, sample_slice


class TestSampleRange:
    """Test range construction and validation."""

    def test_default_range_count(self):
        """Test that [-10, 10) at density 10 gives 200 samples."""
        sample_range = SampleRange(-10, 10, density=10)
        assert sample_range.count == 200
        assert len(sample_range) == 200
        assert sample_range.step == pytest.approx(0.1)

    def test_positions(self):
        """Test that positions start at x_min and grow by step."""
        sample_range = SampleRange(0, 2, density=2)
        assert [sample_range.x_at(i) for i in range(sample_range.count)] == [0.0, 0.5, 1.0, 1.5]

    def test_count_tolerates_float_noise(self):
        """Test that density * span just below an integer still counts it."""
        assert SampleRange(0, 0.29, density=100).count == 29

    def test_short_span_gives_no_samples(self):
        """Test that a span below one sample gives zero samples."""
        assert SampleRange(0, 0.05, density=10).count == 0

    def test_empty_range(self):
        """Test that x_min == x_max gives no samples."""
        assert SampleRange(3, 3).count == 0

    def test_reversed_range(self):
        """Test that x_min > x_max is rejected."""
        with pytest.raises(RangeError) as exc_info:
            SampleRange(2, 1)
        assert exc_info.value.details["field"] == "x_min"

    @pytest.mark.parametrize("density", [0, -1, 2.5, True, "10"])
    def test_invalid_density(self, density):
        """Test that density must be a positive integer."""
        with pytest.raises(RangeError):
            SampleRange(0, 1, density=density)

    @pytest.mark.parametrize("bound", [math.nan, math.inf, -math.inf, "0", None])
    def test_invalid_bounds(self, bound):
        """Test that bounds must be finite numbers."""
        with pytest.raises(RangeError):
            SampleRange(bound, 1)

    def test_from_settings(self):
        """Test building the configured range."""
        settings = GrapherSettings(X_MIN=-1, X_MAX=1, DENSITY=5)
        assert SampleRange.from_settings(settings).count == 10

    def test_from_environment(self, monkeypatch):
        """Test that the environment configures the range."""
        monkeypatch.setenv("GRAPHER_X_MIN", "-3")
        monkeypatch.setenv("GRAPHER_X_MAX", "3")
        monkeypatch.setenv("GRAPHER_DENSITY", "4")
        assert SampleRange.from_settings(GrapherSettings()).count == 24


class TestSample:
    """Test sampling an expression."""

    def test_linear(self, sample_range_factory):
        """Test that every sample of a polynomial is valid."""
        results = list(sample("2x+1", sample_range_factory(-10, 10)))

        assert len(results) == 200
        assert all(isinstance(r, Point) for r in results)
        assert results[0].x == -10.0
        assert results[0].y == -19.0

    def test_positions_strictly_increase(self, sample_range_factory):
        """Test that x grows across the sequence."""
        xs = [r.x for r in sample("x", sample_range_factory(-3, 7, density=3))]
        assert all(a < b for a, b in zip(xs, xs[1:]))

    def test_reciprocal_has_one_gap(self, sample_range_factory):
        """Test that 1/x over [-2, 2) fails only at x = 0."""
        results = list(sample(Expression("1/x"), sample_range_factory(-2, 2)))

        assert len(results) == 40
        invalid = [r for r in results if not r.is_valid]
        assert len(invalid) == 1
        assert invalid[0].x == 0.0
        assert invalid[0].reason == InvalidReason.DIVISION_BY_ZERO
        assert results[20] is invalid[0]

    def test_sqrt_invalid_left_of_zero(self, sample_range_factory):
        """Test that sqrt is invalid exactly where x < 0."""
        results = list(sample("sqrt(x)", sample_range_factory(-5, 5)))

        assert len(results) == 100
        for result in results:
            if result.x < 0:
                assert isinstance(result, InvalidPoint)
                assert result.reason == InvalidReason.NEGATIVE_EVEN_ROOT
            else:
                assert isinstance(result, Point)

    def test_log_reason(self, sample_range_factory):
        """Test the reason reported for log at non-positive x."""
        results = list(sample("log(x)", sample_range_factory(-1, 1)))
        reasons = {r.reason for r in results if not r.is_valid}
        assert reasons == {InvalidReason.NON_POSITIVE_LOG}

    def test_empty_range(self):
        """Test that an empty range yields nothing."""
        assert list(sample("x", SampleRange(1, 1))) == []

    def test_invalid_formula_raises_before_iteration(self, sample_range_factory):
        """Test that a bad formula fails when sample is called."""
        with pytest.raises(UnknownIdentifierError):
            sample("y", sample_range_factory(0, 1))

    def test_range_type_checked(self):
        """Test that a non-range argument is rejected."""
        with pytest.raises(RangeError):
            sample("x", (0, 1))

    def test_single_pass(self, sample_range_factory):
        """Test that the iterator is consumed once."""
        results = sample("x", sample_range_factory(0, 1))
        assert len(list(results)) == 10
        assert list(results) == []

    def test_sampling_is_repeatable(self, sample_range_factory):
        """Test that two samplings give identical sequences."""
        sample_range = sample_range_factory(-4, 4)
        assert list(sample("1/(x-1)", sample_range)) == list(sample("1/(x-1)", sample_range))

    def test_valid_points_are_finite(self, sample_range_factory):
        """Test that no valid point carries NaN or infinity."""
        for result in sample("tan(x) + 1/x", sample_range_factory(-10, 10)):
            if result.is_valid:
                assert math.isfinite(result.x) and math.isfinite(result.y)

    def test_debug_summary(self, caplog, sample_range_factory):
        """Test that a finished sampling logs a summary."""
        caplog.set_level(logging.DEBUG, logger="grapher.sampler")
        list(sample("1/x", sample_range_factory(-2, 2)))
        assert "40 samples, 1 invalid" in caplog.text


class TestSampleSlice:
    """Test sampling part of a range."""

    def test_slices_concatenate_to_full_sequence(self, sample_range_factory):
        """Test that consecutive slices reproduce sample()."""
        sample_range = sample_range_factory(-2, 2)
        full = list(sample("1/x", sample_range))
        pieces = (
            list(sample_slice("1/x", sample_range, 0, 15))
            + list(sample_slice("1/x", sample_range, 15, 30))
            + list(sample_slice("1/x", sample_range, 30, 40))
        )
        assert pieces == full

    def test_indices_are_clamped(self, sample_range_factory):
        """Test that out-of-range indices are clamped."""
        sample_range = sample_range_factory(0, 1)
        assert len(list(sample_slice("x", sample_range, -5, 1000))) == 10
        assert list(sample_slice("x", sample_range, 8, 3)) == []
