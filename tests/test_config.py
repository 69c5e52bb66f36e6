"""Tests for configuration, enums and diagnostics."""

import pytest

from polyunion import (
    CancellationToken,
    ConfigurationError,
    Diagnostic,
    DiagnosticReason,
    ReductionStrategy,
    UnionConfig,
)
from polyunion.core import coerce_enum
from polyunion.diagnostics import count_by_reason, first_with_reason


class TestUnionConfig:
    """Tests for UnionConfig validation."""

    def test_defaults(self):
        """Test default settings."""
        config = UnionConfig()

        assert config.snap_tolerance == 0.0
        assert config.reduction == ReductionStrategy.BALANCED_TREE
        assert config.check_simple is True
        assert config.max_workers == 1

    def test_string_reduction(self):
        """Test that reduction accepts string values in any case."""
        assert UnionConfig(reduction='LEFT_FOLD').reduction == ReductionStrategy.LEFT_FOLD
        assert UnionConfig(reduction='balanced_tree').reduction == ReductionStrategy.BALANCED_TREE

    def test_unknown_reduction(self):
        """Test that an unknown strategy is rejected."""
        with pytest.raises(ConfigurationError, match="left_fold"):
            UnionConfig(reduction='random')

    @pytest.mark.parametrize("tolerance", [-1.0, float('inf'), "abc"])
    def test_bad_tolerance(self, tolerance):
        """Test that invalid snap tolerances are rejected."""
        with pytest.raises(ConfigurationError):
            UnionConfig(snap_tolerance=tolerance)

    @pytest.mark.parametrize("workers", [0, -2, 1.5])
    def test_bad_workers(self, workers):
        """Test that invalid worker counts are rejected."""
        with pytest.raises(ConfigurationError):
            UnionConfig(max_workers=workers)

    def test_from_mapping(self):
        """Test building a config from a plain dict."""
        config = UnionConfig.from_mapping({'snap_tolerance': '0.5', 'reduction': 'left_fold'})

        assert config.snap_tolerance == 0.5
        assert config.reduction == ReductionStrategy.LEFT_FOLD

    def test_from_mapping_unknown_key(self):
        """Test that unknown keys are reported."""
        with pytest.raises(ConfigurationError, match="tolerance"):
            UnionConfig.from_mapping({'tolerance': 1})

    def test_configuration_error_is_value_error(self):
        """Test that configuration errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            coerce_enum('nope', ReductionStrategy)


class TestDiagnostic:
    """Tests for Diagnostic records."""

    def test_to_dict(self):
        """Test the serialised layout of a pairwise failure."""
        diag = Diagnostic('P', DiagnosticReason.UNION_FAILED, (2, 3), "boom")

        assert diag.to_dict() == {
            'groupKey': 'P',
            'reason': 'union_failed',
            'memberIndex': [2, 3],
            'message': "boom",
        }

    def test_with_group(self):
        """Test re-keying a diagnostic."""
        diag = Diagnostic('', DiagnosticReason.SNAP_COLLAPSE, 1).with_group('Q')

        assert diag.group_key == 'Q'
        assert diag.member_index == 1

    def test_counting(self):
        """Test reason counts and lookup."""
        diags = [
            Diagnostic('P', DiagnosticReason.INVALID_RING, 0),
            Diagnostic('P', DiagnosticReason.INVALID_RING, 1),
            Diagnostic('P', DiagnosticReason.EMPTY_GROUP),
        ]

        assert count_by_reason(diags) == {
            DiagnosticReason.INVALID_RING: 2,
            DiagnosticReason.EMPTY_GROUP: 1,
        }
        assert first_with_reason(diags, DiagnosticReason.EMPTY_GROUP) is diags[2]
        assert first_with_reason(diags, DiagnosticReason.CANCELLED) is None


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_cancel(self):
        """Test the cancelled flag and reason."""
        token = CancellationToken()
        assert not token.cancelled

        token.cancel("done")

        assert token.cancelled
        assert token.reason == "done"
        assert "cancelled" in repr(token)
