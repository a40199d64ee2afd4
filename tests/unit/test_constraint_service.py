#!/usr/bin/env python3
"""
Unit tests for minimum size derivation and validation rule synthesis.
"""

import pytest

from image_derivatives.models import ConstraintSet, FieldSpecification, ThumbnailSpec
from image_derivatives.services.derivative_pipeline.services.constraint_service import (
    build_constraints,
    format_dimensions_clause,
    minimum_size,
    synthesize_rule,
)


@pytest.fixture
def two_thumb_field():
    return FieldSpecification(
        name="image",
        thumbnails={
            "thumb_a": ThumbnailSpec(width=100, height=50, policy="crop"),
            "thumb_b": ThumbnailSpec(width=80, height=120, policy="crop"),
        },
    )


@pytest.mark.unit
@pytest.mark.derivatives
class TestMinimumSize:
    """Test suite for minimum_size."""

    def test_minimum_size_with_retina(self, two_thumb_field):
        assert minimum_size(two_thumb_field, 2) == (200, 240)

    def test_minimum_size_retina_disabled(self, two_thumb_field):
        assert minimum_size(two_thumb_field, None) == (100, 120)

    def test_minimum_size_ignores_unconstrained_axis(self):
        field = FieldSpecification(
            name="cover",
            thumbnails={"wide": ThumbnailSpec(width=600, policy="resize")},
        )
        assert minimum_size(field, 2) == (1200, 0)

    def test_minimum_size_without_thumbnails(self):
        assert minimum_size(FieldSpecification(name="plain"), 2) == (0, 0)

    def test_build_constraints(self, two_thumb_field):
        constraints = build_constraints(two_thumb_field, 2, 1024)
        assert constraints.min_size == (200, 240)
        assert constraints.max_bytes == 1024


@pytest.mark.unit
@pytest.mark.derivatives
class TestSynthesizeRule:
    """Test suite for synthesize_rule."""

    @pytest.fixture
    def constraints(self):
        return ConstraintSet(min_width=200, min_height=240, max_bytes=5242880)

    # ============================================================================
    # CLAUSE FORMATTING TESTS
    # ============================================================================

    def test_dimensions_clause(self, constraints):
        assert (
            format_dimensions_clause(constraints)
            == "dimensions:min_width=200,min_height=240"
        )

    def test_dimensions_clause_omits_zero_bound(self):
        constraints = ConstraintSet(min_width=1200, min_height=0, max_bytes=10)
        assert format_dimensions_clause(constraints) == "dimensions:min_width=1200"

    def test_dimensions_clause_all_zero(self):
        assert format_dimensions_clause(ConstraintSet(max_bytes=10)) is None

    # ============================================================================
    # MERGE TESTS
    # ============================================================================

    def test_synthesize_from_empty_rule(self, constraints):
        assert (
            synthesize_rule(None, constraints)
            == "dimensions:min_width=200,min_height=240|max:5242880"
        )
        assert synthesize_rule("", constraints) == synthesize_rule(None, constraints)

    def test_synthesize_keeps_other_clauses(self, constraints):
        rule = synthesize_rule("required|image|mimes:jpg,png", constraints)
        assert rule == (
            "required|image|mimes:jpg,png|"
            "dimensions:min_width=200,min_height=240|max:5242880"
        )

    def test_synthesize_replaces_existing_constraints(self, constraints):
        rule = synthesize_rule(
            "required|max:100|dimensions:min_width=10|image|max:200", constraints
        )
        assert rule == (
            "required|image|dimensions:min_width=200,min_height=240|max:5242880"
        )

    def test_synthesize_is_idempotent(self, constraints):
        once = synthesize_rule("required|image", constraints)
        twice = synthesize_rule(once, constraints)
        assert once == twice
        assert twice.count("dimensions:") == 1
        assert twice.count("max:") == 1

    def test_synthesize_drops_duplicate_clauses(self, constraints):
        rule = synthesize_rule("required| required |image", constraints)
        assert rule.startswith("required|image|")

    def test_synthesize_max_override(self, constraints):
        rule = synthesize_rule(None, constraints, max_upload_bytes=2048)
        assert rule.endswith("|max:2048")

    def test_synthesize_without_dimensions(self):
        rule = synthesize_rule("image", ConstraintSet(max_bytes=99))
        assert rule == "image|max:99"
