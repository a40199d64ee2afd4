# image_derivatives/services/derivative_pipeline/services/constraint_service.py
"""
Constraint Service

Derives the minimum source dimensions an image field accepts and merges them,
with the maximum upload size, into the field's pipe-delimited validation rule.
"""

from typing import List, Optional, Tuple

from ....enums import LogEmoji, LoggerName, LogSource
from ....models.constraint_model import ConstraintSet
from ....models.image_field_model import FieldSpecification
from ....services.logger import get_service_logger

logger = get_service_logger(LoggerName.CONSTRAINT_SERVICE, LogSource.PIPELINE)

RULE_SEPARATOR = "|"
DIMENSIONS_RULE_PREFIX = "dimensions:"
MAX_RULE_PREFIX = "max:"


def minimum_size(
    field_spec: FieldSpecification, retina_factor: Optional[int]
) -> Tuple[int, int]:
    """
    Minimum source size that can feed every thumbnail of a field.

    Args:
        field_spec: Image field specification
        retina_factor: Retina factor, or None when retina is disabled

    Returns:
        (max thumbnail width * factor, max thumbnail height * factor)
    """
    min_width = 0
    min_height = 0
    for thumbnail in field_spec.thumbnails.values():
        min_width = max(min_width, thumbnail.width or 0)
        min_height = max(min_height, thumbnail.height or 0)

    factor = retina_factor or 1
    return (min_width * factor, min_height * factor)


def build_constraints(
    field_spec: FieldSpecification,
    retina_factor: Optional[int],
    max_upload_bytes: int,
) -> ConstraintSet:
    min_width, min_height = minimum_size(field_spec, retina_factor)
    return ConstraintSet(
        min_width=min_width, min_height=min_height, max_bytes=max_upload_bytes
    )


def _is_replaced_clause(clause: str) -> bool:
    return clause.startswith(DIMENSIONS_RULE_PREFIX) or clause.startswith(
        MAX_RULE_PREFIX
    )


def format_dimensions_clause(constraints: ConstraintSet) -> Optional[str]:
    """dimensions:min_width=W,min_height=H with zero bounds omitted"""
    restrictions = []
    if constraints.min_width:
        restrictions.append(f"min_width={constraints.min_width}")
    if constraints.min_height:
        restrictions.append(f"min_height={constraints.min_height}")
    if not restrictions:
        return None
    return DIMENSIONS_RULE_PREFIX + ",".join(restrictions)


def synthesize_rule(
    existing_rule: Optional[str],
    constraints: ConstraintSet,
    max_upload_bytes: Optional[int] = None,
) -> str:
    """
    Merge dimension and size constraints into a validation rule string.

    Every existing "dimensions:" and "max:" clause is dropped before fresh
    ones are appended, so running the synthesis on its own output returns
    the same string.

    Args:
        existing_rule: Current pipe-delimited rule (may be None or empty)
        constraints: Constraints derived for the field
        max_upload_bytes: Overrides constraints.max_bytes when given

    Returns:
        New pipe-delimited rule string
    """
    clauses: List[str] = []
    for clause in (existing_rule or "").split(RULE_SEPARATOR):
        clause = clause.strip()
        if clause and not _is_replaced_clause(clause) and clause not in clauses:
            clauses.append(clause)

    dimensions_clause = format_dimensions_clause(constraints)
    if dimensions_clause:
        clauses.append(dimensions_clause)

    max_bytes = max_upload_bytes if max_upload_bytes is not None else constraints.max_bytes
    clauses.append(f"{MAX_RULE_PREFIX}{max_bytes}")

    rule = RULE_SEPARATOR.join(clauses)

    logger.debug(
        f"Synthesized rule: {rule}",
        emoji=LogEmoji.RULE,
        extra_context={"operation": "synthesize_rule", "previous": existing_rule},
    )
    return rule
