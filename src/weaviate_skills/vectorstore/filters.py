"""Build Weaviate filters from plain dict expressions.

An expression is either a comparison::

    {"property": "year", "operator": "greater_than", "value": 2000}

or a combination of expressions::

    {"and": [expr, ...]}
    {"or": [expr, ...]}

The property name ``_id`` filters on the object UUID.
"""

import json
from typing import Any, Dict, Optional

from weaviate.classes.query import Filter
from weaviate.collections.classes.filters import _Filters

from ..exceptions import FilterError

OPERATORS = (
    "equal",
    "not_equal",
    "less_than",
    "less_or_equal",
    "greater_than",
    "greater_or_equal",
    "like",
    "contains_any",
    "contains_all",
    "is_none",
)

ID_OPERATORS = ("equal", "not_equal", "contains_any")
LIST_OPERATORS = ("contains_any", "contains_all")


def build_filter(expression: Optional[Any]):
    """
    Convert a filter expression into a Weaviate filter.

    Args:
        expression: Dict expression, an already built Weaviate filter, or None

    Returns:
        Weaviate filter, or None when no filtering was requested

    Raises:
        FilterError: If the expression is malformed
    """
    if expression is None:
        return None
    if isinstance(expression, _Filters):
        return expression
    if not isinstance(expression, dict):
        raise FilterError(
            f"Filter must be an object or a Weaviate filter, got {type(expression).__name__}"
        )
    if not expression:
        return None

    if "and" in expression or "or" in expression:
        return _build_combination(expression)

    return _build_comparison(expression)


def _build_combination(expression: Dict[str, Any]):
    if len(expression) != 1:
        raise FilterError("A combined filter must have exactly one 'and' or 'or' key")

    key = next(iter(expression))
    operands = expression[key]
    if not isinstance(operands, list) or not operands:
        raise FilterError(f"'{key}' requires a non-empty list of filters")

    filters = [build_filter(operand) for operand in operands]
    if any(f is None for f in filters):
        raise FilterError(f"'{key}' operands must not be empty")
    if key == "and":
        return Filter.all_of(filters)
    return Filter.any_of(filters)


def _build_comparison(expression: Dict[str, Any]):
    try:
        prop = expression["property"]
        operator = expression["operator"]
    except KeyError as e:
        raise FilterError(f"Filter is missing field: {e}")

    if operator not in OPERATORS:
        raise FilterError(
            f"Unknown filter operator: {operator}. Supported operators: {', '.join(OPERATORS)}"
        )
    if "value" not in expression:
        raise FilterError(f"Filter on '{prop}' is missing a value")

    value = expression["value"]
    if operator in LIST_OPERATORS and not isinstance(value, list):
        raise FilterError(f"'{operator}' requires a list value")

    if prop == "_id":
        if operator not in ID_OPERATORS:
            raise FilterError(f"'{operator}' is not supported for _id filters")
        target = Filter.by_id()
    else:
        target = Filter.by_property(prop)

    return getattr(target, operator)(value)


def parse_filter_json(text: Optional[str]):
    """Parse a JSON filter expression, as given on the command line."""
    if not text:
        return None
    try:
        expression = json.loads(text)
    except json.JSONDecodeError as e:
        raise FilterError(f"Invalid filter JSON: {e}")
    return build_filter(expression)
