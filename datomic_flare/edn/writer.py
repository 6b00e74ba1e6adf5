"""EDN writer: Python values to Datomic EDN literals."""

from __future__ import annotations

import math
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from datomic_flare.edn.datetime_utils import format_instant
from datomic_flare.edn.types import Keyword
from datomic_flare.exceptions import UnsupportedValueError

# Key of an entity reference, e.g. {"_id": 17592186045418}
ID_KEY = "_id"


def dumps(obj: Any) -> str:
    """Serialize a Python value to its EDN literal.

    Args:
        obj: The value to serialize.

    Returns:
        The EDN text for the value.

    Raises:
        UnsupportedValueError: If the value has no EDN literal form, or is
            a dict that is not an entity reference.

    Examples:
        >>> dumps('The "fire"')
        '"The \\\\"fire\\\\""'
        >>> dumps([1, Keyword("a"), None])
        '[1 :a nil]'
        >>> dumps({"_id": 5})
        '{:db/id 5}'
    """
    if obj is None:
        return "nil"

    if isinstance(obj, bool):
        return "true" if obj else "false"

    if isinstance(obj, Keyword):
        return obj.to_edn()

    if isinstance(obj, Enum):
        return _serialize_enum(obj)

    if isinstance(obj, str):
        return _serialize_string(obj)

    if isinstance(obj, float) and not math.isfinite(obj):
        raise UnsupportedValueError(
            f"Unsupported value type: non-finite {type(obj).__name__}", value=obj
        )

    if isinstance(obj, (int, float)):
        return str(obj)

    if isinstance(obj, Decimal):
        return _serialize_decimal(obj)

    # datetime is a subclass of date
    if isinstance(obj, date):
        return f'#inst "{format_instant(obj)}"'

    if isinstance(obj, UUID):
        return f'#uuid "{obj}"'

    if isinstance(obj, (list, tuple)):
        return "[" + " ".join(dumps(item) for item in obj) + "]"

    if isinstance(obj, dict):
        return _serialize_reference(obj)

    raise UnsupportedValueError(
        f"Unsupported value type: {type(obj).__name__}", value=obj
    )


def _serialize_string(s: str) -> str:
    """Quote a string, escaping only backslashes and double quotes."""
    escaped = s.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _serialize_enum(member: Enum) -> str:
    if isinstance(member.value, str):
        return f":{member.value}"
    return f":{member.name}"


def _serialize_decimal(value: Decimal) -> str:
    """Fixed-point text with the bigdec ``M`` suffix.

    Trailing fractional zeros are dropped but an integral value keeps
    one decimal place, so ``Decimal("10")`` writes as ``10.0M``.
    """
    if not value.is_finite():
        raise UnsupportedValueError(
            f"Unsupported value type: non-finite {type(value).__name__}", value=value
        )
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0")
        if text.endswith("."):
            text += "0"
    else:
        text += ".0"
    return f"{text}M"


def _serialize_reference(mapping: dict) -> str:
    if ID_KEY not in mapping:
        raise UnsupportedValueError(
            f"Missing {ID_KEY} for reference: {type(mapping).__name__}", value=mapping
        )
    return f"{{:db/id {mapping[ID_KEY]}}}"
