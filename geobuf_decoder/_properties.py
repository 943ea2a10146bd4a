import logging
import math
import re
from typing import Dict

import msgspec

from .geojson import Value

__all__ = ("build_properties", "build_value", "parse_string", "trim")

logger = logging.getLogger(__name__)


_TRIM = re.compile(r'^[\s"]+|[\s"]+$')
_INT = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def trim(value: str) -> str:
    """Strip surrounding whitespace and ``"`` characters"""
    return _TRIM.sub("", value)


def parse_string(value: str, trim_fallback: bool = False) -> Value:
    """Infer a native type for a string.

    Tries ``bool``, then a 64-bit ``int``, then a finite ``float``. If none
    match the string is returned unchanged (or trimmed, if ``trim_fallback``).

    Examples
    --------
    >>> parse_string("42"), parse_string("3.14"), parse_string("true")
    (42, 3.14, True)
    >>> parse_string("hello")
    'hello'
    """
    if value == "true":
        return True
    if value == "false":
        return False
    if _INT.fullmatch(value):
        out = int(value)
        if _INT64_MIN <= out <= _INT64_MAX:
            return out
    if _FLOAT.fullmatch(value):
        out = float(value)
        if math.isfinite(out):
            return out
    return trim(value) if trim_fallback else value


def _build_string(value, parse_string_as_type, trim_string_values):
    if parse_string_as_type:
        return parse_string(value, trim_fallback=trim_string_values)
    if trim_string_values:
        return trim(value)
    return value


def build_value(
    value,
    *,
    parse_string_as_type: bool = False,
    trim_string_values: bool = False,
    verbose: bool = False,
):
    """Convert a ``Data.Value`` message to its native value.

    Returns ``None`` if the message holds no value.
    """
    kind = value.WhichOneof("value_type")
    if kind == "string_value":
        return _build_string(
            value.string_value, parse_string_as_type, trim_string_values
        )
    elif kind == "double_value":
        return value.double_value
    elif kind == "pos_int_value":
        return value.pos_int_value
    elif kind == "neg_int_value":
        return -value.neg_int_value
    elif kind == "bool_value":
        return value.bool_value
    elif kind == "json_value":
        raw = value.json_value
        try:
            out = msgspec.json.decode(raw)
        except msgspec.DecodeError as exc:
            if verbose:
                logger.debug(
                    "Failed to parse JSON value %r (%s), using its string form",
                    raw,
                    exc,
                )
        else:
            if isinstance(out, (dict, list)):
                return out
            if verbose:
                logger.debug(
                    "JSON value %r is not an object or array, using its string form",
                    raw,
                )
        return _build_string(raw, parse_string_as_type, trim_string_values)
    return None


def build_properties(
    indexes,
    keys,
    values,
    *,
    parse_string_as_type: bool = False,
    trim_string_values: bool = False,
    verbose: bool = False,
) -> Dict[str, Value]:
    """Resolve ``(key_index, value_index)`` pairs into a properties dict.

    Parameters
    ----------
    indexes : sequence of int
        A flat array of index pairs.
    keys : sequence of str
        The message's shared key table.
    values : sequence of Data.Value
        The value table of the owning feature, geometry or collection.
    parse_string_as_type : bool, optional
        Whether to infer native types for string values.
    trim_string_values : bool, optional
        Whether to strip surrounding whitespace and quotes from string values.
    verbose : bool, optional
        Whether to log values that fall back to their string form.

    Returns
    -------
    properties : dict
        Pairs that reference a missing key or value are skipped.
    """
    out = {}
    nkeys = len(keys)
    nvalues = len(values)
    for i in range(0, len(indexes) - 1, 2):
        key_index = indexes[i]
        value_index = indexes[i + 1]
        if key_index >= nkeys or value_index >= nvalues:
            continue
        value = build_value(
            values[value_index],
            parse_string_as_type=parse_string_as_type,
            trim_string_values=trim_string_values,
            verbose=verbose,
        )
        if value is not None:
            out[keys[key_index]] = value
    return out
