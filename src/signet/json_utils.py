"""
JSON Utilities
==============

Thin wrappers around orjson used for the metadata envelope and the JSON
payload serializer.

orjson serializes datetime objects natively (RFC 3339) and always works in
bytes, which is what signing needs.
"""

import logging
from typing import Any, Union

import orjson

logger = logging.getLogger(__name__)

JSONDecodeError = orjson.JSONDecodeError

_DUMP_OPTIONS = orjson.OPT_NON_STR_KEYS | orjson.OPT_UTC_Z


def dumps(obj: Any) -> bytes:
    """
    Serialize object to JSON bytes.

    Non-string dictionary keys are converted to strings and UTC datetimes are
    written with a Z suffix.

    Returns:
        UTF-8 encoded JSON
    """
    return orjson.dumps(obj, option=_DUMP_OPTIONS)


def loads(s: Union[str, bytes]) -> Any:
    """Deserialize JSON text or bytes."""
    return orjson.loads(s)
