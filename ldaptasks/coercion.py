"""
Attribute value coercion.

Directory servers hand us every attribute value as raw bytes.  This module
turns those into the values we return to callers, driven by the
:py:class:`~ldaptasks.definitions.AttributeSpec` list of the search request:

* ``string`` (the default): UTF-8 text.  A single value becomes a
  :py:class:`~ldaptasks.models.ScalarValue`; zero or several values become a
  :py:class:`~ldaptasks.models.ListValue`.
* ``byte``: the first value as uppercase hex, ``b"\\xab\\xcd"`` -> ``"ABCD"``.
* ``guid``: the first value as GUID text, using the mixed-endian layout Active
  Directory uses for ``objectGUID``.

Only the first value is used for ``byte`` and ``guid``; any further values are
dropped.
"""

import logging
import uuid
from collections.abc import Sequence

from .definitions import AttributeReturnType, AttributeSpec
from .exceptions import ProtocolError
from .models import Attribute, AttributeValue, ListValue, ScalarValue
from .typing import RawAttributes

logger = logging.getLogger(__name__)

#: The length of a binary GUID.
GUID_LENGTH = 16


def find_spec(name: str, requested: Sequence[AttributeSpec]) -> AttributeSpec | None:
    """
    Return the first spec in ``requested`` whose key matches ``name``
    case-insensitively, or ``None``.
    """
    for spec in requested:
        if spec.matches(name):
            return spec
    return None


def decode_value(raw: bytes | str) -> str:
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8", errors="replace")


def to_hex(raw: bytes) -> str:
    return raw.hex().upper()


def to_guid(raw: bytes) -> str:
    """
    Render a 16 byte binary GUID as text.

    Raises:
        ProtocolError: ``raw`` is not 16 bytes long

    """
    if len(raw) != GUID_LENGTH:
        msg = f"GUID value must be {GUID_LENGTH} bytes, got {len(raw)}"
        raise ProtocolError(msg)
    return str(uuid.UUID(bytes_le=bytes(raw)))


def coerce_attribute(
    name: str, raw_values: Sequence[bytes], requested: Sequence[AttributeSpec] = ()
) -> AttributeValue:
    """
    Coerce the raw values of the attribute ``name``.

    Args:
        name: the attribute name as returned by the server
        raw_values: the raw values, in server order

    Keyword Args:
        requested: the attribute specs from the search request

    Raises:
        ProtocolError: a ``guid`` attribute did not hold a 16 byte value

    Returns:
        The coerced value.

    """
    spec = find_spec(name, requested) if requested else None
    return_type = spec.return_type if spec else AttributeReturnType.STRING
    if return_type == AttributeReturnType.STRING or not raw_values:
        if len(raw_values) == 1:
            return ScalarValue(decode_value(raw_values[0]))
        return ListValue(tuple(decode_value(raw) for raw in raw_values))
    if len(raw_values) > 1:
        logger.debug(
            "ldaptasks.coercion.extra_values_dropped attribute=%s count=%d type=%s",
            name,
            len(raw_values),
            return_type.value,
        )
    raw = raw_values[0]
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    if return_type == AttributeReturnType.BYTE:
        return ScalarValue(to_hex(raw))
    return ScalarValue(to_guid(raw))


def coerce_attributes(
    raw_attributes: RawAttributes, requested: Sequence[AttributeSpec] = ()
) -> tuple[Attribute, ...]:
    """
    Coerce every attribute of one entry, keeping the server's attribute order.
    """
    return tuple(
        Attribute(key=name, value=coerce_attribute(name, values, requested))
        for name, values in raw_attributes.items()
    )
