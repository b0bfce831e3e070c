"""Codec boundary between opaque payload bytes and plain values.

The adapter never looks inside payloads itself. It hands bytes to a
``Codec`` and gets back plain values (dicts, lists, strings, numbers),
which domain types turn into their own objects via ``from_dict``.

``JsonCodec`` is the default. Its output is canonical (sorted keys,
no whitespace) so equal values always produce equal bytes, which lets
peers compare encoded states and summaries directly.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Codec(Protocol):
    """Protocol for payload codecs."""

    def decode(self, data: bytes) -> Any:
        """Decode bytes into a plain value.

        Raises:
            ValueError: If the bytes are malformed.
        """
        ...

    def encode(self, value: Any) -> bytes:
        """Encode a plain value into bytes.

        Raises:
            TypeError: If the value contains unsupported types.
            ValueError: If the value cannot be represented.
        """
        ...


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


class JsonCodec:
    """Canonical JSON codec.

    Decoding accepts any standard UTF-8 JSON document; ``NaN`` and
    ``Infinity`` are rejected on both sides so every decoded value can be
    re-encoded. Encoding sorts object keys and drops insignificant
    whitespace.
    """

    def decode(self, data: bytes) -> Any:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors.
        try:
            return json.loads(bytes(data).decode("utf-8"), parse_constant=_reject_constant)
        except RecursionError as exc:
            raise ValueError("JSON nesting too deep") from exc

    def encode(self, value: Any) -> bytes:
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        ).encode("utf-8")

    def __repr__(self) -> str:
        return "JsonCodec()"
