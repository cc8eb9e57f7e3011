"""JSON encoding helpers backed by ``msgspec``."""

from typing import Any, Literal, Union, overload

from msgspec.json import Encoder

__all__ = ("encode_json",)

_encoder = Encoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode data to a JSON string or bytes.

    Args:
        data: Data to encode.
        as_bytes: Whether to return bytes instead of a string.

    Returns:
        JSON representation of ``data``.
    """
    encoded = _encoder.encode(data)
    if as_bytes:
        return encoded
    return encoded.decode("utf-8")

