"""Normalization of password / salt inputs.

Accepted forms are text (encoded as UTF-8), ``bytes``, and anything that
exposes the buffer protocol (``bytearray``, ``memoryview``, ``array.array``,
numpy arrays, ...). Buffers are read as their raw bytes, so a multi-byte
array contributes its bytes in machine order, not its element values.
"""
from dataclasses import dataclass
from typing import Union

from pbkdf2hmac.errors import InvalidInputType


@dataclass(frozen=True)
class Text:
    value: str

    def to_bytes(self) -> bytes:
        return self.value.encode('utf-8')


@dataclass(frozen=True)
class Bytes:
    value: bytes

    def to_bytes(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class View:
    value: memoryview

    def to_bytes(self) -> bytes:
        # copy out so later writes to the caller's buffer cannot reach the engine
        return self.value.tobytes()


ByteSource = Union[Text, Bytes, View]


def classify(value, name: str = 'value') -> ByteSource:
    if isinstance(value, (Text, Bytes, View)):
        # tags built by the caller are checked like untagged values
        value = value.value
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, bytes):
        return Bytes(value)
    try:
        view = memoryview(value)
    except TypeError:
        raise InvalidInputType(
            f'{name} should be str, bytes or a bytes-like buffer, not {type(value).__name__}'
        ) from None
    return View(view)


def to_bytes(value, name: str = 'value') -> bytes:
    return classify(value, name).to_bytes()
