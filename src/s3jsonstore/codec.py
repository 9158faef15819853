from s3jsonstore.errors import DecodeError
from s3jsonstore.errors import EncodeError
from s3jsonstore.interfaces import ICodec
from zope.interface import implementer

import dataclasses
import json


@implementer(ICodec)
class JSONCodec:
    """Compact JSON encoding for store values.

    ``decoder`` turns parsed JSON into the value type, e.g. a ``from_dict``
    classmethod; a dataclass type is called with the object's fields.
    ``encoder`` turns values json cannot handle into JSON-compatible data;
    dataclass instances are handled already.
    """

    def __init__(self, decoder=None, encoder=None):
        if dataclasses.is_dataclass(decoder) and isinstance(decoder, type):
            cls = decoder
            decoder = lambda obj: cls(**obj)  # noqa: E731
        self._decoder = decoder
        self._encoder = encoder

    def _default(self, value):
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return dataclasses.asdict(value)
        if self._encoder is not None:
            return self._encoder(value)
        raise TypeError(f"{type(value).__name__} is not JSON serializable")

    def encode(self, value):
        try:
            text = json.dumps(
                value,
                default=self._default,
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError, RecursionError) as e:
            raise EncodeError(f"encode: {e}", operation="Encode") from e
        return text.encode("utf-8")

    def decode(self, data):
        try:
            obj = json.loads(data)
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise DecodeError(f"decode: {e}", operation="Decode") from e
        if self._decoder is None:
            return obj
        try:
            return self._decoder(obj)
        except (TypeError, ValueError, KeyError) as e:
            raise DecodeError(f"decode: {e}", operation="Decode") from e
