"""Encoding and decoding functions."""

from __future__ import annotations

import base64
import binascii
from typing import Callable, Sequence

from ..span import DbgenError, InvalidArgumentsError, Span, Spanned
from ..value import expect_bytes
from .base import CompileContext, Function, unpack_args

_B64_ALPHABET = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/")
_URL_TO_STANDARD = bytes.maketrans(b"-_", b"+/")


def _decode_hex(data: bytes) -> bytes:
    cleaned = data.translate(None, b" \t\r\n")
    try:
        return binascii.unhexlify(cleaned)
    except (binascii.Error, ValueError) as exc:
        raise InvalidArgumentsError(f"invalid hex input: {exc}") from None


def _decode_base64(data: bytes) -> bytes:
    cleaned = data.translate(_URL_TO_STANDARD, b" \t\r\n=")
    if not _B64_ALPHABET.issuperset(cleaned):
        raise InvalidArgumentsError("invalid base64 symbol")
    if len(cleaned) % 4 == 1:
        raise InvalidArgumentsError("invalid base64 length")
    decoded = base64.b64decode(cleaned + b"=" * (-len(cleaned) % 4), validate=True)
    if base64.b64encode(decoded).rstrip(b"=") != cleaned:
        raise InvalidArgumentsError("non-zero trailing bits in base64 input")
    return decoded


def _encode_hex(data: bytes) -> bytes:
    return binascii.hexlify(data).upper()


def _encode_base64url(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


class Decode(Function):
    """The decoding SQL functions (`from_hex`, `from_base64`, ...)."""

    def __init__(self, decoder: Callable[[bytes], bytes], name: str) -> None:
        self.decoder = decoder
        self.name = name

    def __repr__(self) -> str:
        return f"Decode({self.name})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        (encoded,) = unpack_args(span, args, [expect_bytes])
        try:
            return self.decoder(encoded)
        except DbgenError as exc:
            raise exc.with_span(span)


class Encode(Function):
    """The encoding SQL functions (`to_hex`, `to_base64`, ...)."""

    def __init__(self, encoder: Callable[[bytes], bytes], name: str) -> None:
        self.encoder = encoder
        self.name = name

    def __repr__(self) -> str:
        return f"Encode({self.name})"

    def compile(self, ctx: CompileContext, span: Span, args: Sequence[Spanned]):
        (decoded,) = unpack_args(span, args, [expect_bytes])
        return self.encoder(decoded)


DECODE_HEX = Decode(_decode_hex, "hex")
DECODE_BASE64 = Decode(_decode_base64, "base64")
ENCODE_HEX = Encode(_encode_hex, "hex")
ENCODE_BASE64 = Encode(base64.b64encode, "base64")
ENCODE_BASE64URL = Encode(_encode_base64url, "base64url")