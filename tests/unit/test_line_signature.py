import base64

import pytest
from fastapi import HTTPException, Request
from hypothesis import given
from hypothesis import strategies as st

from daily_hn_bot.config import get_settings
from daily_hn_bot.errors import AuthError, MalformedSignature, SignatureMismatch
from daily_hn_bot.line.verify import sign, verify, verify_line_signature

settings = get_settings()


def _request(body: bytes, headers: dict) -> Request:
    scope = {
        "type": "http",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


def _flip(data: bytes, position: int) -> bytes:
    i = position % len(data)
    return data[:i] + bytes([data[i] ^ 0x01]) + data[i + 1:]


@given(secret=st.binary(min_size=1, max_size=64), body=st.binary(max_size=512))
def test_sign_then_verify_round_trip(secret, body):
    """
    WHY: Whatever the channel secret and payload, our own signature must be accepted.
    HOW: Sign arbitrary bytes with an arbitrary secret, then verify.
    EXPECTED: verify returns without raising.
    """
    verify(secret, body, sign(secret, body))


@given(secret=st.binary(min_size=1, max_size=64), body=st.binary(min_size=1, max_size=512), position=st.integers(min_value=0))
def test_flipped_body_byte_is_rejected(secret, body, position):
    """
    WHY: A tampered body must never pass as authentic.
    HOW: Sign the body, then flip one bit of one byte before verifying.
    EXPECTED: SignatureMismatch.
    """
    signature = sign(secret, body)
    with pytest.raises(SignatureMismatch):
        verify(secret, _flip(body, position), signature)


@given(secret=st.binary(min_size=1, max_size=64), body=st.binary(max_size=512), position=st.integers(min_value=0))
def test_flipped_signature_byte_is_rejected(secret, body, position):
    """
    WHY: A forged signature differing in a single byte must be rejected.
    HOW: Decode the signature, flip one byte, re-encode.
    EXPECTED: SignatureMismatch.
    """
    raw = base64.b64decode(sign(secret, body))
    forged = base64.b64encode(_flip(raw, position)).decode("ascii")
    with pytest.raises(SignatureMismatch):
        verify(secret, body, forged)


@pytest.mark.parametrize("signature", ["not base64!!", "abc", base64.b64encode(b"short").decode()])
def test_malformed_signature(signature):
    """
    WHY: Garbage in the header is a format failure, reported before any MAC comparison.
    HOW: Pass invalid base64 and a valid base64 string of the wrong length.
    EXPECTED: MalformedSignature, which is also an AuthError.
    """
    with pytest.raises(MalformedSignature) as exc:
        verify(b"secret", b"{}", signature)
    assert isinstance(exc.value, AuthError)


@pytest.mark.asyncio
async def test_verify_request_returns_trusted_body():
    """
    WHY: The webhook route needs the exact bytes that were verified.
    HOW: Build a Request carrying a valid x-line-signature.
    EXPECTED: The raw body is returned.
    """
    body = b'{"events":[]}'
    signature = sign(settings.LINE_CHANNEL_SECRET.encode("utf-8"), body)

    assert await verify_line_signature(_request(body, {"x-line-signature": signature})) == body


@pytest.mark.asyncio
async def test_verify_request_invalid_signature():
    """
    WHY: Reject requests signed with another secret (security).
    HOW: Sign the body with a different secret.
    EXPECTED: HTTPException 401.
    """
    body = b'{"events":[]}'
    signature = sign(b"someone-else", body)

    with pytest.raises(HTTPException) as exc:
        await verify_line_signature(_request(body, {"x-line-signature": signature}))
    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_verify_request_missing_header():
    """
    WHY: Unsigned requests are not even worth a MAC computation.
    HOW: Send no signature header.
    EXPECTED: HTTPException 400.
    """
    with pytest.raises(HTTPException) as exc:
        await verify_line_signature(_request(b"{}", {}))
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_verify_request_generic_signature_header():
    """
    WHY: Relays in front of the bot forward the signature as x-signature.
    HOW: Send a valid signature under the alternate header name.
    EXPECTED: Accepted.
    """
    body = b"{}"
    signature = sign(settings.LINE_CHANNEL_SECRET.encode("utf-8"), body)

    assert await verify_line_signature(_request(body, {"x-signature": signature})) == body
