import base64
import binascii
import hashlib
import hmac
from fastapi import Request, HTTPException
from ..config import get_settings
from ..errors import MalformedSignature, SignatureMismatch
from ..log import get_logger

settings = get_settings()
logger = get_logger("verify")

# LINE sends x-line-signature; x-signature is accepted for generic relays
SIGNATURE_HEADERS = ("x-line-signature", "x-signature")

def sign(secret: bytes, body: bytes) -> str:
    """Base64 HMAC-SHA256 of `body`, as LINE puts it in the signature header."""
    digest = hmac.new(secret, body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")

def verify(secret: bytes, body: bytes, presented_signature: str) -> None:
    """
    Checks `presented_signature` against the HMAC-SHA256 of `body`.
    Raises MalformedSignature if the signature cannot be decoded,
    SignatureMismatch if it decodes but does not match.
    """
    try:
        presented = base64.b64decode(presented_signature, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedSignature("Signature is not valid base64") from e

    if len(presented) != hashlib.sha256().digest_size:
        raise MalformedSignature("Signature has the wrong length")

    expected = hmac.new(secret, body, hashlib.sha256).digest()
    if not hmac.compare_digest(expected, presented):
        raise SignatureMismatch("Invalid signature")

async def verify_line_signature(request: Request) -> bytes:
    """
    Verifies the signature header of a webhook request.
    Returns the raw (now trusted) body. Raises HTTPException 400 on a
    missing/malformed signature and 401 on a mismatch.
    """
    signature = None
    for header in SIGNATURE_HEADERS:
        signature = request.headers.get(header)
        if signature:
            break

    if not signature:
        raise HTTPException(status_code=400, detail="Missing signature header")

    body = await request.body()

    try:
        verify(settings.LINE_CHANNEL_SECRET.encode("utf-8"), body, signature)
    except MalformedSignature as e:
        logger.warning(f"Rejected webhook: {e}")
        raise HTTPException(status_code=400, detail="Malformed signature")
    except SignatureMismatch:
        logger.warning("Rejected webhook: signature mismatch")
        raise HTTPException(status_code=401, detail="Invalid signature")

    return body
