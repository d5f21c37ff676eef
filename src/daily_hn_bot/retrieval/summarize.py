"""Kagi Universal Summarizer client."""

from typing import Any, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..config import get_settings
from ..errors import ParseError, TransportError
from ..http_client import send
from ..log import get_logger
from ..retry import execute

settings = get_settings()
logger = get_logger("summarize")

SUMMARY_UNAVAILABLE = "Summary unavailable"


class KagiData(BaseModel):
    output: Optional[str] = None
    # older API revisions
    summary: Optional[str] = None


class KagiResponse(BaseModel):
    data: Optional[KagiData] = None
    error: Optional[Any] = None


class Summarizer:
    async def summarize_url(self, url: str) -> str:
        payload = {
            "url": url,
            "engine": settings.KAGI_ENGINE,
            "target_language": settings.KAGI_TARGET_LANGUAGE,
        }
        headers = {"Authorization": f"Bot {settings.KAGI_API_KEY}"}

        resp = await execute(
            lambda: send("kagi.summarize", "POST", settings.KAGI_SUMMARIZE_URL, json=payload, headers=headers)
        )

        try:
            body = KagiResponse.model_validate_json(resp.content)
        except PydanticValidationError as e:
            raise ParseError("Kagi returned an unexpected payload") from e

        if body.error:
            raise TransportError(f"Kagi reported an error: {body.error}", stage="kagi.summarize")

        summary = body.data and (body.data.output or body.data.summary)
        if not summary:
            raise ParseError("Kagi returned no summary")
        return summary.strip()

    async def summarize_or_placeholder(self, url: str) -> str:
        """Like summarize_url, but a failed story degrades to SUMMARY_UNAVAILABLE instead of raising."""
        try:
            return await self.summarize_url(url)
        except (TransportError, ParseError) as e:
            logger.error(f"Summary failed for {url}: {e}")
            return SUMMARY_UNAVAILABLE


summarizer = Summarizer()
