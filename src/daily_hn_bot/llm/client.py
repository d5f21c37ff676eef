"""OpenAI client wrapper.

Chat completions with and without tools. Calls run on the shared HTTP pool
through the retry executor, with the SDK's own retries switched off; failures
surface as TransportError.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion, ChatCompletionMessage

from ..config import get_settings
from ..errors import ParseError, TransportError
from ..http_client import get_http_client, is_transient_status
from ..retry import execute

settings = get_settings()


class LLMClient:
    def __init__(self):
        self._client: Optional[AsyncOpenAI] = None
        self._http_client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> AsyncOpenAI:
        # Rebuilt whenever the shared pool was closed and replaced
        http_client = get_http_client()
        if self._client is None or self._http_client is not http_client:
            self._client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_BASE_URL,
                http_client=http_client,
                max_retries=0,
            )
            self._http_client = http_client
        return self._client

    async def _attempt(self, stage: str, **kwargs: Any) -> ChatCompletion:
        try:
            return await asyncio.wait_for(self.client.chat.completions.create(**kwargs), settings.HTTP_TIMEOUT)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"request took longer than {settings.HTTP_TIMEOUT}s", stage=stage, transient=True
            ) from e

    async def _create(self, stage: str, **kwargs: Any) -> ChatCompletionMessage:
        try:
            completion: ChatCompletion = await execute(lambda: self._attempt(stage, **kwargs))
        except openai.APIStatusError as e:
            raise TransportError(
                "AI service returned an error status",
                stage=stage,
                status=e.status_code,
                transient=is_transient_status(e.status_code),
            ) from e
        except openai.APIConnectionError as e:
            raise TransportError(f"{type(e).__name__}: {e}", stage=stage, transient=True) from e

        if not completion.choices:
            raise ParseError(f"{stage}: AI response has no choices")
        return completion.choices[0].message

    async def run_with_tools(
        self, prompt: str, tools: List[Dict[str, Any]], model: Optional[str] = None
    ) -> ChatCompletionMessage:
        """
        One completion with the tool catalogue attached and tool_choice="auto".
        Returns the assistant message; the caller decides between tool call and text.
        """
        return await self._create(
            "openai.tools",
            model=model or settings.MODEL,
            messages=[{"role": "user", "content": prompt}],
            tools=tools,
            tool_choice="auto",
        )

    async def complete(
        self, prompt: str, model: Optional[str] = None, temperature: float = 0.0, max_tokens: int = 2048
    ) -> str:
        message = await self._create(
            "openai.complete",
            model=model or settings.MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if not message.content:
            raise ParseError("openai.complete: AI response has no content")
        return message.content.strip()


llm_client = LLMClient()
