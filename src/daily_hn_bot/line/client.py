import uuid
from typing import Any, Dict, List, Optional, Sequence
from ..config import get_settings
from ..http_client import send
from ..log import get_logger
from ..retry import execute

logger = get_logger("line_client")
settings = get_settings()

Message = Dict[str, Any]

# Messaging API limit per reply/push/broadcast request
MAX_MESSAGES_PER_REQUEST = 5

def _batches(messages: Sequence[Message]) -> List[List[Message]]:
    return [list(messages[i:i + MAX_MESSAGES_PER_REQUEST]) for i in range(0, len(messages), MAX_MESSAGES_PER_REQUEST)]

class LineClient:
    """
    Thin async wrapper over the LINE Messaging API send endpoints.
    Every request goes through the retry executor.
    """

    def __init__(self, token: Optional[str] = None):
        self.token = token or settings.LINE_CHANNEL_TOKEN

    def _headers(self, retry_key: bool) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        if retry_key:
            headers["X-Line-Retry-Key"] = str(uuid.uuid4())
        return headers

    async def _post(self, stage: str, url: str, payload: Dict[str, Any], retry_key: bool = True):
        async def attempt():
            # Headers are rebuilt per attempt so each retry carries its own key
            return await send(stage, "POST", url, json=payload, headers=self._headers(retry_key))

        await execute(attempt)

    async def reply(self, reply_token: str, messages: Sequence[Message]):
        """
        Replies to one inbound event. A reply token is single-use, so only the
        first MAX_MESSAGES_PER_REQUEST messages are sent.
        """
        if len(messages) > MAX_MESSAGES_PER_REQUEST:
            logger.warning(f"Reply carries {len(messages)} messages, sending the first {MAX_MESSAGES_PER_REQUEST}")
        # The reply endpoint rejects X-Line-Retry-Key; the token itself is the dedup handle
        await self._post(
            "line.reply",
            settings.LINE_REPLY_URL,
            {"replyToken": reply_token, "messages": list(messages[:MAX_MESSAGES_PER_REQUEST])},
            retry_key=False,
        )

    async def push(self, user_id: str, messages: Sequence[Message]):
        for batch in _batches(messages):
            await self._post("line.push", settings.LINE_PUSH_URL, {"to": user_id, "messages": batch})

    async def broadcast(self, messages: Sequence[Message]):
        for batch in _batches(messages):
            await self._post("line.broadcast", settings.LINE_BROADCAST_URL, {"messages": batch})

line_client = LineClient()
