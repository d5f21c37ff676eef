"""Sign and send a sample LINE message event to a locally running webhook.

Usage: python scripts/replay_event.py ["text to send"]
"""

import asyncio
import json
import sys
import time

import httpx

from daily_hn_bot.config import get_settings
from daily_hn_bot.line.verify import sign

URL = "http://localhost:8000/webhook"

settings = get_settings()


def build_payload(text: str) -> dict:
    timestamp = int(time.time() * 1000)
    return {
        "destination": "Ureplay",
        "events": [
            {
                "type": "message",
                "mode": "active",
                "timestamp": timestamp,
                "replyToken": f"replay-{timestamp}",
                "source": {"type": "user", "userId": "U00000000000000000000000000000000"},
                "message": {"type": "text", "id": str(timestamp), "text": text},
            }
        ],
    }


async def send_event(text: str):
    body = json.dumps(build_payload(text)).encode("utf-8")
    headers = {
        "Content-Type": "application/json",
        "x-line-signature": sign(settings.LINE_CHANNEL_SECRET.encode("utf-8"), body),
    }

    async with httpx.AsyncClient() as client:
        print(f"Sending event to {URL}...")
        resp = await client.post(URL, content=body, headers=headers)
        print(f"Status: {resp.status_code}")
        print(f"Response: {resp.text}")


if __name__ == "__main__":
    text = sys.argv[1] if len(sys.argv) > 1 else (input("Message (default: today): ") or "today")
    asyncio.run(send_event(text))
