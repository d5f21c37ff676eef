"""Pydantic schemas for LINE webhook payloads.

WebhookBody/WebhookEvent mirror the wire format; InboundEvent is the flat,
immutable view of one event that the dispatcher works with.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

class EventSource(BaseModel):
    type: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")

class EventMessage(BaseModel):
    type: Optional[str] = None
    text: Optional[str] = None

class WebhookEvent(BaseModel):
    type: str
    reply_token: Optional[str] = Field(None, alias="replyToken")
    source: EventSource = Field(default_factory=EventSource)
    message: Optional[EventMessage] = None

class WebhookBody(BaseModel):
    destination: Optional[str] = None
    events: List[WebhookEvent] = []

class InboundEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: str
    reply_token: Optional[str] = None
    user_id: Optional[str] = None
    text: Optional[str] = None
