"""Pydantic schemas for the commands the AI resolver can produce.

Command is a tagged union on `kind`. It is built once, from the AI's tool
call, and passed around typed from then on.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, PositiveInt

MAX_SUMMARY_INDEXES = 5


class ReplyLatestStory(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["reply_latest_story"] = "reply_latest_story"


class PushSummary(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["push_summary"] = "push_summary"
    indexes: List[PositiveInt] = Field(..., min_length=1, max_length=MAX_SUMMARY_INDEXES)


class PushUrlSummary(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["push_url_summary"] = "push_url_summary"
    url: str


class PushPlainMessage(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["push_plain_message"] = "push_plain_message"
    text: str


Command = Annotated[
    Union[ReplyLatestStory, PushSummary, PushUrlSummary, PushPlainMessage],
    Field(discriminator="kind"),
]
