from typing import Annotated, Literal, Union
from pydantic import BaseModel, ConfigDict, Field

class Reply(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["reply"] = "reply"
    reply_token: str

class Push(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["push"] = "push"
    user_id: str

class Broadcast(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["broadcast"] = "broadcast"

DeliveryTarget = Annotated[Union[Reply, Push, Broadcast], Field(discriminator="kind")]
