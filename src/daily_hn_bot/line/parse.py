from typing import Optional
from pydantic import ValidationError as PydanticValidationError
from ..errors import ParseError
from ..schemas.webhook import InboundEvent, WebhookBody

def parse_event(body: bytes) -> Optional[InboundEvent]:
    """
    Parse a verified LINE webhook body.
    Returns the first event as an InboundEvent, or None if the payload has no events.
    Raises ParseError if the body is not JSON or not shaped like a webhook payload.
    """
    try:
        payload = WebhookBody.model_validate_json(body)
    except PydanticValidationError as e:
        raise ParseError(f"Webhook body rejected ({e.error_count()} validation errors)") from e

    # LINE batches events but a chat message always arrives alone
    if not payload.events:
        return None
    event = payload.events[0]

    return InboundEvent(
        event_type=event.type,
        reply_token=event.reply_token,
        user_id=event.source.user_id,
        text=event.message.text if event.message else None,
    )
