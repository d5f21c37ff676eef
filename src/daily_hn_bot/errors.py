"""Error taxonomy shared by the webhook pipeline and the API clients.

Only AuthError ever reaches the webhook caller; everything else happens after
the acknowledgment and is logged by the dispatcher.
"""

from typing import Optional


class BotError(Exception):
    """Base class for all errors raised by the bot."""


class AuthError(BotError):
    """The webhook request could not be authenticated."""


class MalformedSignature(AuthError):
    """Signature header missing or not valid base64."""


class SignatureMismatch(AuthError):
    """Signature decoded fine but does not match the body."""


class TransportError(BotError):
    """
    A downstream call failed at the network or HTTP-status level.
    `transient` decides whether the retry executor tries again.
    """

    def __init__(self, message: str, stage: str, status: Optional[int] = None, transient: bool = False):
        super().__init__(message)
        self.stage = stage
        self.status = status
        self.transient = transient

    def __str__(self) -> str:
        status = f" (HTTP {self.status})" if self.status is not None else ""
        return f"[{self.stage}] {super().__str__()}{status}"


class ValidationError(BotError):
    """Input or context is unusable: bad URL, missing reply token, empty feed."""


class ParseError(BotError):
    """Webhook, feed or AI payload did not have the expected shape."""


class ResolverError(BotError):
    """The AI command resolver could not produce a command."""


class ResolverTransportError(ResolverError, TransportError):
    pass


class TooManyIndexes(ResolverError, ValidationError):
    """push_summary was called with more indexes than allowed."""

    def __init__(self, count: int, limit: int):
        super().__init__(f"push_summary got {count} indexes, limit is {limit}")
        self.count = count
        self.limit = limit
