from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from tasklens.core.errors import InvalidEnvelopeError, UnknownActionError

from .actions import Action

MessageType = Literal["response", "state", "error"]


class ClientRequest(BaseModel):
    input: str | int | float | dict[str, Any] | None = None
    action: Action


class ServerMessage(BaseModel):
    type: MessageType
    data: dict[str, Any] = Field(default_factory=dict)
    state: dict[str, Any] = Field(default_factory=dict)
    view: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        wire = self.model_dump()
        if wire["view"] is None:
            del wire["view"]
        return wire


def parse_request(raw: str | bytes | dict[str, Any]) -> ClientRequest:
    """Parse an inbound ``{input, action}`` message.

    Raises ``UnknownActionError`` for a well-formed message naming an action
    outside ``Action`` and ``InvalidEnvelopeError`` for anything else.
    """
    if isinstance(raw, (str, bytes)):
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidEnvelopeError("message is not valid JSON") from exc
    else:
        payload = raw

    if not isinstance(payload, dict):
        raise InvalidEnvelopeError("message must be a JSON object")

    action = payload.get("action")
    if action not in Action.names():
        if isinstance(action, str):
            raise UnknownActionError(action)
        raise InvalidEnvelopeError("message is missing an action")

    try:
        return ClientRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidEnvelopeError(f"invalid message: {exc.error_count()} error(s)") from exc
