from __future__ import annotations

import json
import logging
from typing import Any

from .exceptions import NotFoundError, ValidationError
from .storage.base import Storage
from .types import EVENT_TYPES, Event

logger = logging.getLogger(__name__)


def validate_metadata(metadata: Any) -> Any:
    try:
        json.dumps(metadata)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"metadata must be JSON-serializable: {exc}") from exc
    return metadata


class EventRecorder:
    def __init__(self, storage: Storage):
        self._storage = storage

    async def record(self, prompt_id: str, type: str, metadata: Any = None) -> Event:
        if not prompt_id:
            raise ValidationError("prompt id is required")
        if type not in EVENT_TYPES:
            raise ValidationError(f"Invalid event type {type!r}, expected one of {', '.join(EVENT_TYPES)}")
        validate_metadata(metadata)
        if await self._storage.get_prompt(prompt_id) is None:
            raise NotFoundError(f"Prompt {prompt_id} does not exist")

        event = await self._storage.save_event(Event(prompt_id=prompt_id, type=type, metadata=metadata))
        logger.debug("Recorded %s event %s for prompt %s", type, event.id, prompt_id)
        return event
