# decoder.py

import base64
import json
import logging

from pydantic import ValidationError

from errors import DecodeError, UnsupportedEventError
from models.push_event import GiteaPushPayload, PushEvent

logger = logging.getLogger(__name__)

SUPPORTED_EVENT = "push"


def decode_push_event(event_type: str, raw_body: bytes) -> PushEvent:
    """
    Parse a Gitea push payload into a PushEvent.

    Raises:
        UnsupportedEventError: `event_type` is anything but "push".
        DecodeError: the body is not JSON or lacks the repository/head commit structure.
    """
    if event_type != SUPPORTED_EVENT:
        logger.warning(f"Unhandled event type: {event_type!r}")
        raise UnsupportedEventError(event_type)

    try:
        payload = GiteaPushPayload.model_validate(json.loads(raw_body))
    except (ValueError, ValidationError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        encoded = base64.b64encode(raw_body).decode("ascii")
        logger.error(f"Could not decode push payload: {e} while unmarshaling request base64({encoded})")
        raise DecodeError(f"invalid push payload: {e}") from e

    event = PushEvent.from_payload(payload)
    logger.info(f"Received webhook on {event.repo_full_name}")
    return event
