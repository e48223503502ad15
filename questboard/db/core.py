"""Helpers shared by the event store backends."""

import secrets
import string

EVENT_ID_ALPHABET = string.ascii_lowercase + string.digits
EVENT_ID_ATTEMPTS = 10


def generate_event_id(length: int = 10) -> str:
    return "".join(secrets.choice(EVENT_ID_ALPHABET) for _ in range(length))
