from __future__ import annotations

from collections.abc import Mapping

GENERIC_ERROR_MESSAGE = "Ocurrió un error inesperado. Intenta de nuevo."


def normalize(rejection: object) -> str:
    """Reduce any transport rejection to the message shown in the error slot.

    Backend errors carry ``{"error": "..."}`` inside ``data``; plain network
    failures have no ``data`` and only a ``message``. A ``data`` payload
    without a usable ``error`` maps to the generic text, never to the raw
    body or the transport's own message.
    """
    try:
        data = _field(rejection, "data")
        if data is not None:
            nested = _field(data, "error")
            if isinstance(nested, str) and nested.strip():
                return nested
            return GENERIC_ERROR_MESSAGE
        message = _field(rejection, "message")
        if isinstance(message, str) and message.strip():
            return message
    except Exception:
        return GENERIC_ERROR_MESSAGE
    return GENERIC_ERROR_MESSAGE


def _field(value: object, name: str) -> object | None:
    if value is None or isinstance(value, str):
        return None
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)
