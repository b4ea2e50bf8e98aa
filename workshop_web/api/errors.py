from typing import Any


class APIError(Exception):
    """A failed call to the workshop REST API.

    ``status_code`` is ``None`` when the request never got an answer
    (connection refused, DNS failure, timeout). ``payload`` is the decoded
    JSON body when there was one, otherwise an empty dict.
    """

    def __init__(self, status_code: int | None, payload: dict[str, Any] | None = None):
        self.status_code = status_code
        self.payload = payload or {}
        super().__init__(self.message or self.error or f"Backend request failed ({status_code})")

    @property
    def message(self) -> str | None:
        return _text(self.payload.get("message"))

    @property
    def error(self) -> str | None:
        return _text(self.payload.get("error"))

    def user_message(self, fallback: str, field: str = "message") -> str:
        """Reduce the failure to the single string shown on screen."""
        value = _text(self.payload.get(field))
        return value or fallback


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
