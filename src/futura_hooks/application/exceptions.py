from __future__ import annotations


class HookError(Exception):
    """Base hook error. ``str(err)`` is the diagnostic returned to the host."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class ConfigurationError(HookError):
    pass


class UnknownHookError(HookError):
    pass


class DecodeError(HookError):
    def __init__(self, cause: str) -> None:
        super().__init__(f"Failed to decode document data: {cause}")


class SerializationError(HookError):
    def __init__(self, cause: str) -> None:
        super().__init__(f"Failed to serialize email payload: {cause}")


class TransportError(HookError):
    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"HTTP request failed. Code: {code}, Error: {message}")


class RemoteError(HookError):
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"Email API returned status {status}: {body}")


class InvalidEventError(HookError):
    pass
