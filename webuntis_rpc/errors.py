NOT_AUTHENTICATED_CODE = -8520


class UntisError(Exception):
    """Base class for all failures raised while talking to WebUntis"""


class TransportError(UntisError):
    """The request never produced a response (connection refused, timeout, ...)"""


class RpcError(UntisError):
    def __init__(self, error: dict | None, status: int, hint: str = ""):
        self.error = error
        self.status = status
        self.hint = hint
        self.code: int | None = error.get("code") if isinstance(error, dict) else None
        super().__init__(f"An exception occurred while communicating with the WebUntis API: {error}{hint}")


class NotAuthenticatedError(RpcError):
    HINT = "\nYou need to authenticate with .login() first."

    def __init__(self, error: dict | None, status: int):
        super().__init__(error, status, self.HINT)


def error_from_response(error: dict | None, status: int) -> RpcError:
    code = error.get("code") if isinstance(error, dict) else None
    if code == NOT_AUTHENTICATED_CODE:
        return NotAuthenticatedError(error, status)

    return RpcError(error, status)
