from typing import Any


class SharepointError(Exception):
    ...


class SharepointHttpError(SharepointError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, data: Any = None):
        self.status_code = status_code
        self.reason = reason
        self.data = data
        super().__init__(f"Error making HttpClient request in queryable: [{status_code}] {reason}")


class ODataIdError(SharepointError):

    def __init__(self, data: Any):
        self.data = data
        super().__init__("Could not extract odata id in object, you may be using nometadata. "
                         "Object data logged to logger.")


class BatchNotSupportedError(SharepointError):
    ...


class BatchAlreadyExecutedError(SharepointError):
    ...


class AlreadyInBatchError(SharepointError):
    ...
