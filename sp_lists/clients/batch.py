import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..rest.exceptions import BatchAlreadyExecutedError

logger = logging.getLogger(__name__)


@dataclass
class BatchRequest:
    method: str
    url: str
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    parser: Any = None
    future: Future = field(default_factory=Future)


class ODataBatch:
    """Deferred request queue shared by the descriptors bound to it.

    Calls made through a bound descriptor return a ``Future`` instead of a
    payload. :meth:`execute` sends the queued requests in insertion order and
    settles each future exactly once.
    """

    def __init__(self, client):
        self._client = client
        self._requests: List[BatchRequest] = []
        self._executed = False

    @property
    def executed(self) -> bool:
        return self._executed

    def __len__(self):
        return len(self._requests)

    def add(self, method: str, url: str, body: Any = None,
            headers: Optional[Dict[str, str]] = None, parser=None) -> Future:
        if self._executed:
            raise BatchAlreadyExecutedError("This batch has already been executed.")
        request = BatchRequest(method=method, url=url, body=body,
                               headers=dict(headers or {}), parser=parser)
        self._requests.append(request)
        return request.future

    def execute(self) -> None:
        if self._executed:
            raise BatchAlreadyExecutedError("This batch has already been executed.")
        self._executed = True
        logger.debug("Executing batch with %d request(s)", len(self._requests))
        for request in self._requests:
            if not request.future.set_running_or_notify_cancel():
                continue
            try:
                result = self._client.request(request.method,
                                              request.url,
                                              body=request.body,
                                              headers=request.headers,
                                              parser=request.parser)
            except Exception as e:
                request.future.set_exception(e)
            else:
                request.future.set_result(result)
