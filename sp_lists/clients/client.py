import json
import logging
from typing import Any, Callable, Dict, Optional

import requests

from .batch import ODataBatch
from ..configurations.sharepoint import SharepointConfiguration
from ..rest.odata import ODataDefaultParser
from ..rest.web import Web

logger = logging.getLogger(__name__)

ResponseParser = Callable[[requests.Response], Any]


class SharepointClient:
    """Blocking transport for the SharePoint REST api of a single site.

    Every descriptor built from :attr:`web` shares this client, so headers,
    timeout and TLS settings are configured once.
    """

    def __init__(self,
                 site_url: str,
                 token: Optional[str] = None,
                 api_extra_headers: Optional[dict] = None,
                 verify_ssl: bool = True,
                 timeout: int = 30,
                 session: Optional[requests.Session] = None):
        self.site_url = site_url.rstrip('/')
        self.api_url = f"{self.site_url}/_api"
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Accept": "application/json;odata=verbose",
            "Content-Type": "application/json;odata=verbose;charset=utf-8",
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        if api_extra_headers is not None:
            self.headers.update(api_extra_headers)

    @classmethod
    def from_configuration(cls, config: SharepointConfiguration, **kwargs) -> "SharepointClient":
        token = config.token.get_secret_value() if config.token else None
        return cls(site_url=config.site_url,
                   token=token,
                   api_extra_headers=config.api_extra_headers,
                   verify_ssl=config.verify_ssl,
                   timeout=config.timeout,
                   **kwargs)

    @property
    def web(self) -> Web:
        return Web(self.api_url, client=self)

    def create_batch(self) -> ODataBatch:
        return ODataBatch(self)

    def request(self,
                method: str,
                url: str,
                body: Any = None,
                headers: Optional[Dict[str, str]] = None,
                parser: Optional[ResponseParser] = None) -> Any:
        """Sends one request and returns the parsed payload.

        ``body`` is sent verbatim when it is a string, JSON-encoded otherwise.
        Non-2xx answers raise :class:`SharepointHttpError` from the parser;
        connection problems propagate as ``requests`` exceptions.
        """
        request_headers = {**self.headers, **(headers or {})}
        if body is not None and not isinstance(body, (str, bytes)):
            body = json.dumps(body)
        logger.debug("%s %s", method, url)
        response = self.session.request(method,
                                        url,
                                        data=body,
                                        headers=request_headers,
                                        verify=self.verify_ssl,
                                        timeout=self.timeout)
        parser = parser or ODataDefaultParser()
        return parser(response)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
