"""Response parsing helpers for the SharePoint REST (OData v3 verbose) surface."""
import logging
from typing import Any, Mapping

import requests

from .exceptions import ODataIdError, SharepointHttpError

logger = logging.getLogger(__name__)


def extract_odata_id(candidate: Any) -> str:
    """Returns the absolute resource url the server attached to a payload."""
    if isinstance(candidate, Mapping):
        metadata = candidate.get('__metadata')
        if isinstance(metadata, Mapping) and 'id' in metadata:
            return metadata['id']
        if 'odata.id' in candidate:
            return candidate['odata.id']
    logger.error("Could not extract odata id from %r", candidate)
    raise ODataIdError(candidate)


def unwrap_property(data: Any, name: str) -> Any:
    """Returns ``data[name]`` when the payload wraps a scalar under ``name``.

    Falls back to the payload itself when the wrapper is absent, which happens
    with older farm builds that answer with the bare value.
    """
    if isinstance(data, Mapping) and name in data:
        return data[name]
    return data


class ODataParserBase:

    def __call__(self, response: requests.Response) -> Any:
        raise NotImplementedError

    @staticmethod
    def handle_error(response: requests.Response) -> None:
        if response.ok:
            return
        try:
            data = response.json()
        except ValueError:
            data = response.text
        logger.warning("SharePoint request failed: %s %s -> %s",
                       response.request.method if response.request else '', response.url,
                       response.status_code)
        raise SharepointHttpError(response.status_code, response.reason, data)

    @staticmethod
    def parse_odata_json(json_data: Any) -> Any:
        if isinstance(json_data, Mapping):
            if 'd' in json_data:
                d = json_data['d']
                if isinstance(d, Mapping) and 'results' in d:
                    return d['results']
                return d
            if 'value' in json_data:
                return json_data['value']
        return json_data


class ODataDefaultParser(ODataParserBase):

    def __call__(self, response: requests.Response) -> Any:
        self.handle_error(response)
        if response.status_code == 204 or not response.content:
            return {}
        return self.parse_odata_json(response.json())


class TextParser(ODataParserBase):

    def __call__(self, response: requests.Response) -> str:
        self.handle_error(response)
        return response.text

