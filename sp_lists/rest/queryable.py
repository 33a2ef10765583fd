"""Immutable url descriptors for SharePoint REST resources.

A descriptor is a url plus query parameters, bound to a shared
:class:`~sp_lists.clients.SharepointClient` and optionally to an
:class:`~sp_lists.clients.ODataBatch`. Composition methods always return a
new descriptor; the receiver is never modified.
"""
from __future__ import annotations

import copy
import logging
from concurrent.futures import Future
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import quote

from .exceptions import AlreadyInBatchError, SharepointError
from ..utils import combine_paths

logger = logging.getLogger(__name__)

Q = TypeVar("Q", bound="Queryable")

# OData syntax characters left readable in the query string
QUERY_SAFE_CHARS = "'(),$@:/*;!~"


def then(result: Any, callback: Callable[[Any], Any]) -> Any:
    """Applies ``callback`` to a payload, or once a batched ``Future`` settles."""
    if isinstance(result, Future):
        chained = Future()

        def _done(fut: Future):
            try:
                chained.set_result(callback(fut.result()))
            except Exception as e:
                chained.set_exception(e)

        result.add_done_callback(_done)
        return chained
    return callback(result)


class Queryable:

    def __init__(self, base_url: Union[str, Queryable], path: Optional[str] = None,
                 client=None, batch=None):
        self._query: Dict[str, str] = {}
        if isinstance(base_url, Queryable):
            self._parent_url = base_url._url
            self._url = combine_paths(base_url._url, path)
            self._client = client or base_url._client
            self._batch = batch or base_url._batch
            target = base_url._query.get('@target')
            if target is not None:
                self._query['@target'] = target
        else:
            url, _, query_string = base_url.partition('?')
            for pair in filter(None, query_string.split('&')):
                key, _, value = pair.partition('=')
                self._query[key] = value
            # a bare url is its own resource; with a path it is the parent
            self._parent_url = combine_paths(url) if path else url[:url.rfind('/')]
            self._url = combine_paths(url, path)
            self._client = client
            self._batch = batch

    def __repr__(self):
        return f"{type(self).__name__}({self.to_url_and_query()!r})"

    def __eq__(self, other):
        if not isinstance(other, Queryable):
            return NotImplemented
        return type(self) is type(other) and self.to_url_and_query() == other.to_url_and_query()

    def __hash__(self):
        return hash((type(self), self.to_url_and_query()))

    @property
    def url(self) -> str:
        return self._url

    @property
    def parent_url(self) -> str:
        return self._parent_url

    @property
    def query(self) -> Mapping[str, str]:
        return MappingProxyType(self._query)

    @property
    def client(self):
        return self._client

    @property
    def batch(self):
        return self._batch

    @property
    def has_batch(self) -> bool:
        return self._batch is not None

    def _clone(self: Q, **changes) -> Q:
        clone = copy.copy(self)
        clone._query = dict(self._query)
        for name, value in changes.items():
            setattr(clone, f"_{name}", value)
        return clone

    def concat(self: Q, path_part: str) -> Q:
        """Returns a copy with ``path_part`` appended verbatim, e.g. ``('id')``."""
        return self._clone(url=self._url + path_part)

    def append(self: Q, path_part: str) -> Q:
        """Returns a copy with ``path_part`` joined on as a new url segment."""
        return self._clone(url=combine_paths(self._url, path_part))

    def with_query(self: Q, params: Mapping[str, Any]) -> Q:
        clone = self._clone()
        clone._query.update({key: str(value) for key, value in params.items()})
        return clone

    def in_batch(self: Q, batch) -> Q:
        if self._batch is not None:
            raise AlreadyInBatchError("This query is already part of a batch.")
        return self._clone(batch=batch)

    def out_of_batch(self: Q) -> Q:
        """Returns a copy that sends its requests directly through the client."""
        return self._clone(batch=None)

    def get_parent(self, factory: Type[Q], base_url: Union[str, Queryable, None] = None,
                   path: Optional[str] = None) -> Q:
        """Builds a ``factory`` descriptor rooted at ``base_url`` (default: the parent url)."""
        parent = factory(base_url if base_url is not None else self._parent_url, path,
                         client=self._client, batch=self._batch)
        target = self._query.get('@target')
        if target is not None:
            parent._query['@target'] = target
        return parent

    def to_url(self) -> str:
        return self._url

    def to_url_and_query(self) -> str:
        if not self._query:
            return self._url
        query_string = '&'.join(f"{key}={quote(value, safe=QUERY_SAFE_CHARS)}"
                                for key, value in self._query.items())
        return f"{self._url}?{query_string}"

    def get(self, parser=None, headers: Optional[dict] = None):
        return self._request('GET', headers=headers, parser=parser)

    def post(self, body: Any = None, headers: Optional[dict] = None, parser=None):
        return self._request('POST', body=body, headers=headers, parser=parser)

    def patch(self, body: Any = None, headers: Optional[dict] = None, parser=None):
        return self._request('PATCH', body=body, headers=headers, parser=parser)

    def _request(self, method: str, body: Any = None, headers: Optional[dict] = None, parser=None):
        url = self.to_url_and_query()
        if self._batch is not None:
            logger.debug("Queueing %s %s in batch", method, url)
            return self._batch.add(method, url, body=body, headers=headers, parser=parser)
        if self._client is None:
            raise SharepointError(f"{type(self).__name__} for '{url}' is not bound to a client.")
        return self._client.request(method, url, body=body, headers=headers, parser=parser)


class QueryableCollection(Queryable):

    def filter(self: Q, filter_expression: str) -> Q:
        return self.with_query({"$filter": filter_expression})

    def select(self: Q, *selects: str) -> Q:
        if not selects:
            return self
        return self.with_query({"$select": ",".join(selects)})

    def expand(self: Q, *expands: str) -> Q:
        if not expands:
            return self
        return self.with_query({"$expand": ",".join(expands)})

    def order_by(self: Q, order_by: str, ascending: bool = True) -> Q:
        clauses = [c for c in self._query.get("$orderby", "").split(",") if c]
        clauses.append(order_by if ascending else f"{order_by} desc")
        return self.with_query({"$orderby": ",".join(clauses)})

    def skip(self: Q, skip: int) -> Q:
        return self.with_query({"$skip": skip})

    def top(self: Q, top: int) -> Q:
        return self.with_query({"$top": top})


class QueryableInstance(Queryable):

    def select(self: Q, *selects: str) -> Q:
        if not selects:
            return self
        return self.with_query({"$select": ",".join(selects)})

    def expand(self: Q, *expands: str) -> Q:
        if not expands:
            return self
        return self.with_query({"$expand": ",".join(expands)})
