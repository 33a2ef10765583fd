from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .exceptions import BatchNotSupportedError
from .odata import unwrap_property
from .queryable import QueryableCollection, QueryableInstance, then
from .queryable_securable import QueryableSecurable
from .types import delete_headers, merge_headers, typed_body


@dataclass(frozen=True)
class ItemAddResult:
    data: Any
    item: "Item"


@dataclass(frozen=True)
class ItemUpdateResult:
    data: Any
    item: "Item"


def _entity_type_of(list_url: QueryableInstance) -> str:
    # two dependent round trips, cannot be queued
    if list_url.has_batch:
        raise BatchNotSupportedError(
            "Pass list_item_entity_type_full_name explicitly when working inside a batch.")
    data = list_url.select("ListItemEntityTypeFullName").get()
    return unwrap_property(data, "ListItemEntityTypeFullName")


class Items(QueryableCollection):

    def __init__(self, base_url, path: str = "items", **kwargs):
        super().__init__(base_url, path, **kwargs)

    def get_by_id(self, item_id: int) -> "Item":
        return Item(self).concat(f"({item_id})")

    def add(self, properties: Optional[Mapping[str, Any]] = None,
            list_item_entity_type_full_name: Optional[str] = None):
        """Creates a list item.

        The entity type name (``SP.Data.<List>ListItem``) is read from the
        parent list when not supplied, which costs one extra request.
        """
        entity_type = list_item_entity_type_full_name or _entity_type_of(
            self.get_parent(QueryableInstance))
        body = typed_body(entity_type, properties)
        return then(self.post(body=body),
                    lambda data: ItemAddResult(data=data, item=self.get_by_id(data["Id"]).out_of_batch()))


class Item(QueryableSecurable):

    @property
    def attachment_files(self) -> QueryableCollection:
        return QueryableCollection(self, "AttachmentFiles")

    @property
    def field_values_as_text(self) -> QueryableInstance:
        return QueryableInstance(self, "FieldValuesAsText")

    def update(self, properties: Mapping[str, Any], etag: str = "*",
               list_item_entity_type_full_name: Optional[str] = None):
        # parent_url is ".../items"; the list sits one segment above it
        list_url = self.parent_url[:self.parent_url.rfind('/')]
        entity_type = list_item_entity_type_full_name or _entity_type_of(
            self.get_parent(QueryableInstance, list_url))
        body = typed_body(entity_type, properties)
        return then(self.post(body=body, headers=merge_headers(etag)),
                    lambda data: ItemUpdateResult(data=data, item=self))

    def delete(self, etag: str = "*") -> None:
        return then(self.post(headers=delete_headers(etag)), lambda _: None)

    def recycle(self):
        q = Item(self, "recycle")
        return then(q.post(), lambda data: unwrap_property(data, "Recycle"))
