from dataclasses import dataclass
from typing import Any, Mapping

from .queryable import QueryableCollection, QueryableInstance, then
from .types import delete_headers, merge_headers, typed_body


class Fields(QueryableCollection):

    def __init__(self, base_url, path: str = "fields", **kwargs):
        super().__init__(base_url, path, **kwargs)

    def get_by_title(self, title: str) -> "Field":
        return Field(self, f"getByTitle('{title}')")

    def get_by_internal_name_or_title(self, name: str) -> "Field":
        return Field(self, f"getByInternalNameOrTitle('{name}')")

    def get_by_id(self, field_id: str) -> "Field":
        return Field(self).concat(f"('{field_id}')")


@dataclass(frozen=True)
class FieldUpdateResult:
    data: Any
    field: "Field"


class Field(QueryableInstance):

    def update(self, properties: Mapping[str, Any], field_type: str = "SP.Field", etag: str = "*"):
        body = typed_body(field_type, properties)
        return then(self.post(body=body, headers=merge_headers(etag)),
                    lambda data: FieldUpdateResult(data=data, field=self))

    def delete(self, etag: str = "*") -> None:
        return then(self.post(headers=delete_headers(etag)), lambda _: None)
