from dataclasses import dataclass
from typing import Any, Mapping

from .queryable import QueryableCollection, QueryableInstance, then
from .types import delete_headers, merge_headers, typed_body


@dataclass(frozen=True)
class UserCustomActionAddResult:
    data: Any
    action: "UserCustomAction"


@dataclass(frozen=True)
class UserCustomActionUpdateResult:
    data: Any
    action: "UserCustomAction"


class UserCustomActions(QueryableCollection):

    def __init__(self, base_url, path: str = "UserCustomActions", **kwargs):
        super().__init__(base_url, path, **kwargs)

    def get_by_id(self, action_id: str) -> "UserCustomAction":
        return UserCustomAction(self).concat(f"('{action_id}')")

    def add(self, properties: Mapping[str, Any]):
        body = typed_body("SP.UserCustomAction", properties)
        return then(self.post(body=body),
                    lambda data: UserCustomActionAddResult(data=data, action=self.get_by_id(data["Id"])))

    def clear(self) -> None:
        return UserCustomActions(self, "clear").post()


class UserCustomAction(QueryableInstance):

    def update(self, properties: Mapping[str, Any], etag: str = "*"):
        body = typed_body("SP.UserCustomAction", properties)
        return then(self.post(body=body, headers=merge_headers(etag)),
                    lambda data: UserCustomActionUpdateResult(data=data, action=self))

    def delete(self, etag: str = "*") -> None:
        return then(self.post(headers=delete_headers(etag)), lambda _: None)
