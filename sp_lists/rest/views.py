from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .odata import unwrap_property
from .queryable import QueryableCollection, QueryableInstance, then
from .types import delete_headers, merge_headers, typed_body
from ..utils import extend


@dataclass(frozen=True)
class ViewAddResult:
    data: Any
    view: "View"


@dataclass(frozen=True)
class ViewUpdateResult:
    data: Any
    view: "View"


class Views(QueryableCollection):

    def __init__(self, base_url, path: str = "views", **kwargs):
        super().__init__(base_url, path, **kwargs)

    def get_by_id(self, view_id: str) -> "View":
        return View(self).concat(f"('{view_id}')")

    def get_by_title(self, title: str) -> "View":
        return View(self, f"getByTitle('{title}')")

    def add(self, title: str, personal_view: bool = False,
            additional_settings: Optional[Mapping[str, Any]] = None):
        body = extend(typed_body("SP.View", {"PersonalView": personal_view, "Title": title}),
                      additional_settings)
        return then(self.post(body=body),
                    lambda data: ViewAddResult(data=data, view=self.get_by_id(data["Id"])))


class ViewFields(QueryableCollection):

    def __init__(self, base_url, path: str = "viewfields", **kwargs):
        super().__init__(base_url, path, **kwargs)

    def get_schema_xml(self):
        q = QueryableInstance(self, "schemaxml")
        return then(q.get(), lambda data: unwrap_property(data, "SchemaXml"))

    def add(self, field_title_or_internal_name: str):
        q = ViewFields(self, f"addviewfield('{field_title_or_internal_name}')")
        return q.post()

    def remove(self, field_internal_name: str):
        q = ViewFields(self, f"removeviewfield('{field_internal_name}')")
        return q.post()

    def remove_all(self):
        return ViewFields(self, "removeallviewfields").post()


class View(QueryableInstance):

    @property
    def fields(self) -> ViewFields:
        return ViewFields(self)

    def update(self, properties: Mapping[str, Any], etag: str = "*"):
        body = typed_body("SP.View", properties)
        return then(self.post(body=body, headers=merge_headers(etag)),
                    lambda data: ViewUpdateResult(data=data, view=self))

    def delete(self, etag: str = "*") -> None:
        return then(self.post(headers=delete_headers(etag)), lambda _: None)

    def render_as_html(self) -> str:
        q = QueryableInstance(self, "renderashtml")
        return then(q.get(), lambda data: unwrap_property(data, "RenderAsHtml"))
