"""List collection and single list descriptors of the SharePoint REST api.

Every method maps to one request against ``/_api/web/lists``. Descriptors
never change in place: operations that alter a list's identity (a rename,
for instance) hand back a fresh :class:`List`.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .content_types import ContentTypes
from .exceptions import BatchNotSupportedError, SharepointHttpError
from .fields import Fields
from .forms import Forms
from .items import Items
from .odata import TextParser, extract_odata_id, unwrap_property
from .queryable import Queryable, QueryableCollection, then
from .queryable_securable import QueryableSecurable
from .subscriptions import Subscriptions
from .types import (CamlQuery, ChangeLogItemQuery, ChangeQuery, ControlMode, QueryPayload,
                    delete_headers, merge_headers, typed_body)
from .user_custom_actions import UserCustomActions
from .views import View, Views
from ..utils import extend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListAddResult:
    data: Any
    list: "List"


@dataclass(frozen=True)
class ListUpdateResult:
    data: Any
    list: "List"


@dataclass(frozen=True)
class ListEnsureResult:
    data: Any
    list: "List"
    created: bool


class Lists(QueryableCollection):
    """The lists of a web."""

    def __init__(self, base_url: Union[str, Queryable], path: str = "lists", **kwargs):
        super().__init__(base_url, path, **kwargs)

    def get_by_title(self, title: str) -> "List":
        return List(self, f"getByTitle('{title}')")

    def get_by_id(self, list_id: str) -> "List":
        return List(self).concat(f"('{list_id}')")

    def add(self, title: str, description: str = "", template: int = 100,
            enable_content_types: bool = False,
            additional_settings: Optional[Mapping[str, Union[str, int, bool]]] = None):
        """Creates a list.

        Args:
            title: Title of the new list.
            description: Description of the new list.
            template: List template id (100 is a generic custom list).
            enable_content_types: Allows and enables content types on the list.
            additional_settings: Extra ``SP.List`` properties; they win over the
                values derived from the other arguments.

        Returns:
            :class:`ListAddResult`. Its ``list`` is built from the requested
            title, reload it to read the server state.
        """
        body = extend(typed_body("SP.List", {
            "AllowContentTypes": enable_content_types,
            "BaseTemplate": template,
            "ContentTypesEnabled": enable_content_types,
            "Description": description,
            "Title": title,
        }), additional_settings)
        return then(self.post(body=body),
                    lambda data: ListAddResult(data=data, list=self.get_by_title(title).out_of_batch()))

    def ensure(self, title: str, description: str = "", template: int = 100,
               enable_content_types: bool = False,
               additional_settings: Optional[Mapping[str, Union[str, int, bool]]] = None) -> ListEnsureResult:
        """Returns the list called ``title``, creating it when it does not exist.

        Settings of an existing list are left untouched. Not available inside
        a batch because the create depends on the outcome of the read.
        """
        if self.has_batch:
            raise BatchNotSupportedError("The ensure method is not supported as part of a batch.")

        target = self.get_by_title(title)
        try:
            data = target.get()
        except SharepointHttpError as e:
            logger.debug("List '%s' not found (%s), creating it", title, e.status_code)
        else:
            return ListEnsureResult(data=data, list=target, created=False)

        result = self.add(title, description, template, enable_content_types, additional_settings)
        logger.info("Created list '%s'", title)
        return ListEnsureResult(data=result.data, list=self.get_by_title(title), created=True)

    def ensure_site_assets_library(self):
        """Gets the default asset location for images and other files uploaded to wiki pages."""
        q = Lists(self, "ensuresiteassetslibrary")
        return then(q.post(), self._list_from_odata_id)

    def ensure_site_pages_library(self):
        """Gets the default location for wiki pages."""
        q = Lists(self, "ensuresitepageslibrary")
        return then(q.post(), self._list_from_odata_id)

    def _list_from_odata_id(self, data: Any) -> "List":
        return List(extract_odata_id(data), client=self.client)


class List(QueryableSecurable):
    """A single list, addressed by title or by id."""

    @property
    def content_types(self) -> ContentTypes:
        return ContentTypes(self)

    @property
    def items(self) -> Items:
        return Items(self)

    @property
    def views(self) -> Views:
        return Views(self)

    @property
    def fields(self) -> Fields:
        return Fields(self)

    @property
    def forms(self) -> Forms:
        return Forms(self)

    @property
    def default_view(self) -> View:
        return View(self, "DefaultView")

    @property
    def user_custom_actions(self) -> UserCustomActions:
        return UserCustomActions(self)

    @property
    def effective_base_permissions(self) -> Queryable:
        return Queryable(self, "EffectiveBasePermissions")

    @property
    def event_receivers(self) -> QueryableCollection:
        return QueryableCollection(self, "EventReceivers")

    @property
    def related_fields(self) -> Queryable:
        return Queryable(self, "getRelatedFields")

    @property
    def information_rights_management_settings(self) -> Queryable:
        return Queryable(self, "InformationRightsManagementSettings")

    @property
    def subscriptions(self) -> Subscriptions:
        return Subscriptions(self)

    def get_view(self, view_id: str) -> View:
        return View(self, f"getView('{view_id}')")

    def update(self, properties: Mapping[str, Union[str, int, bool]], etag: str = "*"):
        """Merges ``properties`` into this list.

        When ``Title`` changes, the returned ``list`` is addressed by the new
        title under this list's parent url.
        """
        body = typed_body("SP.List", properties)

        def _result(data):
            target = self
            if "Title" in properties:
                renamed = self.get_parent(List, self.parent_url, f"getByTitle('{properties['Title']}')")
                target = renamed.out_of_batch()
            return ListUpdateResult(data=data, list=target)

        return then(self.post(body=body, headers=merge_headers(etag)), _result)

    def delete(self, etag: str = "*") -> None:
        return then(self.post(headers=delete_headers(etag)), lambda _: None)

    def get_changes(self, query: Union[ChangeQuery, QueryPayload]):
        """Returns the change log entries of this list matching ``query``."""
        body = {"query": typed_body("SP.ChangeQuery", query)}
        return List(self, "getchanges").post(body=body)

    def get_items_by_caml_query(self, query: Union[CamlQuery, QueryPayload], *expands: str):
        """Returns the items selected by a CAML query.

        Args:
            query: ``ViewXml`` and friends, see :class:`CamlQuery`.
            *expands: Fields to load inline via ``$expand``.
        """
        body = {"query": typed_body("SP.CamlQuery", query)}
        q = List(self, "getitems").expand(*expands)
        return q.post(body=body)

    def get_list_item_changes_since_token(self, query: Union[ChangeLogItemQuery, QueryPayload]) -> str:
        """Returns the changes since ``query.change_token`` as the raw XML document."""
        body = {"query": typed_body("SP.ChangeLogItemQuery", query)}
        q = List(self, "getlistitemchangessincetoken")
        return q.post(body=body, parser=TextParser())

    def recycle(self):
        """Moves the list to the Recycle Bin and returns the id of the Recycle Bin item."""
        q = List(self, "recycle")
        return then(q.post(), lambda data: unwrap_property(data, "Recycle"))

    def render_list_data(self, view_xml: str):
        q = List(self, "renderlistdata(@viewXml)").with_query({"@viewXml": f"'{view_xml}'"})
        return then(q.post(), lambda data: _unwrap_json_string(data, "RenderListData"))

    def render_list_form_data(self, item_id: int, form_id: str, mode: ControlMode):
        """Gets the field values and field schema attributes of a list item."""
        q = List(self, f"renderlistformdata(itemid={item_id}, formid='{form_id}', mode={int(mode)})")
        return then(q.post(), lambda data: _unwrap_json_string(data, "ListData"))

    def reserve_list_item_id(self):
        """Reserves a list item id for idempotent item creation."""
        q = List(self, "reservelistitemid")
        return then(q.post(), lambda data: unwrap_property(data, "ReserveListItemId"))


def _unwrap_json_string(data: Any, name: str) -> Any:
    # the document is serialized into a string, either as the whole body or
    # under 'name' inside the verbose envelope
    if isinstance(data, str):
        data = json.loads(data)
    value = unwrap_property(data, name)
    if isinstance(value, str):
        return json.loads(value)
    return value
