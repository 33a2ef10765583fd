from enum import IntEnum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ControlMode(IntEnum):
    DISPLAY = 1
    EDIT = 2
    NEW = 3


class ChangeToken(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    string_value: str = Field(alias="StringValue")


class ChangeQuery(BaseModel):
    """Filters the change log returned by ``List.get_changes``."""
    model_config = ConfigDict(populate_by_name=True)

    add: Optional[bool] = Field(default=None, alias="Add")
    alert_change: Optional[bool] = Field(default=None, alias="Alert")
    change_token_end: Optional[ChangeToken] = Field(default=None, alias="ChangeTokenEnd")
    change_token_start: Optional[ChangeToken] = Field(default=None, alias="ChangeTokenStart")
    content_type: Optional[bool] = Field(default=None, alias="ContentType")
    delete_object: Optional[bool] = Field(default=None, alias="DeleteObject")
    field: Optional[bool] = Field(default=None, alias="Field")
    file: Optional[bool] = Field(default=None, alias="File")
    folder: Optional[bool] = Field(default=None, alias="Folder")
    group: Optional[bool] = Field(default=None, alias="Group")
    group_membership_add: Optional[bool] = Field(default=None, alias="GroupMembershipAdd")
    group_membership_delete: Optional[bool] = Field(default=None, alias="GroupMembershipDelete")
    item: Optional[bool] = Field(default=None, alias="Item")
    list_change: Optional[bool] = Field(default=None, alias="List")
    move: Optional[bool] = Field(default=None, alias="Move")
    navigation: Optional[bool] = Field(default=None, alias="Navigation")
    rename: Optional[bool] = Field(default=None, alias="Rename")
    restore: Optional[bool] = Field(default=None, alias="Restore")
    role_assignment_add: Optional[bool] = Field(default=None, alias="RoleAssignmentAdd")
    role_assignment_delete: Optional[bool] = Field(default=None, alias="RoleAssignmentDelete")
    role_definition_add: Optional[bool] = Field(default=None, alias="RoleDefinitionAdd")
    role_definition_delete: Optional[bool] = Field(default=None, alias="RoleDefinitionDelete")
    role_definition_update: Optional[bool] = Field(default=None, alias="RoleDefinitionUpdate")
    security_policy: Optional[bool] = Field(default=None, alias="SecurityPolicy")
    site: Optional[bool] = Field(default=None, alias="Site")
    system_update: Optional[bool] = Field(default=None, alias="SystemUpdate")
    update: Optional[bool] = Field(default=None, alias="Update")
    user: Optional[bool] = Field(default=None, alias="User")
    view: Optional[bool] = Field(default=None, alias="View")
    web: Optional[bool] = Field(default=None, alias="Web")


class CamlQuery(BaseModel):
    """Collaborative Application Markup Language query for ``List.get_items_by_caml_query``."""
    model_config = ConfigDict(populate_by_name=True)

    view_xml: Optional[str] = Field(default=None, alias="ViewXml")
    dates_in_utc: Optional[bool] = Field(default=None, alias="DatesInUtc")
    folder_server_relative_url: Optional[str] = Field(default=None, alias="FolderServerRelativeUrl")
    list_item_collection_position: Optional[Dict[str, Any]] = Field(default=None, alias="ListItemCollectionPosition")


class ChangeLogItemQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    change_token: Optional[str] = Field(default=None, alias="ChangeToken")
    contains: Optional[str] = Field(default=None, alias="Contains")
    query: Optional[str] = Field(default=None, alias="Query")
    query_options: Optional[str] = Field(default=None, alias="QueryOptions")
    row_limit: Optional[str] = Field(default=None, alias="RowLimit")
    view_fields: Optional[str] = Field(default=None, alias="ViewFields")
    view_name: Optional[str] = Field(default=None, alias="ViewName")


QueryPayload = Union[BaseModel, Mapping[str, Any]]


def as_payload(query: Optional[QueryPayload]) -> Dict[str, Any]:
    """Converts a query model or plain mapping into wire field names."""
    if query is None:
        return {}
    if isinstance(query, BaseModel):
        return query.model_dump(by_alias=True, exclude_none=True)
    return dict(query)


def typed_body(type_name: str, fields: Optional[QueryPayload] = None) -> Dict[str, Any]:
    """Returns ``fields`` merged over the ``__metadata`` type discriminator."""
    body: Dict[str, Any] = {"__metadata": {"type": type_name}}
    body.update(as_payload(fields))
    return body


def merge_headers(etag: str = "*") -> Dict[str, str]:
    return {"IF-Match": etag, "X-HTTP-Method": "MERGE"}


def delete_headers(etag: str = "*") -> Dict[str, str]:
    return {"IF-Match": etag, "X-HTTP-Method": "DELETE"}
