import json
from unittest.mock import Mock, patch

import pytest

from sp_lists.clients.batch import ODataBatch
from sp_lists.clients.client import SharepointClient
from sp_lists.rest.exceptions import BatchNotSupportedError, ODataIdError, SharepointHttpError
from sp_lists.rest.lists import List, ListAddResult, ListEnsureResult, Lists
from sp_lists.rest.odata import TextParser
from sp_lists.rest.types import CamlQuery, ChangeQuery, ChangeToken, ControlMode

WEB_URL = "https://contoso.sharepoint.com/sites/dev/_api/web"
LISTS_URL = f"{WEB_URL}/lists"


class TestLists:
    """Test suite for the Lists collection"""

    def setup_method(self):
        self.mock_client = Mock(spec=SharepointClient)
        self.lists = Lists(WEB_URL, client=self.mock_client)

    def test_collection_url(self):
        assert self.lists.url == LISTS_URL
        assert self.lists.parent_url == WEB_URL

    @pytest.mark.parametrize("title", ["Documents", "Team Tasks", "a"])
    def test_get_by_title_composes_path_without_request(self, title):
        target = self.lists.get_by_title(title)

        assert isinstance(target, List)
        assert target.url == f"{LISTS_URL}/getByTitle('{title}')"
        assert target.url.endswith(f"getByTitle('{title}')")
        self.mock_client.request.assert_not_called()

    def test_get_by_id_concats_id(self):
        target = self.lists.get_by_id("1234-abcd")

        assert target.url == f"{LISTS_URL}('1234-abcd')"
        assert target.parent_url == LISTS_URL
        self.mock_client.request.assert_not_called()

    def test_get_by_id_does_not_touch_collection(self):
        self.lists.get_by_id("1234")
        assert self.lists.url == LISTS_URL

    def test_add_posts_default_body(self):
        self.mock_client.request.return_value = {"Id": "new-id"}

        result = self.lists.add("Tasks")

        self.mock_client.request.assert_called_once()
        method, url = self.mock_client.request.call_args[0]
        body = self.mock_client.request.call_args[1]["body"]
        assert method == "POST"
        assert url == LISTS_URL
        assert body == {
            "__metadata": {"type": "SP.List"},
            "AllowContentTypes": False,
            "BaseTemplate": 100,
            "ContentTypesEnabled": False,
            "Description": "",
            "Title": "Tasks",
        }
        assert isinstance(result, ListAddResult)
        assert result.data == {"Id": "new-id"}
        assert result.list.url == f"{LISTS_URL}/getByTitle('Tasks')"

    def test_add_additional_settings_override_defaults(self):
        self.mock_client.request.return_value = {}

        self.lists.add("Tasks", "desc", 101, True,
                       {"Description": "override", "Hidden": True, "BaseTemplate": 171})

        body = self.mock_client.request.call_args[1]["body"]
        assert body["Description"] == "override"
        assert body["BaseTemplate"] == 171
        assert body["Hidden"] is True
        assert body["AllowContentTypes"] is True
        assert body["ContentTypesEnabled"] is True
        assert body["Title"] == "Tasks"

    def test_add_list_uses_requested_title(self):
        self.mock_client.request.return_value = {"Title": "Server Title"}

        result = self.lists.add("Requested")

        assert result.list.url.endswith("getByTitle('Requested')")

    def test_ensure_existing_list(self):
        self.mock_client.request.return_value = {"Title": "Tasks"}

        with patch.object(Lists, "add") as mock_add:
            result = self.lists.ensure("Tasks")

        mock_add.assert_not_called()
        assert isinstance(result, ListEnsureResult)
        assert result.created is False
        assert result.data == {"Title": "Tasks"}
        assert result.list.url == f"{LISTS_URL}/getByTitle('Tasks')"
        method, url = self.mock_client.request.call_args[0]
        assert method == "GET"
        assert url == f"{LISTS_URL}/getByTitle('Tasks')"

    def test_ensure_missing_list_adds_once(self):
        self.mock_client.request.side_effect = [
            SharepointHttpError(404, "Not Found", {"error": {"code": "-1"}}),
            {"Id": "created"},
        ]

        result = self.lists.ensure("Tasks", "desc")

        assert result.created is True
        assert result.data == {"Id": "created"}
        assert result.list.url == f"{LISTS_URL}/getByTitle('Tasks')"
        assert self.mock_client.request.call_count == 2
        second = self.mock_client.request.call_args_list[1]
        assert second[0] == ("POST", LISTS_URL)
        assert second[1]["body"]["Description"] == "desc"

    def test_ensure_calls_add_exactly_once(self):
        self.mock_client.request.side_effect = SharepointHttpError(404, "Not Found")
        add_result = ListAddResult(data={"Id": 1}, list=self.lists.get_by_title("Tasks"))

        with patch.object(Lists, "add", return_value=add_result) as mock_add:
            result = self.lists.ensure("Tasks", "d", 101, True, {"Hidden": True})

        mock_add.assert_called_once_with("Tasks", "d", 101, True, {"Hidden": True})
        assert result.created is True
        assert result.data == {"Id": 1}

    def test_ensure_propagates_add_failure(self):
        self.mock_client.request.side_effect = [
            SharepointHttpError(404, "Not Found"),
            SharepointHttpError(403, "Forbidden"),
        ]

        with pytest.raises(SharepointHttpError) as exc_info:
            self.lists.ensure("Tasks")
        assert exc_info.value.status_code == 403

    def test_ensure_does_not_create_on_network_failure(self):
        self.mock_client.request.side_effect = ConnectionError("down")

        with pytest.raises(ConnectionError):
            self.lists.ensure("Tasks")
        assert self.mock_client.request.call_count == 1

    @pytest.mark.parametrize("args", [("Tasks",), ("Other", "desc", 101, True, {"Hidden": True})])
    def test_ensure_in_batch_raises_before_request(self, args):
        batch = ODataBatch(self.mock_client)
        batched = self.lists.in_batch(batch)

        with pytest.raises(BatchNotSupportedError):
            batched.ensure(*args)

        assert len(batch) == 0
        self.mock_client.request.assert_not_called()

    def test_ensure_site_assets_library(self):
        odata_id = f"{WEB_URL}/Lists(guid'aaaa')"
        self.mock_client.request.return_value = {"__metadata": {"id": odata_id}}

        result = self.lists.ensure_site_assets_library()

        method, url = self.mock_client.request.call_args[0]
        assert (method, url) == ("POST", f"{LISTS_URL}/ensuresiteassetslibrary")
        assert isinstance(result, List)
        assert result.url == odata_id
        assert result.client is self.mock_client

    def test_ensure_site_pages_library_minimal_metadata(self):
        odata_id = f"{WEB_URL}/Lists(guid'bbbb')"
        self.mock_client.request.return_value = {"odata.id": odata_id}

        result = self.lists.ensure_site_pages_library()

        assert self.mock_client.request.call_args[0][1] == f"{LISTS_URL}/ensuresitepageslibrary"
        assert result.url == odata_id

    def test_ensure_site_pages_library_without_odata_id(self):
        self.mock_client.request.return_value = {"Title": "Site Pages"}

        with pytest.raises(ODataIdError):
            self.lists.ensure_site_pages_library()


class TestList:
    """Test suite for a single List"""

    def setup_method(self):
        self.mock_client = Mock(spec=SharepointClient)
        self.lists = Lists(WEB_URL, client=self.mock_client)
        self.list = self.lists.get_by_title("Tasks")
        self.list_url = f"{LISTS_URL}/getByTitle('Tasks')"

    def _last_call(self):
        args, kwargs = self.mock_client.request.call_args
        return args[0], args[1], kwargs

    @pytest.mark.parametrize("accessor, suffix", [
        ("content_types", "contenttypes"),
        ("items", "items"),
        ("views", "views"),
        ("fields", "fields"),
        ("forms", "forms"),
        ("default_view", "DefaultView"),
        ("user_custom_actions", "UserCustomActions"),
        ("effective_base_permissions", "EffectiveBasePermissions"),
        ("event_receivers", "EventReceivers"),
        ("related_fields", "getRelatedFields"),
        ("information_rights_management_settings", "InformationRightsManagementSettings"),
        ("subscriptions", "subscriptions"),
        ("role_assignments", "roleassignments"),
    ])
    def test_sub_resource_accessors(self, accessor, suffix):
        resource = getattr(self.list, accessor)

        assert resource.url == f"{self.list_url}/{suffix}"
        assert resource.client is self.mock_client
        self.mock_client.request.assert_not_called()

    def test_get_view(self):
        view = self.list.get_view("view-guid")
        assert view.url == f"{self.list_url}/getView('view-guid')"

    def test_update_without_title_returns_same_list(self):
        self.mock_client.request.return_value = {}

        result = self.list.update({"Description": "new"}, "\"3\"")

        method, url, kwargs = self._last_call()
        assert (method, url) == ("POST", self.list_url)
        assert kwargs["body"] == {"__metadata": {"type": "SP.List"}, "Description": "new"}
        assert kwargs["headers"] == {"IF-Match": "\"3\"", "X-HTTP-Method": "MERGE"}
        assert result.list is self.list

    @pytest.mark.parametrize("lookup", ["title", "id"])
    def test_update_title_reroots_at_original_parent(self, lookup):
        self.mock_client.request.return_value = {}
        original = self.lists.get_by_title("Old") if lookup == "title" else self.lists.get_by_id("guid-1")

        result = original.update({"Title": "New"})

        assert result.list.url == f"{LISTS_URL}/getByTitle('New')"
        assert result.list.parent_url == original.parent_url == LISTS_URL
        assert result.list.client is self.mock_client
        assert original.url != result.list.url

    def test_update_twice_keeps_parent(self):
        self.mock_client.request.return_value = {}

        renamed = self.list.update({"Title": "New"}).list
        again = renamed.update({"Title": "Newer"}).list

        assert again.url == f"{LISTS_URL}/getByTitle('Newer')"

    def test_update_default_etag(self):
        self.mock_client.request.return_value = {}
        self.list.update({"Hidden": False})
        assert self._last_call()[2]["headers"]["IF-Match"] == "*"

    def test_delete(self):
        self.mock_client.request.return_value = {}

        assert self.list.delete() is None

        method, url, kwargs = self._last_call()
        assert (method, url) == ("POST", self.list_url)
        assert kwargs["headers"] == {"IF-Match": "*", "X-HTTP-Method": "DELETE"}

    def test_get_changes_uses_child_reference(self):
        self.mock_client.request.return_value = [{"ChangeType": 1}]
        query = ChangeQuery(add=True, item=True, change_token_start=ChangeToken(string_value="1;3;abc"))

        result = self.list.get_changes(query)

        method, url, kwargs = self._last_call()
        assert (method, url) == ("POST", f"{self.list_url}/getchanges")
        assert kwargs["body"] == {"query": {
            "__metadata": {"type": "SP.ChangeQuery"},
            "Add": True,
            "Item": True,
            "ChangeTokenStart": {"StringValue": "1;3;abc"},
        }}
        assert result == [{"ChangeType": 1}]
        assert self.list.url == self.list_url

    def test_get_changes_accepts_plain_mapping(self):
        self.mock_client.request.return_value = []
        self.list.get_changes({"Update": True})
        assert self._last_call()[2]["body"]["query"] == {"__metadata": {"type": "SP.ChangeQuery"}, "Update": True}

    def test_get_items_by_caml_query_with_expands(self):
        self.mock_client.request.return_value = [{"Id": 1}]
        query = CamlQuery(view_xml="<View><RowLimit>5</RowLimit></View>")

        result = self.list.get_items_by_caml_query(query, "Author", "Editor")

        method, url, kwargs = self._last_call()
        assert method == "POST"
        assert url == f"{self.list_url}/getitems?$expand=Author,Editor"
        assert kwargs["body"] == {"query": {
            "__metadata": {"type": "SP.CamlQuery"},
            "ViewXml": "<View><RowLimit>5</RowLimit></View>",
        }}
        assert result == [{"Id": 1}]

    def test_get_items_by_caml_query_without_expands(self):
        self.mock_client.request.return_value = []
        self.list.get_items_by_caml_query({"ViewXml": "<View/>"})
        assert self._last_call()[1] == f"{self.list_url}/getitems"

    def test_get_list_item_changes_since_token_returns_text(self):
        xml = "<listitems><rs:data ItemCount='0'/></listitems>"
        self.mock_client.request.return_value = xml

        result = self.list.get_list_item_changes_since_token({"ChangeToken": "1;3;abc"})

        method, url, kwargs = self._last_call()
        assert (method, url) == ("POST", f"{self.list_url}/getlistitemchangessincetoken")
        assert kwargs["body"]["query"]["__metadata"] == {"type": "SP.ChangeLogItemQuery"}
        assert isinstance(kwargs["parser"], TextParser)
        assert result == xml

    def test_recycle_unwraps_identifier(self):
        self.mock_client.request.return_value = {"Recycle": "guid-string"}

        assert self.list.recycle() == "guid-string"
        assert self._last_call()[1] == f"{self.list_url}/recycle"
        assert self.list.url == self.list_url

    def test_recycle_without_wrapper_returns_payload(self):
        payload = {"Other": 1}
        self.mock_client.request.return_value = payload
        assert self.list.recycle() == payload

    def test_render_list_data_double_decode(self):
        inner = {"Row": [{"ID": "1"}], "FirstRow": 1}
        self.mock_client.request.return_value = json.dumps({"RenderListData": inner})

        result = self.list.render_list_data("<View/>")

        method, url, kwargs = self._last_call()
        assert method == "POST"
        assert url == f"{self.list_url}/renderlistdata(@viewXml)?@viewXml='%3CView/%3E'"
        assert result == inner

    def test_render_list_data_without_wrapper(self):
        self.mock_client.request.return_value = json.dumps({"Row": []})
        assert self.list.render_list_data("<View/>") == {"Row": []}

    def test_render_list_form_data_double_decode(self):
        self.mock_client.request.return_value = json.dumps({"ListData": {"Title": "x"}})

        result = self.list.render_list_form_data(7, "form-guid", ControlMode.EDIT)

        assert self._last_call()[1] == (
            f"{self.list_url}/renderlistformdata(itemid=7, formid='form-guid', mode=2)")
        assert result == {"Title": "x"}

    def test_render_list_form_data_without_wrapper(self):
        self.mock_client.request.return_value = json.dumps({"Schema": {}})
        assert self.list.render_list_form_data(1, "f", ControlMode.DISPLAY) == {"Schema": {}}

    def test_reserve_list_item_id(self):
        self.mock_client.request.return_value = {"ReserveListItemId": 42}

        assert self.list.reserve_list_item_id() == 42
        assert self._last_call()[1] == f"{self.list_url}/reservelistitemid"

    def test_reserve_list_item_id_without_wrapper(self):
        self.mock_client.request.return_value = {"Value": 42}
        assert self.list.reserve_list_item_id() == {"Value": 42}


class TestListsInBatch:
    """Operations queued in a batch resolve to the same values once executed"""

    def setup_method(self):
        self.mock_client = Mock(spec=SharepointClient)
        self.batch = ODataBatch(self.mock_client)
        self.lists = Lists(WEB_URL, client=self.mock_client).in_batch(self.batch)

    def test_add_returns_future(self):
        self.mock_client.request.return_value = {"Id": 1}

        future = self.lists.add("Tasks")
        self.mock_client.request.assert_not_called()

        self.batch.execute()

        result = future.result()
        assert isinstance(result, ListAddResult)
        assert result.list.url == f"{LISTS_URL}/getByTitle('Tasks')"
        assert result.list.batch is None

        self.mock_client.request.return_value = {"Title": "Tasks"}
        assert result.list.get() == {"Title": "Tasks"}
        self.mock_client.request.assert_called_with("GET", f"{LISTS_URL}/getByTitle('Tasks')",
                                                    body=None, headers=None, parser=None)

    def test_renamed_list_is_usable_after_execute(self):
        self.mock_client.request.return_value = {}

        future = self.lists.get_by_title("Old").update({"Title": "New"})
        self.batch.execute()

        renamed = future.result().list
        assert renamed.batch is None
        assert renamed.client is self.mock_client
        renamed.delete()
        self.mock_client.request.assert_called_with(
            "POST", f"{LISTS_URL}/getByTitle('New')", body=None,
            headers={"IF-Match": "*", "X-HTTP-Method": "DELETE"}, parser=None)

    def test_site_assets_library_is_usable_after_execute(self):
        library_url = "https://contoso.sharepoint.com/sites/dev/_api/Web/Lists(guid'abc')"
        self.mock_client.request.return_value = {"__metadata": {"id": library_url}}

        future = self.lists.ensure_site_assets_library()
        self.batch.execute()

        library = future.result()
        assert library.url == library_url
        assert library.batch is None
        assert library.client is self.mock_client

    def test_recycle_future_unwraps(self):
        self.mock_client.request.return_value = {"Recycle": "abc"}

        future = self.lists.get_by_title("Tasks").recycle()
        self.batch.execute()

        assert future.result() == "abc"

    def test_failed_request_rejects_future(self):
        self.mock_client.request.side_effect = SharepointHttpError(500, "Server Error")

        future = self.lists.get_by_title("Tasks").reserve_list_item_id()
        self.batch.execute()

        with pytest.raises(SharepointHttpError):
            future.result()


class TestListOverTransport:
    """Responses in the verbose envelope, parsed by the real client"""

    def setup_method(self):
        self.session = Mock()
        self.client = SharepointClient("https://contoso.sharepoint.com/sites/dev", session=self.session)
        self.list = self.client.web.lists.get_by_title("Tasks")

    def _respond(self, body):
        response = Mock()
        response.status_code = 200
        response.ok = True
        response.content = json.dumps(body).encode()
        response.json.return_value = body
        self.session.request.return_value = response

    def test_render_list_data_decodes_wrapped_string(self):
        self._respond({"d": {"RenderListData": json.dumps({"Row": [{"ID": "1"}]})}})

        assert self.list.render_list_data("<View/>") == {"Row": [{"ID": "1"}]}

    def test_render_list_form_data_decodes_wrapped_string(self):
        self._respond({"d": {"ListData": json.dumps({"Title": "x", "ID": 7})}})

        result = self.list.render_list_form_data(7, "form-guid", ControlMode.DISPLAY)

        assert result == {"Title": "x", "ID": 7}

    def test_render_list_data_keeps_decoded_wrapper_value(self):
        self._respond({"d": {"RenderListData": {"Row": []}}})

        assert self.list.render_list_data("<View/>") == {"Row": []}

    def test_added_list_from_batch_sends_directly(self):
        batch = self.client.create_batch()
        self._respond({"d": {"Id": "guid-1"}})

        future = self.client.web.lists.in_batch(batch).add("Tasks")
        batch.execute()
        self._respond({"d": {"Title": "Tasks"}})

        assert future.result().list.get() == {"Title": "Tasks"}
        assert self.session.request.call_count == 2
