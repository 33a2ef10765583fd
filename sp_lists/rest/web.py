from .lists import List, Lists
from .queryable_securable import QueryableSecurable
from .user_custom_actions import UserCustomActions


class Web(QueryableSecurable):
    """Root of a site's REST api (``<site>/_api/web``)."""

    def __init__(self, base_url, path: str = "web", **kwargs):
        super().__init__(base_url, path, **kwargs)

    @property
    def lists(self) -> Lists:
        return Lists(self)

    @property
    def site_user_info_list(self) -> List:
        return List(self, "siteuserinfolist")

    @property
    def user_custom_actions(self) -> UserCustomActions:
        return UserCustomActions(self)
