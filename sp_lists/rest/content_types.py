from .fields import Fields
from .queryable import QueryableCollection, QueryableInstance


class ContentTypes(QueryableCollection):

    def __init__(self, base_url, path: str = "contenttypes", **kwargs):
        super().__init__(base_url, path, **kwargs)

    def get_by_id(self, content_type_id: str) -> "ContentType":
        return ContentType(self).concat(f"('{content_type_id}')")


class ContentType(QueryableInstance):

    @property
    def fields(self) -> Fields:
        return Fields(self)

    @property
    def field_links(self) -> QueryableCollection:
        return QueryableCollection(self, "fieldLinks")

    @property
    def parent(self) -> "ContentType":
        return ContentType(self, "parent")
