from .odata import unwrap_property
from .queryable import QueryableCollection, QueryableInstance, then


class QueryableSecurable(QueryableInstance):
    """Instance whose permissions can be inspected and broken away from its parent."""

    @property
    def role_assignments(self) -> QueryableCollection:
        return QueryableCollection(self, "roleassignments")

    @property
    def first_unique_ancestor_securable_object(self) -> QueryableInstance:
        return QueryableInstance(self, "FirstUniqueAncestorSecurableObject")

    def get_user_effective_permissions(self, login_name: str):
        q = QueryableInstance(self, "getUserEffectivePermissions(@user)").with_query({"@user": f"'{login_name}'"})
        return then(q.get(), lambda data: unwrap_property(data, "GetUserEffectivePermissions"))

    def break_role_inheritance(self, copy_role_assignments: bool = False, clear_subscopes: bool = False):
        copy_value = str(copy_role_assignments).lower()
        clear_value = str(clear_subscopes).lower()
        q = QueryableSecurable(self, f"breakroleinheritance(copyroleassignments={copy_value}, clearsubscopes={clear_value})")
        return q.post()

    def reset_role_inheritance(self):
        return QueryableSecurable(self, "resetroleinheritance").post()
