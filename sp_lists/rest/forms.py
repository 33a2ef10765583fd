from .queryable import QueryableCollection, QueryableInstance


class Forms(QueryableCollection):

    def __init__(self, base_url, path: str = "forms", **kwargs):
        super().__init__(base_url, path, **kwargs)

    def get_by_id(self, form_id: str) -> "Form":
        return Form(self).concat(f"('{form_id}')")


class Form(QueryableInstance):
    ...
