import pytest

from sp_lists.utils import combine_paths, extend


@pytest.mark.parametrize("paths, expected", [
    (("https://x/_api/", "/web"), "https://x/_api/web"),
    (("https://x/_api", None), "https://x/_api"),
    (("https://x/_api", ""), "https://x/_api"),
    (("a/", "/b/", "c"), "a/b/c"),
])
def test_combine_paths(paths, expected):
    assert combine_paths(*paths) == expected


def test_extend_source_wins():
    target = {"a": 1, "b": 2}
    result = extend(target, {"b": 3, "c": 4})
    assert result == {"a": 1, "b": 3, "c": 4}
    assert target == {"a": 1, "b": 2}


def test_extend_with_none():
    assert extend({"a": 1}, None) == {"a": 1}
