import pytest

from flatstore.filedata import FileData


@pytest.fixture
def data():
    return FileData({"a": 1, "b": {"c": 2, "d": {"e": 3}}})


# --- lookup ---

def test_contains_key_follows_dots(data):
    assert data.contains_key("a")
    assert data.contains_key("b.d.e")
    assert data.contains_key("b.d")
    assert not data.contains_key("b.x")
    assert not data.contains_key("a.b")  # "a" is a leaf


def test_get_returns_default_for_missing(data):
    assert data.get("b.c") == 2
    assert data.get("nope", "fallback") == "fallback"
    assert data.get("b.c.deeper") is None


def test_in_operator(data):
    assert "b.c" in data
    assert 42 not in data


def test_none_value_still_counts_as_present():
    data = FileData({"a": None})
    assert data.contains_key("a")
    assert data.get("a", "default") is None


# --- key sets ---

def test_single_layer_key_set(data):
    assert data.single_layer_key_set() == {"a", "b"}
    assert data.single_layer_key_set("b") == {"c", "d"}
    assert data.single_layer_key_set("a") == set()
    assert data.single_layer_key_set("missing") == set()


def test_key_set_is_recursive_and_dotted(data):
    assert data.key_set() == {"a", "b.c", "b.d.e"}
    assert data.key_set("b") == {"c", "d.e"}
    assert data.key_set("missing") == set()


def test_empty_mapping_is_reported_as_leaf():
    data = FileData({"a": {}, "b": {"c": 1}})
    assert data.key_set() == {"a", "b.c"}


def test_size(data):
    assert data.size() == 3
    assert data.size("b") == 2
    assert len(data) == 2


# --- mutation ---

def test_insert_creates_intermediate_sections():
    data = FileData()
    data.insert("server.http.port", 8080)
    assert data.to_dict() == {"server": {"http": {"port": 8080}}}


def test_insert_replaces_leaf_with_section():
    data = FileData({"a": 1})
    data.insert("a.b", 2)
    assert data.to_dict() == {"a": {"b": 2}}


def test_insert_copies_mappings():
    value = {"x": {"y": 1}}
    data = FileData()
    data.insert("k", value)
    value["x"]["y"] = 99
    assert data.get("k.x.y") == 1
    assert data.key_set() == {"k.x.y"}


def test_remove_prunes_empty_parents():
    data = FileData({"a": {"b": {"c": 1}}, "x": 1})
    data.remove("a.b.c")
    assert data.to_dict() == {"x": 1}


def test_remove_keeps_non_empty_parents(data):
    data.remove("b.d.e")
    assert data.to_dict() == {"a": 1, "b": {"c": 2}}


def test_remove_missing_is_noop(data):
    before = data.to_dict()
    data.remove("b.zzz")
    data.remove("a.deeper")
    assert data.to_dict() == before


def test_clear(data):
    data.clear()
    assert data.key_set() == set()


# --- conversion / equality ---

def test_to_dict_is_a_copy(data):
    snapshot = data.to_dict()
    snapshot["b"]["c"] = 100
    assert data.get("b.c") == 2


def test_keys_are_stringified():
    data = FileData.from_dict({1: {"two": 2}})
    assert data.key_set() == {"1.two"}


def test_equality_is_structural(data):
    assert data == FileData({"a": 1, "b": {"c": 2, "d": {"e": 3}}})
    assert data != FileData({"a": 1})
    assert data != {"a": 1}


def test_unhashable(data):
    with pytest.raises(TypeError):
        hash(data)
