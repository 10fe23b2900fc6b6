import pytest

from assetcat.domain.models.query import (
    EMPTY,
    AssetQuery,
    FolderQuery,
    SortOrder,
    build_asset_sql,
    build_folder_sql,
    escape_param,
    parse_param,
    split_param,
)


def test_split_param_on_unescaped_commas():
    assert split_param("a, b,c") == ["a", "b", "c"]
    assert split_param(r"one\, two,three") == ["one, two", "three"]


def test_escape_then_split_keeps_value_whole():
    value = "Summer, 2020/"
    assert split_param(escape_param(value), strip=False) == [value]


def test_parse_param_empty_sentinel():
    params = []
    assert parse_param("parent_id", EMPTY, params) == "parent_id IS NULL"
    assert params == []


def test_parse_param_single_and_multiple():
    params = []
    assert parse_param("id", 4, params) == "id = ?"
    assert parse_param("id", [1, 2, 3], params) == "id IN (?, ?, ?)"
    assert params == [4, 1, 2, 3]


def test_parse_param_empty_collection_matches_nothing():
    params = []
    assert parse_param("id", [], params) == "0 = 1"


def test_literal_path_with_comma_is_not_split():
    sql, params = build_folder_sql(FolderQuery(path="Trips, 2020/"))
    assert "path = ?" in sql
    assert params == ["Trips, 2020/"]


def test_literal_path_set():
    sql, params = build_folder_sql(FolderQuery(path=["a,b/", "c/"]))
    assert "path IN (?, ?)" in sql
    assert params == ["a,b/", "c/"]


def test_literal_path_keeps_surrounding_spaces():
    _, params = build_folder_sql(FolderQuery(path=" padded /"))
    assert params == [" padded /"]


def test_folder_query_combines_conditions():
    query = FolderQuery(volume_id=[1, 2], parent_id=EMPTY, name="photos").ordered_by_path()
    sql, params = build_folder_sql(query)
    assert sql == (
        "SELECT id, parent_id, volume_id, name, path FROM folders"
        " WHERE volume_id IN (?, ?) AND parent_id IS NULL AND name = ?"
        " ORDER BY path ASC"
    )
    assert params == [1, 2, "photos"]


def test_folder_query_limit_and_offset():
    sql, params = build_folder_sql(FolderQuery(offset=10))
    assert sql.endswith("LIMIT ? OFFSET ?")
    assert params == [-1, 10]


def test_folder_query_rejects_unknown_order_column():
    with pytest.raises(ValueError):
        build_folder_sql(FolderQuery(order_by="path; DROP TABLE folders"))


def test_folder_count_ignores_ordering():
    sql, _ = build_folder_sql(FolderQuery(volume_id=1, order_by="name", limit=5), count_only=True)
    assert sql == "SELECT COUNT(*) FROM folders WHERE volume_id = ?"


def test_asset_query_filename_is_literal():
    sql, params = build_asset_sql(AssetQuery(folder_id=3, filename="a,b.jpg"))
    assert "filename = ?" in sql
    assert params == [3, "a,b.jpg"]


def test_asset_query_rejects_unknown_order_column():
    with pytest.raises(ValueError):
        build_asset_sql(AssetQuery(order_by="nope"))


def test_asset_query_without_order_sorts_by_filename():
    sql, _ = build_asset_sql(AssetQuery(order_by=None, order=SortOrder.DESC))
    assert sql.endswith("ORDER BY filename DESC")


def test_asset_query_paginate():
    query = AssetQuery().only_images().paginate(page=3, page_size=20)
    sql, params = build_asset_sql(query)
    assert params == ["image", 20, 40]
