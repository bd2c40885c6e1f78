from taskboard.query import MAX_PAGE, MAX_PAGE_SIZE, ListQuery, build_list_query, page_summary, parse_sort, sanitize


def test_sanitize_strips_operator_and_path_keys_recursively():
    dirty = {
        "status": "done",
        "$where": "sleep(1000)",
        "assignedTo": {"$ne": None, "id": "abc"},
        "profile.role": "admin",
        "tags": [{"$gt": ""}, {"name": "ok", "a.b": 1}, "plain"],
    }

    assert sanitize(dirty) == {
        "status": "done",
        "assignedTo": {"id": "abc"},
        "tags": [{}, {"name": "ok"}, "plain"],
    }
    # Исходный объект не меняется
    assert "$where" in dirty


def test_parse_sort():
    assert parse_sort("priority,-createdAt") == [("priority", False), ("createdAt", True)]
    assert parse_sort(None) == [("createdAt", True)]
    assert parse_sort(" , -") == [("createdAt", True)]


def test_build_list_query_defaults():
    query = build_list_query({})

    assert query.filters == {}
    assert query.sort == [("createdAt", True)]
    assert query.page == 1
    assert query.limit == 10
    assert query.skip == 0


def test_build_list_query_excludes_reserved_params():
    query = build_list_query(
        {"status": "done", "priority": "high", "page": "3", "limit": "5", "sort": "title", "fields": "title"}
    )

    assert query.filters == {"status": "done", "priority": "high"}
    assert query.sort == [("title", False)]
    assert query.page == 3
    assert query.limit == 5
    assert query.skip == 10


def test_build_list_query_drops_unsafe_and_nested_filters():
    query = build_list_query({"$where": "1", "status": {"$ne": "done"}, "team.name": "x", "priority": "low"})

    assert query.filters == {"priority": "low"}


def test_invalid_pagination_falls_back_to_defaults():
    query = build_list_query({"page": "abc", "limit": "0"}, default_limit=20)
    assert (query.page, query.limit) == (1, 20)

    query = build_list_query({"page": "-2", "limit": "-5"})
    assert (query.page, query.limit) == (1, 10)


def test_oversized_pagination_is_clamped():
    query = build_list_query({"page": "1" + "0" * 20, "limit": "1" + "0" * 20})

    assert query.limit == MAX_PAGE_SIZE
    assert query.page == MAX_PAGE
    # OFFSET остается в пределах 64-битного целого
    assert query.skip < 2 ** 63

    assert build_list_query({"limit": "500"}, max_limit=50).limit == 50


def test_page_summary_rounds_total_pages_up():
    query = ListQuery(page=2, limit=5)

    assert page_summary(query, 5, 12, total_key="totalTasks") == {
        "count": 5,
        "page": 2,
        "totalPages": 3,
        "totalTasks": 12,
    }
    assert page_summary(query, 0, 0)["totalPages"] == 0
