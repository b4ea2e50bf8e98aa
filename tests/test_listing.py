from urllib.parse import parse_qs

from workshop_web.listing import ListQuery, PageView


def test_defaults_ask_for_first_page_of_ten():
    query = ListQuery()
    assert query.to_params() == {"page": 1, "limit": 10}


def test_empty_search_and_filters_are_omitted():
    query = ListQuery.from_request(page=2, search="  ", status="", role=None)
    assert query.to_params() == {"page": 2, "limit": 10}


def test_filters_use_bracket_keys():
    query = ListQuery.from_request(search="civic", status="pending")
    assert query.to_params() == {
        "page": 1,
        "limit": 10,
        "search": "civic",
        "filters[status]": "pending",
    }


def test_from_request_clamps_page():
    assert ListQuery.from_request(page=0).page == 1
    assert ListQuery.from_request(page=-3).page == 1
    assert ListQuery.from_request(page=None).page == 1


def test_with_page_keeps_search_and_filters():
    query = ListQuery(search="civic", filters={"status": "pending"}).with_page(3)
    assert query.page == 3
    assert query.search == "civic"
    assert query.filter_value("status") == "pending"


def test_queries_are_immutable_values():
    query = ListQuery(page=2)
    query.with_page(7)
    assert query.page == 2


def test_url_params_round_trip_through_from_request():
    query = ListQuery.from_request(page=3, search="civic", status="pending")
    assert query.url_params() == {"page": 3, "search": "civic", "status": "pending"}
    assert ListQuery.from_request(**query.url_params()) == query


def test_url_for_page_keeps_search_and_filters():
    query = ListQuery(search="b 12", filters={"role": "mechanic"})
    url = query.url_for_page(2)
    assert url.startswith("?")
    assert parse_qs(url[1:]) == {"page": ["2"], "search": ["b 12"], "role": ["mechanic"]}


def test_page_view_navigation():
    first = PageView(items=[], query=ListQuery(page=1), total_pages=3)
    assert not first.has_prev
    assert first.has_next
    assert list(first.page_numbers) == [1, 2, 3]

    last = PageView(items=[], query=ListQuery(page=3), total_pages=3)
    assert last.has_prev
    assert not last.has_next
