from datetime import date
from urllib.parse import parse_qsl

from clients.pharmadist_sdk.query_params import QueryState, build_query_params, build_query_string


def test_defaults_encode_first_page_one_based() -> None:
    assert build_query_string(QueryState()) == "pageNumber=1&pageSize=10"


def test_keyword_only_when_search_is_non_empty() -> None:
    with_search = QueryState.create(page_index=2, page_size=25, search_term="panadol")
    without_search = QueryState.create(page_index=2, page_size=25, search_term="")

    assert build_query_params(with_search) == [("pageNumber", "3"), ("pageSize", "25"), ("keyword", "panadol")]
    assert "keyword" not in dict(build_query_params(without_search))


def test_empty_filter_and_extra_values_are_omitted() -> None:
    state = QueryState.create(
        filter_values={"status": "", "brandId": None, "groupId": "g-1"},
        extra_params={"vendorId": "", "from": None, "customerId": "c-9"},
    )

    params = dict(build_query_params(state))

    assert params == {"pageNumber": "1", "pageSize": "10", "groupId": "g-1", "customerId": "c-9"}


def test_equal_states_build_identical_strings() -> None:
    first = QueryState.create(search_term="a b", filter_values={"status": "Active", "brandId": "b-1"})
    second = QueryState.create(search_term="a b", filter_values={"status": "Active", "brandId": "b-1"})

    assert first == second
    assert hash(first) == hash(second)
    assert build_query_string(first) == build_query_string(second)
    assert build_query_string(first) == "pageNumber=1&pageSize=10&keyword=a+b&status=Active&brandId=b-1"


def test_values_are_encoded_for_the_wire() -> None:
    state = QueryState.create(
        filter_values={"expenseDate": date(2024, 3, 1)},
        extra_params={"includeInactive": False, "limit": 0},
    )

    pairs = parse_qsl(build_query_string(state))

    assert ("expenseDate", "2024-03-01") in pairs
    assert ("includeInactive", "false") in pairs
    assert ("limit", "0") in pairs


def test_with_filter_keeps_insertion_position() -> None:
    state = QueryState.create(filter_values={"status": "Active", "brandId": "b-1"})

    updated = state.with_filter("status", "Inactive")

    assert list(updated.filters) == ["status", "brandId"]
    assert updated.filters["status"] == "Inactive"
