from clients.pharmadist_sdk.normalizers import EnvelopeKind, normalize_listing, promote_id


def test_result_docs_envelope() -> None:
    page = normalize_listing({"result": {"docs": [1, 2], "totalDocs": 2, "totalPages": 1}})

    assert page.rows == [1, 2]
    assert page.total_items == 2
    assert page.total_pages == 1
    assert page.envelope is EnvelopeKind.RESULT_DOCS


def test_docs_envelope() -> None:
    page = normalize_listing({"docs": [{"_id": "a"}], "totalDocs": 31, "totalPages": 4, "page": 2})

    assert page.rows == [{"_id": "a"}]
    assert page.total_items == 31
    assert page.total_pages == 4
    assert page.envelope is EnvelopeKind.DOCS


def test_bare_list_is_one_full_page() -> None:
    page = normalize_listing([1, 2, 3])

    assert page.rows == [1, 2, 3]
    assert page.total_items == 3
    assert page.total_pages == 1
    assert page.envelope is EnvelopeKind.BARE_LIST


def test_unrecognized_payloads_fail_soft() -> None:
    for payload in ({}, None, "oops", 42, {"result": "nope"}, {"docs": "not-a-list"}, {"success": True}):
        page = normalize_listing(payload)

        assert page.rows == []
        assert page.total_items == 0
        assert page.total_pages == 0
        assert page.envelope is EnvelopeKind.UNRECOGNIZED


def test_result_without_docs_falls_back_to_top_level_docs() -> None:
    page = normalize_listing({"result": {"message": "ok"}, "docs": ["x"], "totalDocs": 1, "totalPages": 1})

    assert page.envelope is EnvelopeKind.DOCS
    assert page.rows == ["x"]


def test_missing_or_garbage_totals_default_to_zero_but_cover_rows() -> None:
    page = normalize_listing({"docs": [1, 2], "totalDocs": "n/a"})

    assert page.total_items == 2
    assert page.total_pages == 0


def test_numeric_strings_in_totals_are_accepted() -> None:
    page = normalize_listing({"result": {"docs": [], "totalDocs": "40", "totalPages": "4"}})

    assert page.total_items == 40
    assert page.total_pages == 4


def test_transform_runs_after_extraction() -> None:
    seen: list[list] = []

    def transform(rows: list) -> list:
        seen.append(rows)
        return [row * 10 for row in rows]

    page = normalize_listing({"result": {"docs": [1, 2], "totalDocs": 12, "totalPages": 6}}, transform=transform)

    assert seen == [[1, 2]]
    assert page.rows == [10, 20]
    assert page.total_items == 12


def test_promote_id_copies_nested_mongo_id() -> None:
    rows = promote_id([{"_id": "m-1", "name": "a"}, {"id": "keep", "_id": "m-2"}, "raw"])

    assert rows[0]["id"] == "m-1"
    assert rows[1]["id"] == "keep"
    assert rows[2] == "raw"


def test_non_finite_totals_fail_soft() -> None:
    page = normalize_listing({"docs": [], "totalDocs": float("inf"), "totalPages": float("nan")})

    assert page.envelope is EnvelopeKind.DOCS
    assert page.total_items == 0
    assert page.total_pages == 0
