from datetime import datetime, timezone

import pytest

from entity_docstore.storages.filtering import matches, project, replace, run_query


DOCUMENT = {"_id": 1, "name": "lamp", "price": 20, "tags": ["home"], "discontinued": None}


@pytest.mark.parametrize(
    "criteria, expected",
    [
        (None, True),
        ({}, True),
        ({"name": "lamp"}, True),
        ({"name": "desk"}, False),
        ({"missing": None}, False),
        ({"discontinued": None}, True),
        ({"price": {"$gt": 10, "$lte": 20}}, True),
        ({"price": {"$lt": 20}}, False),
        ({"price": {"$ne": 20}}, False),
        ({"missing": {"$ne": 1}}, True),
        ({"name": {"$in": ["lamp", "desk"]}}, True),
        ({"name": {"$nin": ["lamp"]}}, False),
        ({"missing": {"$exists": False}}, True),
        ({"name": {"$exists": True}}, True),
        ({"name": {"$gt": 3}}, False),
        ({"tags": ["home"]}, True),
    ],
)
def test_matches(criteria, expected):
    assert matches(DOCUMENT, criteria) is expected


def test_unknown_operator_is_rejected():
    with pytest.raises(ValueError):
        matches(DOCUMENT, {"name": {"$regex": "l.*"}})


def test_projection_always_keeps_id():
    assert project(DOCUMENT, ["name"]) == {"_id": 1, "name": "lamp"}


def test_replace_keeps_identity_and_equality_criteria():
    assert replace(DOCUMENT, {"name": "lamp", "price": {"$gt": 1}}, {"price": 25}) == {
        "_id": 1,
        "name": "lamp",
        "price": 25,
    }


def test_sort_places_missing_values_first_and_is_stable():
    documents = [{"_id": 1, "rank": 2}, {"_id": 2}, {"_id": 3, "rank": 1}, {"_id": 4, "rank": 2}]

    ascending = run_query(documents, sort=[("rank", 1)])
    descending = run_query(documents, sort=[("rank", -1)])

    assert [document["_id"] for document in ascending] == [2, 3, 1, 4]
    assert [document["_id"] for document in descending] == [1, 4, 3, 2]


def test_skip_and_limit():
    documents = [{"_id": index} for index in range(5)]

    assert run_query(documents, skip=1, limit=2) == [{"_id": 1}, {"_id": 2}]
    assert run_query(documents, skip=4) == [{"_id": 4}]


def test_sort_orders_mixed_types_by_type_first():
    documents = [
        {"_id": 1, "age": "three"},
        {"_id": 2, "age": 3},
        {"_id": 3},
        {"_id": 4, "age": datetime(2024, 1, 1, tzinfo=timezone.utc)},
        {"_id": 5, "age": datetime(2024, 1, 1)},
        {"_id": 6, "age": {"years": 3}},
        {"_id": 7, "age": 2.5},
    ]

    ascending = run_query(documents, sort=[("age", 1)])
    descending = run_query(documents, sort=[("age", -1)])

    assert [document["_id"] for document in ascending] == [3, 7, 2, 1, 6, 5, 4]
    assert [document["_id"] for document in descending] == [4, 5, 6, 1, 2, 7, 3]
