# tests/test_params.py
import pytest

from api_client.params import serialize_params, with_query


@pytest.mark.parametrize(
    "params,expected",
    [
        (None, ""),
        ({}, ""),
        ({"page": 2, "q": "yoga class"}, "page=2&q=yoga%20class"),
        ({"ids": [1, 2]}, "ids=%5B1%2C2%5D"),
        ({"tags": []}, "tags=[]"),
        ({"active": True, "archived": False}, "active=true&archived=false"),
        ({"a": None, "b": "x"}, "b=x"),
    ],
)
def test_serialize_params(params, expected):
    assert serialize_params(params) == expected


def test_with_query_appends_to_existing_query():
    assert with_query("/venues", {"page": 1}) == "/venues?page=1"
    assert with_query("/venues?sort=name", {"page": 1}) == "/venues?sort=name&page=1"
    assert with_query("/venues", {"skip": None}) == "/venues"
