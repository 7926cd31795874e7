import json

import pytest

from fakes import FakeProvider, ForbiddenProvider, UnreachableStore, build_test_container, make_quote
from quote_gateway.api.events import handle_event, parse_event
from quote_gateway.cache.stores import InMemoryStore
from quote_gateway.errors import MalformedTriggerError
from quote_gateway.schemas.trigger import DefaultTrigger, DelimitedListTrigger, ExplicitListTrigger, PathSymbolTrigger


def invoke(event, container):
    response = handle_event(event, container=container)
    return response["statusCode"], json.loads(response["body"]), response["headers"]


@pytest.mark.parametrize(
    "event, expected",
    [
        ({"pathParameters": {"symbol": "aapl"}, "queryStringParameters": {"symbols": "MSFT"}}, PathSymbolTrigger(symbol="aapl")),
        ({"pathParameters": None, "queryStringParameters": {"symbols": "AAPL,MSFT"}}, DelimitedListTrigger(symbols="AAPL,MSFT")),
        ({"symbols": ["AAPL"]}, ExplicitListTrigger(symbols=["AAPL"])),
        ({"pathParameters": {}, "queryStringParameters": None}, DefaultTrigger()),
        ({}, DefaultTrigger()),
        (None, DefaultTrigger()),
    ],
)
def test_parse_event_shapes(event, expected):
    assert parse_event(event) == expected


def test_parse_event_rejects_malformed_list():
    with pytest.raises(MalformedTriggerError):
        parse_event({"symbols": "AAPL"})


def test_symbols_query_scenario():
    provider = FakeProvider(quotes={"AAPL": make_quote("AAPL"), "MSFT": make_quote("MSFT")})
    status, body, headers = invoke({"queryStringParameters": {"symbols": "AAPL,MSFT"}}, build_test_container(provider))
    assert status == 200
    assert len(body["quotes"]) == 2
    assert body["cached"] == 0
    assert body["fresh"] == 2
    assert headers["Access-Control-Allow-Origin"] == "*"


def test_path_symbol_not_found_scenario():
    status, body, _ = invoke({"pathParameters": {"symbol": "ZZZZ"}}, build_test_container(FakeProvider()))
    assert status == 400
    assert body["success"] is False
    assert body["error"] == "Stock symbol 'ZZZZ' not found."


def test_multi_not_found_is_empty_success():
    status, body, _ = invoke({"symbols": ["ZZZZ"]}, build_test_container(FakeProvider()))
    assert status == 200
    assert body["quotes"] == []
    assert body["cached"] == 0
    assert body["fresh"] == 0


def test_no_symbol_info_uses_default_list():
    provider = FakeProvider()
    invoke({}, build_test_container(provider))
    assert sorted(provider.calls) == sorted(["AAPL", "MSFT", "AMZN", "NVDA", "TSLA", "META"])


def test_cached_quote_is_served_without_provider():
    store = InMemoryStore()
    warm = build_test_container(FakeProvider(quotes={"AAPL": make_quote("AAPL")}), store=store)
    invoke({"pathParameters": {"symbol": "AAPL"}}, warm)

    cold = build_test_container(ForbiddenProvider(), store=store)
    status, body, _ = invoke({"pathParameters": {"symbol": "AAPL"}}, cold)
    assert status == 200
    assert body["cached"] is True
    assert body["quote"] == make_quote("AAPL").model_dump(by_alias=True)


def test_unreachable_cache_scenario():
    provider = FakeProvider(quotes={"AAPL": make_quote("AAPL"), "TSLA": make_quote("TSLA")})
    container = build_test_container(provider, store=UnreachableStore())
    for _ in range(3):
        status, body, _ = invoke({"symbols": ["AAPL", "TSLA"]}, container)
        assert status == 200
        assert body["cached"] == 0
        assert body["fresh"] == 2
    assert len(provider.calls) == 6


def test_empty_explicit_list_is_error():
    status, body, headers = invoke({"symbols": []}, build_test_container(FakeProvider()))
    assert status == 400
    assert body["error"] == "No symbols provided."
    assert headers["Content-Type"] == "application/json"


def test_malformed_event_is_error():
    status, body, _ = invoke({"symbols": [1, 2]}, build_test_container(FakeProvider()))
    assert status == 400
    assert body["success"] is False
