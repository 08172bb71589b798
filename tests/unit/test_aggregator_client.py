"""Unit tests for the bank aggregation proxy client"""

import httpx
import pytest
from unittest.mock import AsyncMock, patch
from finance_tracker.domain.exceptions import AggregatorError
from finance_tracker.infrastructure.clients.aggregator import AggregatorClient

BASE_URL = "http://proxy.test/functions/v1"


def json_response(status_code: int, payload: dict, operation: str = "sync-accounts") -> httpx.Response:
    request = httpx.Request("POST", f"{BASE_URL}/{operation}")
    return httpx.Response(status_code, json=payload, request=request)


@pytest.fixture
def aggregator() -> AggregatorClient:
    return AggregatorClient(base_url=BASE_URL, timeout=1.0, max_retries=3, backoff_base=0.5)


@pytest.fixture
def no_sleep():
    with patch("finance_tracker.infrastructure.clients.aggregator.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_create_link_token_forwards_authorization(mock_post: AsyncMock, aggregator: AggregatorClient):
    mock_post.return_value = json_response(200, {"link_token": "link-sandbox-123"}, "create-link-token")

    token = await aggregator.create_link_token("Bearer abc")

    assert token == "link-sandbox-123"
    url = mock_post.call_args.args[0]
    assert url == f"{BASE_URL}/create-link-token"
    assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer abc"


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_exchange_public_token_sends_token(mock_post: AsyncMock, aggregator: AggregatorClient):
    mock_post.return_value = json_response(200, {"success": True}, "exchange-public-token")

    assert await aggregator.exchange_public_token("public-xyz", None) is True
    assert mock_post.call_args.kwargs["json"] == {"public_token": "public-xyz"}
    assert "Authorization" not in mock_post.call_args.kwargs["headers"]


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_sync_accounts_parses_item_results(mock_post: AsyncMock, aggregator: AggregatorClient):
    mock_post.return_value = json_response(
        200,
        {
            "success": True,
            "results": [
                {
                    "item_id": "item_1",
                    "success": True,
                    "accounts_updated": True,
                    "transactions_updated": True,
                    "new_transactions": 4,
                },
                {"item_id": "item_2", "success": False, "error": "ITEM_LOGIN_REQUIRED"},
            ],
        },
    )

    results = await aggregator.sync_accounts("Bearer abc")

    assert [r.item_id for r in results] == ["item_1", "item_2"]
    assert results[0].new_transactions == 4
    assert results[1].success is False
    assert results[1].error == "ITEM_LOGIN_REQUIRED"
    assert results[1].accounts_updated is False


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_retries_server_errors_with_backoff(mock_post: AsyncMock, aggregator: AggregatorClient, no_sleep):
    mock_post.side_effect = [
        json_response(503, {"error": "unavailable"}),
        json_response(200, {"success": True, "results": []}),
    ]

    results = await aggregator.sync_accounts("Bearer abc")

    assert results == []
    assert mock_post.call_count == 2
    no_sleep.assert_awaited_once_with(0.5)


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_client_errors_fail_immediately(mock_post: AsyncMock, aggregator: AggregatorClient, no_sleep):
    mock_post.return_value = json_response(401, {"error": "unauthorized"})

    with pytest.raises(AggregatorError, match="401"):
        await aggregator.sync_accounts("Bearer expired")

    assert mock_post.call_count == 1
    no_sleep.assert_not_awaited()


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_timeouts_exhaust_retries(mock_post: AsyncMock, aggregator: AggregatorClient, no_sleep):
    mock_post.side_effect = httpx.ReadTimeout("timed out")

    with pytest.raises(AggregatorError, match="timeout"):
        await aggregator.sync_accounts("Bearer abc")

    assert mock_post.call_count == 3
    assert [c.args[0] for c in no_sleep.await_args_list] == [0.5, 1.0]


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_network_errors_raise_after_retries(mock_post: AsyncMock, aggregator: AggregatorClient, no_sleep):
    mock_post.side_effect = httpx.ConnectError("connection refused")

    with pytest.raises(AggregatorError, match="unreachable"):
        await aggregator.create_link_token("Bearer abc")

    assert mock_post.call_count == 3


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_missing_link_token_is_an_error(mock_post: AsyncMock, aggregator: AggregatorClient):
    mock_post.return_value = json_response(200, {"expiration": "soon"}, "create-link-token")

    with pytest.raises(AggregatorError, match="Link token missing"):
        await aggregator.create_link_token("Bearer abc")


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_malformed_sync_payload_is_an_error(mock_post: AsyncMock, aggregator: AggregatorClient):
    mock_post.return_value = json_response(200, {"results": [{"success": True}]})

    with pytest.raises(AggregatorError, match="Invalid sync data"):
        await aggregator.sync_accounts("Bearer abc")


@patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock)
async def test_non_object_exchange_payload_is_an_error(mock_post: AsyncMock, aggregator: AggregatorClient):
    request = httpx.Request("POST", f"{BASE_URL}/exchange-public-token")
    mock_post.return_value = httpx.Response(200, json=["unexpected"], request=request)

    with pytest.raises(AggregatorError, match="Invalid exchange response"):
        await aggregator.exchange_public_token("public-xyz", "Bearer abc")
