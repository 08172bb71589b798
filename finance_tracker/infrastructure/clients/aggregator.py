"""Bank aggregation proxy client with exponential backoff retry logic"""

import asyncio
import httpx
from typing import Any, Dict, List, Optional
from finance_tracker.config import settings
from finance_tracker.domain.exceptions import AggregatorError
from finance_tracker.domain.models import SyncItemResult
from finance_tracker.infrastructure.observability.metrics import (
    aggregator_failure_counter,
    aggregator_latency_histogram,
)


class AggregatorClient:
    """Client for the serverless functions fronting the bank aggregator"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
    ):
        self.base_url = (base_url or settings.aggregator_base_url).rstrip("/")
        self.timeout = timeout or settings.aggregator_timeout_seconds
        self.max_retries = max_retries or settings.aggregator_max_retries
        self.backoff_base = settings.aggregator_backoff_base if backoff_base is None else backoff_base

    async def _post(self, operation: str, authorization: Optional[str], payload: Dict[str, Any] | None = None) -> Dict[str, Any]:
        """
        POST to a proxy function and return its JSON body.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base ...
        - Retries on 5xx errors, timeouts and network failures
        - 4xx responses fail immediately (bad token, nothing linked)

        Raises:
            AggregatorError: after the final failed attempt or on a 4xx
        """
        headers = {"Content-Type": "application/json"}
        if authorization:
            headers["Authorization"] = authorization

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while True:
                try:
                    with aggregator_latency_histogram.time():
                        response = await client.post(
                            f"{self.base_url}/{operation}",
                            json=payload or {},
                            headers=headers,
                        )
                        response.raise_for_status()
                    return response.json()

                except httpx.HTTPStatusError as e:
                    aggregator_failure_counter.labels(operation=operation).inc()
                    status = e.response.status_code
                    attempt += 1
                    if status < 500 or attempt >= self.max_retries:
                        raise AggregatorError(f"Aggregator {operation} error: {status}") from e

                except httpx.TimeoutException as e:
                    aggregator_failure_counter.labels(operation=operation).inc()
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise AggregatorError(f"Aggregator {operation} timeout after {self.timeout}s") from e

                except httpx.RequestError as e:
                    aggregator_failure_counter.labels(operation=operation).inc()
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise AggregatorError(f"Aggregator {operation} unreachable: {e}") from e

                except ValueError as e:
                    aggregator_failure_counter.labels(operation=operation).inc()
                    raise AggregatorError(f"Invalid JSON from aggregator {operation}") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                await asyncio.sleep(backoff)

    async def create_link_token(self, authorization: Optional[str]) -> str:
        """Start a bank-linking session; returns the aggregator link token"""
        data = await self._post("create-link-token", authorization)
        try:
            return data["link_token"]
        except (KeyError, TypeError) as e:
            raise AggregatorError("Link token missing from aggregator response") from e

    async def exchange_public_token(self, public_token: str, authorization: Optional[str]) -> bool:
        """Trade the public token from the link flow for stored credentials"""
        data = await self._post("exchange-public-token", authorization, {"public_token": public_token})
        try:
            return bool(data.get("success", False))
        except AttributeError as e:
            raise AggregatorError("Invalid exchange response from aggregator") from e

    async def sync_accounts(self, authorization: Optional[str]) -> List[SyncItemResult]:
        """
        Ask the proxy to refresh balances and recent transactions.

        The proxy writes balances and new transactions to the store itself;
        callers re-read accounts afterwards.
        """
        data = await self._post("sync-accounts", authorization)
        try:
            return [
                SyncItemResult(
                    item_id=str(item["item_id"]),
                    success=bool(item["success"]),
                    accounts_updated=bool(item.get("accounts_updated", False)),
                    transactions_updated=bool(item.get("transactions_updated", False)),
                    new_transactions=int(item.get("new_transactions", 0)),
                    error=item.get("error"),
                )
                for item in data.get("results", [])
            ]
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise AggregatorError(f"Invalid sync data from aggregator: {e}") from e
