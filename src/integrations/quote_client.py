import json
import logging
from typing import Any, Dict, Optional
import httpx
from config.settings import settings
from src.data.errors import AcquisitionFailure


logger = logging.getLogger(__name__)


def parse_chart_payload(data: Any, ticker: str) -> float:
    """Extract the current price from a chart API payload.

    Accepts the raw chart response or a proxy envelope whose ``contents``
    field holds the chart response as a JSON string. Uses the regular market
    price, falling back to the previous close.
    """
    if isinstance(data, dict) and "contents" in data:
        contents = data["contents"]
        if not contents:
            raise AcquisitionFailure("No data in proxy response")
        try:
            data = json.loads(contents) if isinstance(contents, str) else contents
        except ValueError as e:
            raise AcquisitionFailure(f"Malformed proxy contents for {ticker}: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("chart"), dict):
        raise AcquisitionFailure(f"Invalid response format for {ticker}")

    chart = data["chart"]
    if chart.get("error"):
        error = chart["error"]
        description = error.get("description") if isinstance(error, dict) else str(error)
        raise AcquisitionFailure(description or "Invalid ticker symbol")

    results = chart.get("result")
    if not results or not isinstance(results[0], dict):
        raise AcquisitionFailure(f"Invalid response format for {ticker}")

    meta = results[0].get("meta") or {}
    raw_price = meta.get("regularMarketPrice") or meta.get("previousClose")
    try:
        price = float(raw_price)
    except (TypeError, ValueError):
        raise AcquisitionFailure(f"No price in response for {ticker}")

    if not price > 0:
        raise AcquisitionFailure(f"Non-positive price {price} for {ticker}")
    return price


class QuoteClient:
    """Async client for the chart quote endpoint."""

    def __init__(self, base_url: str = None, proxy_url: str = None,
                 transport: httpx.AsyncBaseTransport = None):
        self.base_url = base_url or settings.quote_base_url
        self.proxy_url = proxy_url if proxy_url is not None else settings.quote_proxy_url
        self.transport = transport

        self.headers = {
            "Accept": "application/json"
        }

    def _build_request(self, ticker: str) -> tuple:
        chart_url = f"{self.base_url.rstrip('/')}/{ticker}"
        if self.proxy_url:
            return self.proxy_url, {"url": chart_url}
        return chart_url, None

    async def _make_request(self, url: str, params: Dict = None, timeout: float = None) -> Dict[Any, Any]:
        """Make a single GET request and decode the JSON body."""
        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.get(
                    url,
                    headers=self.headers,
                    params=params,
                    timeout=timeout
                )
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                logger.warning(f"Quote request timed out after {timeout}s: {url}")
                raise AcquisitionFailure(f"timeout: {e}") from e
            except httpx.HTTPStatusError as e:
                logger.warning(f"HTTP error {e.response.status_code} from quote endpoint")
                raise AcquisitionFailure(f"HTTP {e.response.status_code}") from e
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"Quote request failed: {str(e)}")
                raise AcquisitionFailure(str(e)) from e

    async def fetch_price(self, ticker: str, timeout: Optional[float] = None) -> float:
        """Fetch the current price for ``ticker``.

        Raises:
            AcquisitionFailure: on timeout, transport error, non-2xx status,
                malformed payload, or a non-positive price.
        """
        timeout = timeout if timeout is not None else settings.search_timeout_seconds
        url, params = self._build_request(ticker)
        data = await self._make_request(url, params=params, timeout=timeout)
        return parse_chart_payload(data, ticker)
