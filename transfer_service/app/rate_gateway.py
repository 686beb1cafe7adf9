from typing import Any, Dict, Optional

import httpx

from config import get_settings
from currencies import PIVOT_CURRENCY, SUPPORTED_CURRENCIES
from errors import UpstreamError, UpstreamMalformed, UpstreamUnreachable
from logger import logger


class RateGateway:
    """Client for the exchangerate-api.com v6 endpoints.

    Every call goes to the network: no retry, no caching.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://v6.exchangerate-api.com/v6",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def fetch_all_rates(self, base: str = PIVOT_CURRENCY) -> Dict[str, float]:
        data = await self._get(f"latest/{base}")
        rates = data.get("conversion_rates")
        if not isinstance(rates, dict):
            raise UpstreamMalformed("Invalid response from exchange rate API")
        missing = [currency for currency in SUPPORTED_CURRENCIES if currency not in rates]
        if missing:
            raise UpstreamMalformed(f"Exchange rate API response lacks rates for {', '.join(missing)}")
        return {currency: rates[currency] for currency in SUPPORTED_CURRENCIES}

    async def fetch_pair_rate(self, from_currency: str, to_currency: str) -> float:
        data = await self._get(f"pair/{from_currency}/{to_currency}")
        rate = data.get("conversion_rate")
        if isinstance(rate, bool) or not isinstance(rate, (int, float)) or rate <= 0:
            raise UpstreamMalformed("Invalid response from exchange rate API")
        return float(rate)

    async def _get(self, path: str) -> Dict[str, Any]:
        url = f"{self._base_url}/{self._api_key}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Провайдер курсов вернул ошибку",
                extra={"path": path, "status_code": e.response.status_code}
            )
            raise UpstreamError(e.response.status_code, _response_body(e.response)) from e
        except httpx.TransportError as e:
            logger.error("Провайдер курсов недоступен", extra={"path": path, "error": str(e)})
            raise UpstreamUnreachable("Exchange rate API not responding") from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamMalformed("Exchange rate API returned invalid JSON") from e
        if not isinstance(data, dict):
            raise UpstreamMalformed("Invalid response from exchange rate API")
        return data


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def get_rate_gateway() -> RateGateway:
    settings = get_settings()
    return RateGateway(
        api_key=settings.exchange_rate_api_key,
        base_url=settings.exchange_rate_api_url,
        timeout=settings.http_timeout_seconds,
    )
