from typing import Any, Dict, List, Optional

import httpx

from config import get_settings
from logger import logger


class ApiClientError(Exception):
    """Carries a message that is safe to show to the user as is."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if not isinstance(body, dict):
        return default
    message = body.get("message") or default
    supported = body.get("supportedCountries")
    if response.status_code == 400 and supported:
        return f"{message}. Supported countries: {', '.join(supported)}"
    return message


class TransferApiClient:
    """HTTP wrapper the form pages use to talk to the Transfer API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _request(self, method: str, path: str, default_message: str, **kwargs) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            ) as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response, default_message)
            logger.warning(
                "Transfer API вернул ошибку",
                extra={"path": path, "status_code": e.response.status_code, "error": message}
            )
            raise ApiClientError(message, e.response.status_code) from e
        except httpx.TransportError as e:
            logger.error("Transfer API недоступен", extra={"path": path, "error": str(e)})
            raise ApiClientError(default_message) from e

    async def get_rates(self) -> Dict[str, float]:
        response = await self._request("GET", "/api/rates", "Failed to fetch exchange rates")
        return response.json()["rates"]

    async def get_transfers(self) -> List[Dict[str, Any]]:
        response = await self._request("GET", "/api/transfers", "Failed to fetch transfers")
        return response.json()

    async def create_transfer(self, from_country: str, to_country: str, amount: float) -> Dict[str, Any]:
        if not from_country or not to_country:
            raise ApiClientError("Please select both countries")
        if amount is None or isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
            raise ApiClientError("Please enter a valid positive amount")

        payload = {"fromCountry": from_country, "toCountry": to_country, "amount": float(amount)}
        response = await self._request("POST", "/api/transfers", "Failed to create transfer", json=payload)
        return response.json()

    async def delete_transfer(self, transfer_id: str) -> None:
        await self._request("DELETE", f"/api/transfers/{transfer_id}", "Failed to delete transfer")


def get_api_client() -> TransferApiClient:
    settings = get_settings()
    return TransferApiClient(settings.transfer_api_url, timeout=settings.http_timeout_seconds)
