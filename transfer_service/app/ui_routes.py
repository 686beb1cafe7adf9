from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette import status

from api_client import ApiClientError, TransferApiClient, get_api_client
from converter import (DEFAULT_AMOUNT, DEFAULT_FROM_CURRENCY, DEFAULT_TO_CURRENCY,
                       SUCCESS_DISPLAY_SECONDS, ConverterForm, FormError, can_submit,
                       build_transfer_request, format_preview)
from currencies import CURRENCY_NAMES, CURRENCY_SYMBOLS, SUPPORTED_CURRENCIES
from logger import logger

router = APIRouter(tags=["UI"])

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def format_transfer_date(value: str) -> str:
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return str(value)
    return moment.strftime("%b %d, %Y, %I:%M %p")


def history_row(transfer: Dict[str, Any]) -> Dict[str, str]:
    from_symbol = CURRENCY_SYMBOLS.get(transfer["fromCurrency"], "")
    to_symbol = CURRENCY_SYMBOLS.get(transfer["toCurrency"], "")
    return {
        "id": transfer.get("_id") or transfer["id"],
        "route": f"{transfer['fromCountry']} → {transfer['toCountry']}",
        "amount": f"{from_symbol}{transfer['amount']:.2f}",
        "converted": f"{to_symbol}{transfer['convertedAmount']:.2f}",
        "date": format_transfer_date(transfer["date"]),
    }


def _redirect_to_index(request: Request, form: ConverterForm, **params) -> RedirectResponse:
    url = request.url_for("index").include_query_params(
        from_currency=form.from_currency,
        to_currency=form.to_currency,
        amount=form.amount,
        **{key: value for key, value in params.items() if value is not None},
    )
    return RedirectResponse(str(url), status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", response_class=HTMLResponse, name="index")
async def index(
    request: Request,
    from_currency: str = DEFAULT_FROM_CURRENCY,
    to_currency: str = DEFAULT_TO_CURRENCY,
    amount: str = DEFAULT_AMOUNT,
    success: bool = False,
    error: Optional[str] = None,
    history_error: Optional[str] = None,
    client: TransferApiClient = Depends(get_api_client)
):
    form = ConverterForm(from_currency=from_currency, to_currency=to_currency, amount=amount)

    rates: Dict[str, float] = {}
    try:
        rates = await client.get_rates()
    except ApiClientError as e:
        logger.warning("Не удалось получить курсы для формы", extra={"error": e.message})
        error = error or "Failed to fetch exchange rates. Please try again later."

    transfers = []
    try:
        transfers = [history_row(transfer) for transfer in await client.get_transfers()]
    except ApiClientError as e:
        logger.warning("Не удалось получить историю переводов", extra={"error": e.message})
        history_error = history_error or "Failed to load transfer history"

    context = {
        "form": form,
        "currencies": [(code, CURRENCY_NAMES[code]) for code in SUPPORTED_CURRENCIES],
        "rates": rates,
        "preview": format_preview(form, rates),
        "can_submit": can_submit(form),
        "error": error,
        "success": success,
        "success_display_ms": SUCCESS_DISPLAY_SECONDS * 1000,
        "transfers": transfers,
        "history_error": history_error,
    }
    return templates.TemplateResponse(request, "index.html", context)


@router.post("/transfer")
async def submit_transfer(
    request: Request,
    from_currency: str = Form(DEFAULT_FROM_CURRENCY),
    to_currency: str = Form(DEFAULT_TO_CURRENCY),
    amount: str = Form(""),
    action: str = Form("convert"),
    client: TransferApiClient = Depends(get_api_client)
):
    form = ConverterForm(from_currency=from_currency, to_currency=to_currency, amount=amount)
    if action == "swap":
        return _redirect_to_index(request, form.swapped())

    try:
        transfer = await client.create_transfer(**build_transfer_request(form))
    except (FormError, ApiClientError) as e:
        message = e.message if isinstance(e, ApiClientError) else str(e)
        logger.warning("Перевод из формы не создан", extra={"error": message})
        return _redirect_to_index(request, form, error=message)

    logger.info("Перевод из формы создан", extra={"transfer_id": transfer.get("_id")})
    return _redirect_to_index(request, form, success="true")


@router.post("/transfers/{transfer_id}/revoke")
async def revoke_transfer(
    request: Request,
    transfer_id: str,
    client: TransferApiClient = Depends(get_api_client)
):
    try:
        await client.delete_transfer(transfer_id)
    except ApiClientError as e:
        logger.warning("Перевод не отозван", extra={"transfer_id": transfer_id, "error": e.message})
        url = request.url_for("index").include_query_params(history_error="Failed to revoke transfer")
        return RedirectResponse(str(url), status_code=status.HTTP_303_SEE_OTHER)

    logger.info("Перевод отозван из истории", extra={"transfer_id": transfer_id})
    return RedirectResponse(str(request.url_for("index")), status_code=status.HTTP_303_SEE_OTHER)
