import math
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from currencies import SUPPORTED_COUNTRIES, currency_for_country
from errors import (ApiError, NotFound, UpstreamError, UpstreamMalformed,
                    UpstreamUnreachable, ValidationError)
from logger import logger
from mongo_service import get_transfer_store
from rate_gateway import RateGateway, get_rate_gateway
from schemas import MessageShow, RatesShow, TransferCreate, TransferShow
from transfer_store import TransferStore

router = APIRouter(prefix="/api", tags=["Transfers"])


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_amount(value) -> Optional[float]:
    """Return the amount as a finite float, or None if it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    elif isinstance(value, str):
        try:
            amount = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(amount):
        return None
    return amount


@router.get("/rates", response_model=RatesShow)
async def get_rates(gateway: RateGateway = Depends(get_rate_gateway)):
    try:
        rates = await gateway.fetch_all_rates()
    except (UpstreamError, UpstreamUnreachable, UpstreamMalformed) as e:
        logger.error("Ошибка при получении курсов", extra={"error": str(e)})
        raise ApiError(500, "Failed to fetch exchange rates", error=str(e))

    logger.info("Получены курсы валют", extra={"currencies": list(rates)})
    return {"rates": rates}


@router.get("/transfers", response_model=List[TransferShow])
async def get_transfers(store: TransferStore = Depends(get_transfer_store)):
    try:
        transfers = await store.list_all()
    except Exception as e:
        logger.error(f"Ошибка при получении переводов: {e}")
        raise ApiError(500, "Failed to fetch transfers", error=str(e))

    logger.info("Получен список переводов", extra={"count": len(transfers)})
    return [TransferShow.from_document(transfer) for transfer in transfers]


@router.post("/transfers", response_model=TransferShow, status_code=status.HTTP_201_CREATED)
async def create_transfer(
    transfer: TransferCreate,
    gateway: RateGateway = Depends(get_rate_gateway),
    store: TransferStore = Depends(get_transfer_store)
):
    if _is_missing(transfer.fromCountry) or _is_missing(transfer.toCountry) or _is_missing(transfer.amount):
        logger.warning("Перевод без обязательных полей", extra={"payload": transfer.model_dump(mode="json")})
        raise ApiError(400, "Please provide fromCountry, toCountry, and amount")

    amount = parse_amount(transfer.amount)
    if amount is None or amount <= 0:
        logger.warning("Некорректная сумма перевода", extra={"amount": str(transfer.amount)})
        raise ApiError(400, "Amount must be a positive number")

    from_currency = currency_for_country(transfer.fromCountry)
    to_currency = currency_for_country(transfer.toCountry)
    if from_currency is None or to_currency is None:
        logger.warning(
            "Неподдерживаемая страна",
            extra={"from_country": str(transfer.fromCountry), "to_country": str(transfer.toCountry)}
        )
        raise ApiError(400, "Invalid country selection", supported_countries=list(SUPPORTED_COUNTRIES))

    try:
        exchange_rate = await gateway.fetch_pair_rate(from_currency, to_currency)
        document = await store.insert({
            "fromCountry": transfer.fromCountry,
            "toCountry": transfer.toCountry,
            "fromCurrency": from_currency,
            "toCurrency": to_currency,
            "amount": amount,
            "convertedAmount": amount * exchange_rate,
            "exchangeRate": exchange_rate,
        })
    except UpstreamError as e:
        logger.error(
            "Ошибка API курсов валют",
            extra={"status_code": e.status_code, "from_currency": from_currency, "to_currency": to_currency}
        )
        raise ApiError(e.status_code, "Exchange rate API error", error=e.body)
    except UpstreamUnreachable:
        logger.error("API курсов валют недоступен", extra={"from_currency": from_currency, "to_currency": to_currency})
        raise ApiError(503, "Exchange rate API not responding", error="Network error")
    except (UpstreamMalformed, ValidationError) as e:
        logger.error(f"Ошибка при создании перевода: {e}")
        raise ApiError(500, "Failed to create transfer", error=str(e))
    except Exception as e:
        logger.exception("Ошибка при создании перевода")
        raise ApiError(500, "Failed to create transfer", error=str(e))

    logger.info(
        "Перевод создан",
        extra={
            "transfer_id": document["_id"],
            "from_currency": from_currency,
            "to_currency": to_currency,
            "exchange_rate": exchange_rate,
        }
    )
    return TransferShow.from_document(document)


@router.delete("/transfers/{transfer_id}", response_model=MessageShow)
async def delete_transfer(transfer_id: str, store: TransferStore = Depends(get_transfer_store)):
    try:
        await store.delete_by_id(transfer_id)
    except NotFound:
        logger.warning("Не найден указанный перевод", extra={"transfer_id": transfer_id})
        raise ApiError(404, "Transfer not found")
    except Exception as e:
        logger.error(f"Ошибка при отзыве перевода: {e}", extra={"transfer_id": transfer_id})
        raise ApiError(500, "Failed to revoke transfer", error=str(e))

    logger.info("Перевод отозван", extra={"transfer_id": transfer_id})
    return {"message": "Transfer revoked successfully"}
