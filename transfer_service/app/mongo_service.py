from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from config import get_settings
from currencies import SUPPORTED_COUNTRIES, SUPPORTED_CURRENCIES
from logger import logger
from transfer_store import TransferStore

TRANSFERS_COLLECTION = "transfers"

TRANSFER_JSON_SCHEMA = {
    "bsonType": "object",
    "required": [
        "fromCountry", "toCountry", "fromCurrency", "toCurrency",
        "amount", "convertedAmount", "exchangeRate", "date",
    ],
    "properties": {
        "fromCountry": {"enum": list(SUPPORTED_COUNTRIES)},
        "toCountry": {"enum": list(SUPPORTED_COUNTRIES)},
        "fromCurrency": {"enum": list(SUPPORTED_CURRENCIES)},
        "toCurrency": {"enum": list(SUPPORTED_CURRENCIES)},
        "amount": {"bsonType": ["double", "int", "long", "decimal"], "minimum": 0},
        "convertedAmount": {"bsonType": ["double", "int", "long", "decimal"], "minimum": 0},
        "exchangeRate": {"bsonType": ["double", "int", "long", "decimal"]},
        "date": {"bsonType": "date"},
    },
}

settings = get_settings()

client = AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)
db = client[settings.mongodb_db]
transfers_collection = db[TRANSFERS_COLLECTION]


@retry(
    retry=retry_if_exception_type(PyMongoError),
    stop=stop_after_attempt(10),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True,
)
async def wait_for_mongo():
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.warning("MongoDB недоступна", extra={"error": str(e)})
        raise
    logger.info("MongoDB connection successful!")
    return client


async def ensure_transfer_schema(database: AsyncIOMotorDatabase) -> None:
    validator = {"$jsonSchema": TRANSFER_JSON_SCHEMA}
    existing = await database.list_collection_names(filter={"name": TRANSFERS_COLLECTION})
    if existing:
        await database.command("collMod", TRANSFERS_COLLECTION, validator=validator)
    else:
        await database.create_collection(TRANSFERS_COLLECTION, validator=validator)
    await database[TRANSFERS_COLLECTION].create_index([("date", DESCENDING)])
    logger.info("Схема коллекции transfers применена", extra={"collection": TRANSFERS_COLLECTION})


def get_transfer_store() -> TransferStore:
    return TransferStore(transfers_collection)
