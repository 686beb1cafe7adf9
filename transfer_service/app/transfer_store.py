from typing import List

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError
from pymongo import DESCENDING

from errors import NotFound, ValidationError
from logger import logger
from schemas import TransferRecord


class TransferStore:
    """Insert, list and delete Transfer documents in a Motor collection.

    Documents are validated against ``TransferRecord`` before they are
    written, so a bad record never reaches MongoDB.
    """

    def __init__(self, collection):
        self._collection = collection

    async def insert(self, record: dict) -> dict:
        try:
            transfer = TransferRecord(**record)
        except PydanticValidationError as e:
            logger.warning("Перевод не прошёл валидацию", extra={"errors": str(e.errors())})
            raise ValidationError(str(e)) from e

        document = transfer.model_dump()
        document["_id"] = str(ObjectId())
        await self._collection.insert_one(document)
        return document

    async def list_all(self) -> List[dict]:
        cursor = self._collection.find({}).sort("date", DESCENDING)
        return await cursor.to_list(length=None)

    async def delete_by_id(self, transfer_id: str) -> dict:
        document = await self._collection.find_one_and_delete({"_id": transfer_id})
        if document is None:
            raise NotFound(f"Transfer {transfer_id} not found")
        return document
