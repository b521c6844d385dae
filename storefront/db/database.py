# storefront/db/database.py
import logging

import certifi
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorClient

from storefront.core.config import settings

logger = logging.getLogger(__name__)

client_options = {}
if settings.mongo_uri.startswith("mongodb+srv://"):
    client_options["tlsCAFile"] = certifi.where()

client = AsyncIOMotorClient(settings.mongo_uri, **client_options)
db = client[settings.mongo_db_name]
products_collection = db["products"]
categories_collection = db["categories"]
sections_collection = db["sections"]
orders_collection = db["orders"]
carts_collection = db["carts"]


def object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail="Invalid id")


def serialize_document(document: dict) -> dict:
    # Convierte `_id` en `id` como cadena
    document = dict(document)
    if "_id" in document:
        document["id"] = str(document.pop("_id"))
    return document


async def ensure_indexes():
    # Una sola orden por payment intent; las órdenes COD no lo llevan
    await orders_collection.create_index(
        "payment_intent_id",
        unique=True,
        partialFilterExpression={"payment_intent_id": {"$type": "string"}},
    )


async def connect_to_mongo():
    try:
        await client.server_info()
        logger.info("Connected to MongoDB database %s", settings.mongo_db_name)
        await ensure_indexes()
    except Exception as e:
        logger.error("Could not connect to MongoDB: %s", e)


async def close_mongo_connection():
    client.close()
