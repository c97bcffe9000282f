import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

import pydantic
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from config import Settings
from errors import PersistenceError, ValidationError
from models import ScanResult

logger = logging.getLogger(__name__)

COLLECTION_NAME = "scanresults"
REQUIRED_FIELDS = ("name", "verdict", "message", "score")
SCORE_MIN = 0
SCORE_MAX = 100
DEFAULT_LIMIT = 100


def clamp_score(score: float) -> float:
    return max(SCORE_MIN, min(SCORE_MAX, score))


def serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    record = dict(doc)
    if "_id" in record:
        record["_id"] = str(record["_id"])
    return record


def validate_candidate(candidate: Any) -> Dict[str, Any]:
    """Check a submitted scan result and return the document to store.

    Missing required fields are reported before any type problems, so a
    client that forgot several fields gets all of them named at once.
    """
    if not isinstance(candidate, dict):
        raise ValidationError("Scan result must be a JSON object")

    missing = [f for f in REQUIRED_FIELDS if candidate.get(f) is None]
    if missing:
        raise ValidationError(
            "Missing required field(s): " + ", ".join(missing), fields=missing
        )

    try:
        result = ScanResult.model_validate(candidate)
    except pydantic.ValidationError as e:
        invalid = []
        for err in e.errors():
            name = str(err["loc"][0]) if err["loc"] else "body"
            if name not in invalid:
                invalid.append(name)
        raise ValidationError(
            "Invalid field(s): " + ", ".join(invalid), fields=invalid
        ) from e

    doc = result.model_dump()
    doc["score"] = clamp_score(doc["score"])
    if doc["timestamp"] is None:
        doc["timestamp"] = datetime.now(timezone.utc)
    return doc


class ResultStore:
    """Persistence boundary for scan results, backed by a MongoDB collection."""

    def __init__(self, client, db_name: str):
        self.client = client
        self.db = client[db_name]
        self.collection = self.db[COLLECTION_NAME]
        self._connected = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResultStore":
        client = AsyncIOMotorClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            connectTimeoutMS=settings.mongodb_timeout_ms,
        )
        return cls(client, settings.mongodb_db)

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        if self._connected:
            return
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            raise PersistenceError("Could not connect to the result store") from e
        self._connected = True
        logger.info("Connected to result store (db=%s)", self.db.name)

    async def insert(self, candidate: Any) -> Dict[str, Any]:
        doc = validate_candidate(candidate)
        try:
            result = await self.collection.insert_one(doc)
        except PyMongoError as e:
            raise PersistenceError("Failed to save scan result") from e
        doc["_id"] = result.inserted_id
        return serialize(doc)

    async def query_top(self, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        if limit <= 0:
            return []
        # _id ascending keeps equal scores in insertion order
        cursor = self.collection.find().sort([("score", -1), ("_id", 1)]).limit(limit)
        try:
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise PersistenceError("Failed to retrieve leaderboard") from e
        return [serialize(doc) for doc in docs]

    def close(self) -> None:
        self.client.close()
        self._connected = False
