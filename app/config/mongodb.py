from motor.motor_asyncio import AsyncIOMotorClient
import logging

logger = logging.getLogger(__name__)


class MongoDB:
    def __init__(self, uri: str, db_name: str, timeout_seconds: float = 5.0):
        self.uri = uri
        self.client = None
        self.db = None
        self.db_name = db_name
        self.timeout_seconds = timeout_seconds

    async def init_db(self):
        # Fail fast when the server is unreachable instead of hanging on first query
        self.client = AsyncIOMotorClient(
            self.uri,
            serverSelectionTimeoutMS=int(self.timeout_seconds * 1000),
        )
        self.db = self.client[self.db_name]
        logger.info(f"MongoDB client created for database '{self.db_name}'")

    def get_collection(self, name: str):
        if self.db is None:
            raise RuntimeError("MongoDB not connected")
        return self.db[name]

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None
            self.db = None
