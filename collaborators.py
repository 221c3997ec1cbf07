import logging
from typing import Any, Dict

from fastapi.concurrency import run_in_threadpool
from pymongo.errors import PyMongoError

import database
from errors import TransportError

logger = logging.getLogger(__name__)


class MongoSubmitter:
    """Submit collaborator that stores assembled payloads in a collection.

    Returns the ``{"success": ..., "message": ...}`` shape the wizard expects;
    anything that keeps the document from being stored is a TransportError.
    """

    def __init__(self, collection: str):
        self.collection = collection

    async def __call__(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if database.db is None:
            raise TransportError("Database not available", status_code=503)
        try:
            inserted_id = await run_in_threadpool(database.create_document, self.collection, payload)
        except PyMongoError as e:
            logger.error(f"Storing {self.collection} failed: {e}")
            raise TransportError(str(e)) from e

        logger.info(f"Stored {self.collection} {inserted_id}")
        return {"success": True, "message": "Inspection submitted successfully!", "data": {"id": inserted_id}}
