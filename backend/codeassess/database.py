"""
Database connection - MongoDB async (Motor).
"""

from motor.motor_asyncio import AsyncIOMotorClient

from codeassess.config import MONGO_URL, DB_NAME

client = AsyncIOMotorClient(MONGO_URL)
db = client[DB_NAME]
