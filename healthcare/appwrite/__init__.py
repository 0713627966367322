"""Appwrite REST clients — Databases and Messaging over a shared httpx connection."""

from healthcare.appwrite.client import AppwriteClient, AppwriteError, Query, unique_id
from healthcare.appwrite.databases import Databases
from healthcare.appwrite.messaging import Messaging

__all__ = [
    "AppwriteClient",
    "AppwriteError",
    "Databases",
    "Messaging",
    "Query",
    "unique_id",
]
