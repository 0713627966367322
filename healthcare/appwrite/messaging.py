"""Appwrite Messaging service — email and SMS through the project's providers."""

from __future__ import annotations

from typing import Any

from healthcare.appwrite.client import AppwriteClient


class Messaging:
    """Create outbound messages. Delivery is handled by Appwrite's configured providers."""

    def __init__(self, client: AppwriteClient) -> None:
        self._client = client

    async def create_email(
        self,
        message_id: str,
        subject: str,
        content: str,
        users: list[str],
        attachments: list[str] | None = None,
        html: bool = False,
    ) -> dict[str, Any]:
        """Send an email to the given Appwrite user IDs.

        Attachments are `<bucket_id>:<file_id>` references to Appwrite Storage files.
        """
        return await self._client.call(
            "POST",
            "/messaging/messages/email",
            payload={
                "messageId": message_id,
                "subject": subject,
                "content": content,
                "topics": [],
                "users": users,
                "targets": [],
                "attachments": attachments or [],
                "html": html,
            },
        )

    async def create_sms(
        self,
        message_id: str,
        content: str,
        users: list[str],
    ) -> dict[str, Any]:
        return await self._client.call(
            "POST",
            "/messaging/messages/sms",
            payload={
                "messageId": message_id,
                "content": content,
                "topics": [],
                "users": users,
                "targets": [],
            },
        )
