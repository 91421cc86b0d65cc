"""Minimal Discord REST client"""

from typing import Any, Dict, List, Optional
import httpx
import structlog

from app.config import settings
from app.errors import BiteBotError
from app.schemas.discord import ChannelType

logger = structlog.get_logger()

ONE_DAY_MINUTES = 1440


class DiscordAPIError(BiteBotError):
    """Non-2xx answer from the Discord API"""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        super().__init__(f"Discord API error {status_code}: {detail}")


class DiscordClient:
    """
    Bot-authenticated calls the command layer needs: follow-up edits,
    threads, messages and command registration.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        application_id: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token if token is not None else settings.discord_bot_token
        self.application_id = application_id if application_id is not None else settings.discord_application_id
        self.base_url = (base_url or settings.discord_api_base_url).rstrip("/")
        self._transport = transport

    async def _request(self, method: str, path: str, json: Any = None, auth: bool = True) -> Optional[dict]:
        headers = {}
        if auth:
            if not self.token:
                raise DiscordAPIError(401, "Discord bot token not configured")
            headers["Authorization"] = f"Bot {self.token}"

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=10.0,
            transport=self._transport,
        ) as client:
            response = await client.request(method, path, json=json, headers=headers)

        if response.status_code >= 400:
            logger.error(
                "Discord API request failed",
                method=method,
                path=path,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise DiscordAPIError(response.status_code, response.text[:200])

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def edit_original_response(self, interaction_token: str, content: str) -> Optional[dict]:
        """Replace the deferred 'thinking' placeholder of an interaction"""
        # Interaction webhooks authenticate through the token in the path
        return await self._request(
            "PATCH",
            f"/webhooks/{self.application_id}/{interaction_token}/messages/@original",
            json={"content": content},
            auth=False,
        )

    async def create_thread(self, channel_id: str, name: str) -> dict:
        """Open a public thread without a starter message"""
        logger.info("Creating thread", channel_id=channel_id, thread_name=name)
        return await self._request(
            "POST",
            f"/channels/{channel_id}/threads",
            json={
                "name": name[:100],
                "type": ChannelType.PUBLIC_THREAD.value,
                "auto_archive_duration": ONE_DAY_MINUTES,
                "invitable": True,
            },
        )

    async def send_message(self, channel_id: str, content: str) -> dict:
        return await self._request(
            "POST",
            f"/channels/{channel_id}/messages",
            json={"content": content},
        )

    async def register_commands(
        self,
        commands: List[Dict[str, Any]],
        guild_id: Optional[str] = None,
    ) -> List[dict]:
        """Bulk-overwrite command definitions for a guild, or globally"""
        if not self.application_id:
            raise DiscordAPIError(400, "Discord application id not configured")

        if guild_id:
            path = f"/applications/{self.application_id}/guilds/{guild_id}/commands"
        else:
            path = f"/applications/{self.application_id}/commands"

        result = await self._request("PUT", path, json=commands)
        logger.info("Registered commands", count=len(commands), guild_id=guild_id)
        return result or []


def get_discord_client() -> DiscordClient:
    """FastAPI dependency; overridden in tests"""
    return DiscordClient()
