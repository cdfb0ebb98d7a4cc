"""StudyGate HTTP client — implements GroupCountReader and registration."""

from __future__ import annotations

import logging

import httpx

from studygate.application.ports.group_count_reader import GroupCountReader
from studygate.config import settings
from studygate.domain.errors import CountLookupError
from studygate.domain.value_objects.enums import Direction, ParticipantGroup

logger = logging.getLogger(__name__)


class StudyGateClient(GroupCountReader):
    """What the game client does over the network.

    Reads group counts for the balancer and registers the participant once
    gameplay has produced a direction.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.api_url).rstrip("/")
        self._token = token if token is not None else settings.survey_token
        self._timeout = timeout or settings.client_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        )

    async def read_count(self, group: ParticipantGroup) -> int:
        try:
            async with self._client() as client:
                response = await client.get(f"/api/groups/{group.value}/count")
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CountLookupError(f"{group.value}: {e}") from e

        return self._parse_count(payload)

    @staticmethod
    def _parse_count(payload) -> int:
        """Extract the count; anything missing or non-numeric reads as 0."""
        raw = payload.get("count") if isinstance(payload, dict) else payload
        if isinstance(raw, bool):
            return 0
        try:
            return int(raw)
        except (TypeError, ValueError):
            return 0

    async def register(
        self, participant_id: str, direction: Direction, group: ParticipantGroup
    ) -> bool:
        """Register the participant. Returns True only on HTTP 200."""
        try:
            async with self._client() as client:
                response = await client.post(
                    "/api/register",
                    json={
                        "token": self._token,
                        "unityId": participant_id,
                        "direction": direction.value,
                        "group": group.value,
                    },
                )
        except httpx.HTTPError as e:
            logger.error("Error registering participant %s: %s", participant_id, e)
            return False

        if response.status_code != 200:
            logger.error(
                "Error registering participant %s: %d %s",
                participant_id, response.status_code, response.text,
            )
            return False

        logger.info("Participant %s registered", participant_id)
        return True
