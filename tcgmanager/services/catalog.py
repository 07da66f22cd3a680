"""Card catalog client (Scryfall).

Searches the public catalog by free text and converts results into
CardRecords. The catalog is an external collaborator: this module only
fetches and normalizes, it keeps no state between calls.
"""

import logging

import httpx

from tcgmanager.config import MAX_QUERY_LENGTH, settings
from tcgmanager.models.card import CardRecord
from tcgmanager.models.failure import CardNotFoundError, CatalogError, InvalidQueryError

logger = logging.getLogger(__name__)


def validate_query(query: str) -> str:
    """
    Check a search query before sending it to the catalog.

    Raises:
        InvalidQueryError: If blank or longer than MAX_QUERY_LENGTH
    """
    query = (query or "").strip()
    if not query:
        raise InvalidQueryError("Card name is required")
    if len(query) > MAX_QUERY_LENGTH:
        raise InvalidQueryError(f"Search query must be at most {MAX_QUERY_LENGTH} characters")
    return query


class CatalogClient:
    """Async client for the card catalog API.

    Pass an existing httpx.AsyncClient to reuse connections (or to mock
    transport in tests); otherwise one is created per call.
    """

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.catalog_url).rstrip("/")
        self.user_agent = user_agent or settings.catalog_user_agent
        self.timeout = settings.catalog_timeout if timeout is None else timeout
        self._client = client

    async def _get(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        url = f"{self.base_url}{path}"
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        try:
            if self._client is not None:
                return await self._client.get(url, params=params, headers=headers)
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.get(url, params=params, headers=headers)
        except httpx.RequestError as e:
            raise CatalogError("Card catalog is unreachable", detail=str(e)) from e

    async def search(self, query: str) -> list[CardRecord]:
        """
        Search all printings matching a free-text query.

        Returns:
            Matching cards in catalog order; empty if nothing matched

        Raises:
            InvalidQueryError: If the query is blank or too long
            CatalogError: If the catalog request fails
        """
        query = validate_query(query)
        response = await self._get("/cards/search", params={"q": query, "unique": "prints"})

        # The catalog answers 404 when a search has no results
        if response.status_code == 404:
            return []
        self._raise_for_status(response, f"Search failed for '{query}'")

        cards = [CardRecord.from_scryfall(item) for item in response.json().get("data", [])]
        logger.info("Catalog search for %r returned %d cards", query, len(cards))
        return cards

    async def get_card(self, card_id: str) -> CardRecord:
        """
        Fetch one card by catalog id.

        Raises:
            InvalidQueryError: If card_id is blank
            CardNotFoundError: If the catalog has no such card
            CatalogError: If the request fails
        """
        if not card_id or not card_id.strip():
            raise InvalidQueryError("Card ID is required")

        response = await self._get(f"/cards/{card_id.strip()}")
        if response.status_code == 404:
            raise CardNotFoundError(card_id)
        self._raise_for_status(response, f"Failed to get card {card_id}")

        return CardRecord.from_scryfall(response.json())

    @staticmethod
    def _raise_for_status(response: httpx.Response, message: str) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = None
            try:
                detail = response.json().get("details")
            except ValueError:
                detail = response.text[:200] or None
            raise CatalogError(
                f"{message}: HTTP {response.status_code}", detail=detail
            ) from e
