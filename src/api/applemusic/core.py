"""
Apple Music Core Service - Catalog request dispatch and envelope decoding.
Builds catalog URLs, performs the GET, and sorts the body into exactly one
of three outcomes: resources, an upstream error, or unauthorized.
"""

from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from api.applemusic.auth import AppleMusicAuth, applemusic_auth
from api.applemusic.models import (
    AMError,
    CatalogOutcome,
    ErrorOutcome,
    ResourceObject,
    ResourceOutcome,
    ResourceType,
    TokenPair,
    UnauthorizedOutcome,
)
from utils.base_api_client import BaseAPIClient
from utils.get_logger import get_logger

logger = get_logger(__name__)

BASE_URL = "https://api.music.apple.com/v1"


class AppleMusicService(BaseAPIClient):
    """
    Core Apple Music service for API communication.
    Every public call goes through acquire_tokens() then fetch().
    """

    def __init__(self, auth: AppleMusicAuth | None = None):
        self.auth = auth or applemusic_auth
        self.base_url = BASE_URL

    # ------------------------------------------------------------------ #
    #  URLs                                                              #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _with_ids(
        path: str,
        resource_id: str | None = None,
        ids: list[str] | None = None,
        lang: str | None = None,
    ) -> str:
        if ids is not None:
            url = f"{path}?ids={','.join(quote(str(i), safe='') for i in ids)}"
            if lang:
                url += f"&l={quote(lang, safe='')}"
            return url

        if resource_id is not None:
            path = f"{path}/{quote(str(resource_id), safe='')}"
        if lang:
            path += f"?l={quote(lang, safe='')}"
        return path

    def build_catalog_url(
        self,
        storefront: str,
        resource_type: ResourceType | str,
        resource_id: str | None = None,
        ids: list[str] | None = None,
        lang: str | None = None,
    ) -> str:
        """
        Build a catalog URL.

        Single:  {base}/catalog/{storefront}/{type}/{id}[?l={lang}]
        Multi:   {base}/catalog/{storefront}/{type}?ids=a,b[&l={lang}]

        Example: https://api.music.apple.com/v1/catalog/us/artists/179934
        """
        segment = ResourceType(resource_type).value
        path = f"{self.base_url}/catalog/{quote(storefront, safe='')}/{segment}"
        return self._with_ids(path, resource_id=resource_id, ids=ids, lang=lang)

    def build_storefront_url(
        self,
        storefront_id: str | None = None,
        ids: list[str] | None = None,
        lang: str | None = None,
    ) -> str:
        """Storefronts live outside the catalog: {base}/storefronts/{id}."""
        path = f"{self.base_url}/{ResourceType.STOREFRONTS.value}"
        return self._with_ids(path, resource_id=storefront_id, ids=ids, lang=lang)

    @staticmethod
    def build_headers(tokens: TokenPair) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {tokens.developer_token}"}
        if tokens.user_token:
            headers["Music-User-Token"] = tokens.user_token
        return headers

    # ------------------------------------------------------------------ #
    #  Decoding                                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _resource_object(entry: Any) -> ResourceObject | None:
        if not isinstance(entry, dict) or not isinstance(entry.get("attributes"), dict):
            return None
        relationships = entry.get("relationships")
        try:
            return ResourceObject.model_validate(
                {
                    "id": entry.get("id"),
                    "type": entry.get("type"),
                    "href": entry.get("href"),
                    "attributes": entry["attributes"],
                    "relationships": relationships if isinstance(relationships, dict) else None,
                }
            )
        except ValidationError as e:
            logger.warning(f"Skipping malformed resource object: {e}")
            return None

    @classmethod
    def classify_response(cls, body: Any, single: bool = False) -> CatalogOutcome:
        """
        Sort a parsed body into one outcome. `data` is checked before `errors`.

        Args:
            body: Parsed JSON (or None when there was no usable body)
            single: Only the first `data` entry counts, and it must carry attributes

        Returns:
            ResourceOutcome, ErrorOutcome, or UnauthorizedOutcome
        """
        if not isinstance(body, dict):
            return UnauthorizedOutcome()

        data = body.get("data")
        if isinstance(data, list):
            if single:
                first = cls._resource_object(data[0]) if data else None
                if first is not None:
                    return ResourceOutcome(resources=[first])
            else:
                resources = [cls._resource_object(entry) for entry in data]
                return ResourceOutcome(resources=[r for r in resources if r is not None])

        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            try:
                return ErrorOutcome(error=AMError.model_validate(errors[0]))
            except ValidationError as e:
                logger.warning(f"Could not decode error entry: {e}")

        return UnauthorizedOutcome()

    # ------------------------------------------------------------------ #
    #  Dispatch                                                          #
    # ------------------------------------------------------------------ #

    async def acquire_tokens(self) -> TokenPair:
        return await self.auth.acquire_token()

    async def fetch(self, url: str, tokens: TokenPair, single: bool = False) -> CatalogOutcome:
        """
        Perform one GET against the catalog and classify the body.

        A missing developer token short-circuits to UnauthorizedOutcome before
        any network call. The body is classified whatever the HTTP status.
        """
        if not tokens.developer_token:
            logger.error("Missing token")
            return UnauthorizedOutcome()

        logger.info(f"Making Request 🌐: {url}")
        body, _status = await self._core_async_request(url=url, headers=self.build_headers(tokens))
        outcome = self.classify_response(body, single=single)

        if isinstance(outcome, ResourceOutcome):
            logger.info(f"Request Successful ✅: {url}")
        elif isinstance(outcome, ErrorOutcome):
            logger.error(f"{outcome.error.title or ''} - {outcome.error.status or ''}")
        else:
            logger.error("Unauthorized request")

        return outcome
