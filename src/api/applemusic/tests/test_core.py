"""
Unit tests for Apple Music Core Service.
"""

import pytest

from api.applemusic.core import AppleMusicService
from api.applemusic.models import (
    ErrorOutcome,
    ResourceOutcome,
    ResourceType,
    TokenPair,
    UnauthorizedOutcome,
)
from api.applemusic.tests.conftest import TEST_DEVELOPER_TOKEN, TEST_USER_TOKEN

pytestmark = pytest.mark.unit


class TestBuildCatalogUrl:
    """Tests for catalog URL construction."""

    def test_single_id(self, service):
        url = service.build_catalog_url("us", ResourceType.ARTISTS, resource_id="179934")
        assert url == "https://api.music.apple.com/v1/catalog/us/artists/179934"

    def test_single_id_with_lang(self, service):
        url = service.build_catalog_url("us", "songs", resource_id="900032829", lang="en-us")
        assert url == "https://api.music.apple.com/v1/catalog/us/songs/900032829?l=en-us"

    def test_multiple_ids(self, service):
        url = service.build_catalog_url("us", ResourceType.ARTISTS, ids=["179934", "463106"])
        assert url == "https://api.music.apple.com/v1/catalog/us/artists?ids=179934,463106"

    def test_multiple_ids_with_lang(self, service):
        url = service.build_catalog_url("gb", ResourceType.STATIONS, ids=["ra.1", "ra.2"], lang="en-gb")
        assert url == "https://api.music.apple.com/v1/catalog/gb/stations?ids=ra.1,ra.2&l=en-gb"

    def test_hyphenated_resource_type(self, service):
        url = service.build_catalog_url("us", ResourceType.APPLE_CURATORS, resource_id="976439448")
        assert url == "https://api.music.apple.com/v1/catalog/us/apple-curators/976439448"

    def test_unknown_resource_type_raises(self, service):
        with pytest.raises(ValueError):
            service.build_catalog_url("us", "podcasts", resource_id="1")

    def test_storefront_url(self, service):
        assert service.build_storefront_url("jp") == "https://api.music.apple.com/v1/storefronts/jp"
        assert (
            service.build_storefront_url(ids=["us", "gb"], lang="en-us")
            == "https://api.music.apple.com/v1/storefronts?ids=us,gb&l=en-us"
        )


class TestBuildHeaders:
    def test_developer_token_only(self):
        headers = AppleMusicService.build_headers(TokenPair(developer_token="dev"))
        assert headers == {"Authorization": "Bearer dev"}

    def test_user_token_added(self):
        headers = AppleMusicService.build_headers(
            TokenPair(developer_token="dev", user_token="user")
        )
        assert headers == {"Authorization": "Bearer dev", "Music-User-Token": "user"}


class TestClassifyResponse:
    """Tests for the data/errors/unauthorized branch table."""

    def test_data_single_uses_first_entry(self):
        body = {
            "data": [
                {"id": "1", "attributes": {"name": "Drake"}},
                {"id": "2", "attributes": {"name": "Future"}},
            ]
        }
        outcome = AppleMusicService.classify_response(body, single=True)

        assert isinstance(outcome, ResourceOutcome)
        assert [r.id for r in outcome.resources] == ["1"]
        assert outcome.resources[0].attributes == {"name": "Drake"}

    def test_data_multi_keeps_order(self):
        body = {"data": [{"id": str(i), "attributes": {}} for i in (3, 1, 2)]}
        outcome = AppleMusicService.classify_response(body)

        assert isinstance(outcome, ResourceOutcome)
        assert [r.id for r in outcome.resources] == ["3", "1", "2"]

    def test_data_multi_skips_entries_without_attributes(self):
        body = {"data": [{"id": "1"}, {"id": "2", "attributes": {"name": "x"}}, "junk"]}
        outcome = AppleMusicService.classify_response(body)

        assert [r.id for r in outcome.resources] == ["2"]

    def test_empty_data_multi_is_empty_resource_outcome(self):
        outcome = AppleMusicService.classify_response({"data": []})

        assert isinstance(outcome, ResourceOutcome)
        assert outcome.resources == []

    def test_empty_data_single_is_unauthorized(self):
        outcome = AppleMusicService.classify_response({"data": []}, single=True)

        assert isinstance(outcome, UnauthorizedOutcome)

    def test_single_first_entry_without_attributes_falls_through_to_errors(self):
        body = {"data": [{"id": "1"}], "errors": [{"status": "500", "title": "Oops"}]}
        outcome = AppleMusicService.classify_response(body, single=True)

        assert isinstance(outcome, ErrorOutcome)
        assert outcome.error.status == "500"

    def test_relationships_kept(self):
        body = {"data": [{"attributes": {}, "relationships": {"albums": {"data": []}}}]}
        outcome = AppleMusicService.classify_response(body, single=True)

        assert outcome.resources[0].relationships == {"albums": {"data": []}}

    def test_non_dict_relationships_dropped(self):
        body = {"data": [{"attributes": {}, "relationships": ["albums"]}]}
        outcome = AppleMusicService.classify_response(body, single=True)

        assert outcome.resources[0].relationships is None

    def test_errors_first_entry(self, not_found_response):
        not_found_response["errors"].append({"status": "500", "title": "Second"})
        outcome = AppleMusicService.classify_response(not_found_response)

        assert isinstance(outcome, ErrorOutcome)
        assert outcome.error.status == "404"
        assert outcome.error.code == "40400"
        assert outcome.error.title == "Resource Not Found"

    def test_numeric_id_single_is_resource(self):
        body = {"data": [{"id": 179934, "attributes": {"name": "Drake"}}]}
        outcome = AppleMusicService.classify_response(body, single=True)

        assert isinstance(outcome, ResourceOutcome)
        assert outcome.resources[0].id == "179934"

    def test_errors_entry_with_loose_fields_passes_through(self):
        body = {"errors": [{"status": 403, "title": "Forbidden", "source": "token", "meta": [1]}]}
        outcome = AppleMusicService.classify_response(body)

        assert isinstance(outcome, ErrorOutcome)
        assert outcome.error.status == "403"
        assert outcome.error.source == "token"

    def test_data_checked_before_errors(self):
        body = {"data": [{"attributes": {"name": "x"}}], "errors": [{"status": "404"}]}
        outcome = AppleMusicService.classify_response(body)

        assert isinstance(outcome, ResourceOutcome)

    @pytest.mark.parametrize(
        "body",
        [None, "not json", [], {}, {"errors": []}, {"errors": ["x"]}, {"data": "x"}, {"meta": {}}],
    )
    def test_neither_envelope_is_unauthorized(self, body):
        outcome = AppleMusicService.classify_response(body)

        assert isinstance(outcome, UnauthorizedOutcome)
        assert outcome.error.status == "401"
        assert outcome.error.code == "unauthorized"
        assert outcome.error.title == "Unauthorized request"
        assert outcome.error.detail == "Missing token, refresh current token or request a new token"


class TestFetch:
    """Tests for the catalog GET."""

    @pytest.mark.asyncio
    async def test_missing_token_makes_no_network_call(self, service, mock_catalog):
        outcome = await service.fetch("https://api.music.apple.com/v1/catalog/us/artists/1", TokenPair())

        assert isinstance(outcome, UnauthorizedOutcome)
        mock_catalog.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sends_bearer_and_user_token(self, service, mock_catalog):
        url = "https://api.music.apple.com/v1/catalog/us/artists/1"
        tokens = TokenPair(developer_token=TEST_DEVELOPER_TOKEN, user_token=TEST_USER_TOKEN)

        await service.fetch(url, tokens)

        mock_catalog.assert_awaited_once()
        kwargs = mock_catalog.call_args.kwargs
        assert kwargs["url"] == url
        assert kwargs["headers"]["Authorization"] == f"Bearer {TEST_DEVELOPER_TOKEN}"
        assert kwargs["headers"]["Music-User-Token"] == TEST_USER_TOKEN

    @pytest.mark.asyncio
    async def test_error_envelope_decoded_regardless_of_status(
        self, service, mock_catalog, not_found_response
    ):
        mock_catalog.return_value = (not_found_response, 404)

        outcome = await service.fetch("https://x", TokenPair(developer_token="dev"))

        assert isinstance(outcome, ErrorOutcome)
        assert outcome.error.status == "404"

    @pytest.mark.asyncio
    async def test_transport_failure_is_unauthorized(self, service, mock_catalog):
        mock_catalog.return_value = (None, 500)

        outcome = await service.fetch("https://x", TokenPair(developer_token="dev"))

        assert isinstance(outcome, UnauthorizedOutcome)

    @pytest.mark.asyncio
    async def test_acquire_tokens_delegates_to_auth(self, service, mock_token_server):
        tokens = await service.acquire_tokens()

        assert tokens.developer_token == TEST_DEVELOPER_TOKEN
        mock_token_server.assert_awaited_once()
