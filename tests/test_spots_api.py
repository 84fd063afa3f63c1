"""
Integration tests for the spot endpoints.
Covers listing shape, filters and pagination, spot management and spot images.
"""

import pytest
from decimal import Decimal
from httpx import AsyncClient
from fastapi import status
from sqlalchemy import select, func

from app.models.image import SpotImage
from app.models.review import Review
from app.models.spot import Spot
from app.models.user import User
from app.repositories.image import SpotImageRepository
from app.repositories.review import ReviewRepository
from app.repositories.spot import SpotRepository
from app.utils.formatting import NO_PREVIEW_IMAGE
from tests.conftest import UserFactory, SpotFactory, ReviewFactory, login, assert_error_envelope


class TestListSpots:
    """Tests for GET /api/spots."""

    @pytest.mark.asyncio
    async def test_empty_listing(self, async_client: AsyncClient):
        response = await async_client.get("/api/spots")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"Spots": [], "page": 1, "size": 20, "total": 0}

    @pytest.mark.asyncio
    async def test_listing_shape_without_reviews_or_images(self, async_client: AsyncClient, test_spot: Spot):
        response = await async_client.get("/api/spots")

        spot = response.json()["Spots"][0]
        assert spot["id"] == test_spot.id
        assert spot["ownerId"] == test_spot.owner_id
        assert spot["lat"] == "37.764536"
        assert spot["lng"] == "-122.473033"
        assert spot["price"] == 100.0
        assert spot["avgRating"] == "0.0"
        assert spot["previewImage"] == NO_PREVIEW_IMAGE
        assert "createdAt" in spot and "updatedAt" in spot

    @pytest.mark.asyncio
    async def test_listing_rating_and_preview(
        self,
        async_client: AsyncClient,
        test_spot: Spot,
        user_repository,
        review_repository: ReviewRepository,
        spot_image_repository: SpotImageRepository
    ):
        for stars in (5.0, 4.0, 4.0):
            reviewer = await UserFactory.create_user(user_repository)
            await ReviewFactory.create_review(review_repository, reviewer.id, test_spot.id, stars=stars)
        await ReviewFactory.create_spot_image(spot_image_repository, test_spot.id, preview=False)
        await ReviewFactory.create_spot_image(
            spot_image_repository, test_spot.id, preview=True, url="https://example.com/front.jpg"
        )

        response = await async_client.get("/api/spots")

        spot = response.json()["Spots"][0]
        assert spot["avgRating"] == "4.3"
        assert spot["previewImage"] == "https://example.com/front.jpg"

    @pytest.mark.asyncio
    async def test_pagination_is_clamped(
        self,
        async_client: AsyncClient,
        spot_repository: SpotRepository,
        test_owner: User
    ):
        for index in range(3):
            await SpotFactory.create_spot(spot_repository, test_owner.id, name=f"Spot {index}")

        response = await async_client.get("/api/spots", params={"page": 0, "size": 50})
        data = response.json()
        assert response.status_code == status.HTTP_200_OK
        assert (data["page"], data["size"], data["total"]) == (1, 20, 3)

        response = await async_client.get("/api/spots", params={"page": 99, "size": 2})
        data = response.json()
        assert (data["page"], data["size"]) == (10, 2)
        assert data["Spots"] == []

        response = await async_client.get("/api/spots", params={"page": "abc", "size": "xyz"})
        assert (response.json()["page"], response.json()["size"]) == (1, 20)

    @pytest.mark.asyncio
    async def test_second_page(self, async_client: AsyncClient, spot_repository: SpotRepository, test_owner: User):
        spots = [
            await SpotFactory.create_spot(spot_repository, test_owner.id, name=f"Spot {index}")
            for index in range(3)
        ]

        response = await async_client.get("/api/spots", params={"page": 2, "size": 2})

        data = response.json()
        assert [spot["id"] for spot in data["Spots"]] == [spots[2].id]
        assert data["total"] == 3

    @pytest.mark.asyncio
    async def test_price_and_coordinate_filters(
        self,
        async_client: AsyncClient,
        spot_repository: SpotRepository,
        test_owner: User
    ):
        cheap = await SpotFactory.create_spot(spot_repository, test_owner.id, name="Cheap", price=Decimal("50"))
        await SpotFactory.create_spot(spot_repository, test_owner.id, name="Pricey", price=Decimal("500"))
        northern = await SpotFactory.create_spot(
            spot_repository, test_owner.id, name="North", price=Decimal("75"), lat=Decimal("60.0")
        )

        response = await async_client.get("/api/spots", params={"maxPrice": 100})
        assert {spot["id"] for spot in response.json()["Spots"]} == {cheap.id, northern.id}

        response = await async_client.get("/api/spots", params={"minLat": 50, "maxPrice": "100"})
        assert [spot["id"] for spot in response.json()["Spots"]] == [northern.id]
        assert response.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_invalid_filters(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/spots",
            params={"minLat": "north", "maxLng": 200, "minPrice": -1}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert_error_envelope(data, "VALIDATION_ERROR")
        assert data["errors"] == {
            "minLat": "Minimum latitude is invalid",
            "maxLng": "Maximum longitude is invalid",
            "minPrice": "Minimum price must be greater than or equal to 0"
        }

    @pytest.mark.asyncio
    async def test_min_greater_than_max(self, async_client: AsyncClient):
        response = await async_client.get("/api/spots", params={"minPrice": 200, "maxPrice": 100})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == {
            "minPrice": "Minimum price cannot be greater than maximum price"
        }


class TestCurrentUserSpots:
    """Tests for GET /api/spots/current."""

    @pytest.mark.asyncio
    async def test_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.get("/api/spots/current")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Authentication required"

    @pytest.mark.asyncio
    async def test_lists_only_owned_spots(
        self,
        async_client: AsyncClient,
        spot_repository: SpotRepository,
        test_spot: Spot,
        test_guest: User
    ):
        await SpotFactory.create_spot(spot_repository, test_guest.id, name="Guest Spot")
        await login(async_client, test_guest)

        response = await async_client.get("/api/spots/current")

        assert response.status_code == status.HTTP_200_OK
        spots = response.json()["Spots"]
        assert [spot["name"] for spot in spots] == ["Guest Spot"]
        assert spots[0]["avgRating"] == "0.0"


class TestSpotDetail:
    """Tests for GET /api/spots/{spot_id}."""

    @pytest.mark.asyncio
    async def test_detail(
        self,
        async_client: AsyncClient,
        test_spot: Spot,
        test_owner: User,
        test_review: Review,
        spot_image_repository: SpotImageRepository
    ):
        image = await ReviewFactory.create_spot_image(spot_image_repository, test_spot.id, preview=True)

        response = await async_client.get(f"/api/spots/{test_spot.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["numReviews"] == 1
        assert data["avgStarRating"] == "4.0"
        assert data["previewImage"] == image.url
        assert data["SpotImages"] == [{"id": image.id, "url": image.url, "preview": True}]
        assert data["Owner"] == {"id": test_owner.id, "firstName": "Owen", "lastName": "Host"}

    @pytest.mark.asyncio
    async def test_missing_spot(self, async_client: AsyncClient):
        response = await async_client.get("/api/spots/9999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        data = response.json()
        assert_error_envelope(data, "NOT_FOUND")
        assert data["message"] == "Spot couldn't be found"

    @pytest.mark.asyncio
    async def test_id_beyond_integer_range(self, async_client: AsyncClient):
        response = await async_client.get("/api/spots/99999999999999999999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert_error_envelope(response.json(), "NOT_FOUND")


class TestCreateSpot:
    """Tests for POST /api/spots."""

    @pytest.mark.asyncio
    async def test_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.post("/api/spots", json=SpotFactory.create_spot_data())

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_create_spot(self, async_client: AsyncClient, test_owner: User):
        await login(async_client, test_owner)

        response = await async_client.post("/api/spots", json=SpotFactory.create_spot_data(name="  New Spot  "))

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["ownerId"] == test_owner.id
        assert data["name"] == "New Spot"
        assert data["lat"] == "37.764536"
        assert data["price"] == 100.0

    @pytest.mark.asyncio
    async def test_new_spot_has_no_rating_or_preview(self, async_client: AsyncClient, test_owner: User):
        await login(async_client, test_owner)
        spot_data = SpotFactory.create_spot_data(price=Decimal("100"))
        spot_data.update(lat=45.0, lng=-122.0)

        created = await async_client.post("/api/spots", json=spot_data)
        assert created.status_code == status.HTTP_201_CREATED
        assert created.json()["lat"] == "45.000000"
        assert created.json()["lng"] == "-122.000000"

        detail = await async_client.get(f"/api/spots/{created.json()['id']}")
        assert detail.json()["avgStarRating"] == "0.0"
        assert detail.json()["numReviews"] == 0
        assert detail.json()["previewImage"] == NO_PREVIEW_IMAGE

        listing = await async_client.get("/api/spots")
        assert listing.json()["Spots"][0]["avgRating"] == "0.0"

    @pytest.mark.asyncio
    async def test_validation_messages(self, async_client: AsyncClient, test_owner: User):
        await login(async_client, test_owner)

        response = await async_client.post(
            "/api/spots",
            json={
                "lat": 91,
                "lng": "west",
                "name": "x" * 51,
                "price": 2000.01
            }
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == {
            "address": "Street address is required",
            "city": "City is required",
            "state": "State is required",
            "country": "Country is required",
            "lat": "Latitude must be within -90 and 90",
            "lng": "Longitude must be within -180 and 180",
            "name": "Name must be less than 50 characters",
            "description": "Description is required",
            "price": "Price per day must be a number from 0 to 2000"
        }

    @pytest.mark.asyncio
    async def test_boundary_values_accepted(self, async_client: AsyncClient, test_owner: User):
        await login(async_client, test_owner)
        spot_data = SpotFactory.create_spot_data(name="x" * 50, price=Decimal("2000"))
        spot_data.update(lat=-90, lng=180)

        response = await async_client.post("/api/spots", json=spot_data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["lat"] == "-90.000000"
        assert response.json()["lng"] == "180.000000"

    @pytest.mark.asyncio
    async def test_text_longer_than_columns(self, async_client: AsyncClient, test_owner: User):
        await login(async_client, test_owner)
        spot_data = SpotFactory.create_spot_data()
        spot_data.update(address="a" * 256, city="c" * 101, state="s" * 101, country="k" * 101)

        response = await async_client.post("/api/spots", json=spot_data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == {
            "address": "Street address must be 255 characters or less",
            "city": "City must be 100 characters or less",
            "state": "State must be 100 characters or less",
            "country": "Country must be 100 characters or less"
        }

    @pytest.mark.asyncio
    async def test_image_url_longer_than_column(self, async_client: AsyncClient, test_spot: Spot, test_owner: User):
        await login(async_client, test_owner)

        response = await async_client.post(
            f"/api/spots/{test_spot.id}/images",
            json={"url": "https://example.com/" + "x" * 2048, "preview": False}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == {"url": "Image URL must be 2048 characters or less"}


class TestUpdateAndDeleteSpot:
    """Tests for PUT and DELETE /api/spots/{spot_id}."""

    @pytest.mark.asyncio
    async def test_owner_updates_spot(self, async_client: AsyncClient, test_spot: Spot, test_owner: User):
        await login(async_client, test_owner)

        response = await async_client.put(
            f"/api/spots/{test_spot.id}",
            json=SpotFactory.create_spot_data(name="Renamed", price=Decimal("150"))
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Renamed"
        assert response.json()["price"] == 150.0

    @pytest.mark.asyncio
    async def test_non_owner_cannot_update(self, async_client: AsyncClient, test_spot: Spot, test_guest: User):
        await login(async_client, test_guest)

        response = await async_client.put(f"/api/spots/{test_spot.id}", json=SpotFactory.create_spot_data())

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_missing_spot_is_404_before_ownership(self, async_client: AsyncClient, test_guest: User):
        await login(async_client, test_guest)

        response = await async_client.put("/api/spots/9999", json=SpotFactory.create_spot_data())

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_cascades(
        self,
        async_client: AsyncClient,
        db_session,
        test_spot: Spot,
        test_owner: User,
        test_review: Review,
        spot_image_repository: SpotImageRepository
    ):
        await ReviewFactory.create_spot_image(spot_image_repository, test_spot.id, preview=True)
        await login(async_client, test_owner)

        response = await async_client.delete(f"/api/spots/{test_spot.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Successfully deleted"}

        for model in (Spot, SpotImage, Review):
            count = await db_session.scalar(select(func.count(model.id)))
            assert count == 0

    @pytest.mark.asyncio
    async def test_non_owner_cannot_delete(self, async_client: AsyncClient, test_spot: Spot, test_guest: User):
        await login(async_client, test_guest)

        response = await async_client.delete(f"/api/spots/{test_spot.id}")

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestSpotImages:
    """Tests for POST /api/spots/{spot_id}/images."""

    @pytest.mark.asyncio
    async def test_add_image(self, async_client: AsyncClient, test_spot: Spot, test_owner: User):
        await login(async_client, test_owner)

        response = await async_client.post(
            f"/api/spots/{test_spot.id}/images",
            json={"url": "https://example.com/a.jpg"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["url"] == "https://example.com/a.jpg"
        assert data["preview"] is False

    @pytest.mark.asyncio
    async def test_new_preview_replaces_old_one(
        self,
        async_client: AsyncClient,
        db_session,
        test_spot: Spot,
        test_owner: User
    ):
        await login(async_client, test_owner)

        first = await async_client.post(
            f"/api/spots/{test_spot.id}/images",
            json={"url": "https://example.com/first.jpg", "preview": True}
        )
        second = await async_client.post(
            f"/api/spots/{test_spot.id}/images",
            json={"url": "https://example.com/second.jpg", "preview": "true"}
        )

        assert first.json()["preview"] is True
        assert second.json()["preview"] is True

        result = await db_session.execute(
            select(SpotImage.url).where(SpotImage.spot_id == test_spot.id, SpotImage.preview.is_(True))
        )
        assert result.scalars().all() == ["https://example.com/second.jpg"]

        detail = await async_client.get(f"/api/spots/{test_spot.id}")
        assert detail.json()["previewImage"] == "https://example.com/second.jpg"

    @pytest.mark.asyncio
    async def test_invalid_preview_flag(self, async_client: AsyncClient, test_spot: Spot, test_owner: User):
        await login(async_client, test_owner)

        response = await async_client.post(
            f"/api/spots/{test_spot.id}/images",
            json={"url": "https://example.com/a.jpg", "preview": "maybe"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == {"preview": "Preview must be true or false"}

    @pytest.mark.asyncio
    async def test_non_owner_cannot_add_image(self, async_client: AsyncClient, test_spot: Spot, test_guest: User):
        await login(async_client, test_guest)

        response = await async_client.post(
            f"/api/spots/{test_spot.id}/images",
            json={"url": "https://example.com/a.jpg"}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_missing_spot(self, async_client: AsyncClient, test_owner: User):
        await login(async_client, test_owner)

        response = await async_client.post("/api/spots/9999/images", json={"url": "https://example.com/a.jpg"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
