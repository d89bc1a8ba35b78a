"""
Tests for the movie API.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.models import Category, Movie


@pytest.fixture
async def catalog(test_db: AsyncSession, test_category: Category) -> list[Movie]:
    """Fifteen published movies, every third one featured, plus one draft."""
    movies = [
        Movie(
            title=f"Movie {i:02d}",
            slug=f"movie-{i:02d}",
            synopsis="A heist in space" if i % 5 == 0 else "A quiet drama",
            video_url=f"https://cdn.example.com/movie-{i:02d}.m3u8",
            is_published=True,
            featured=i % 3 == 0,
            categories=[test_category] if i % 2 == 0 else [],
        )
        for i in range(1, 16)
    ]
    movies.append(Movie(title="Secret Draft", slug="secret-draft", video_url="https://cdn.example.com/d.m3u8"))
    test_db.add_all(movies)
    await test_db.commit()
    return movies


class TestListMovies:
    async def test_default_pagination(self, client: AsyncClient, catalog):
        response = await client.get("/api/movies")

        assert response.status_code == 200
        data = response.json()
        assert len(data["movies"]) == 12
        assert data["pagination"] == {"page": 1, "limit": 12, "total": 15, "pages": 2}

    async def test_second_page(self, client: AsyncClient, catalog):
        data = (await client.get("/api/movies", params={"page": 2})).json()
        assert len(data["movies"]) == 3

    async def test_public_listing_hides_drafts(self, client: AsyncClient, catalog):
        data = (await client.get("/api/movies", params={"published": "false", "limit": 100})).json()

        slugs = {m["slug"] for m in data["movies"]}
        assert "secret-draft" not in slugs
        assert data["pagination"]["total"] == 15

    async def test_admin_can_list_drafts(self, client: AsyncClient, catalog, admin_auth_headers):
        response = await client.get("/api/movies", params={"published": "false"}, headers=admin_auth_headers)

        assert [m["slug"] for m in response.json()["movies"]] == ["secret-draft"]

    async def test_search_matches_title_and_synopsis(self, client: AsyncClient, catalog):
        data = (await client.get("/api/movies", params={"search": "HEIST"})).json()
        assert sorted(m["slug"] for m in data["movies"]) == ["movie-05", "movie-10", "movie-15"]

        data = (await client.get("/api/movies", params={"search": "movie 07"})).json()
        assert [m["slug"] for m in data["movies"]] == ["movie-07"]

    async def test_filter_by_category_and_featured(self, client: AsyncClient, catalog):
        data = (await client.get("/api/movies", params={"category": "science-fiction", "featured": "true"})).json()

        assert sorted(m["slug"] for m in data["movies"]) == ["movie-06", "movie-12"]
        assert data["movies"][0]["categories"][0]["slug"] == "science-fiction"

    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
    async def test_invalid_paging(self, client: AsyncClient, params):
        response = await client.get("/api/movies", params=params)
        assert response.status_code == 422
        assert response.json()["error"]["error_code"] == "VALIDATION_FAILED"


class TestGetMovie:
    async def test_get_published(self, client: AsyncClient, published_movie: Movie):
        response = await client.get("/api/movies/quantum-paradox")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Quantum Paradox"
        assert data["view_count"] == 15420

    async def test_draft_hidden_from_public(self, client: AsyncClient, draft_movie: Movie):
        response = await client.get("/api/movies/directors-cut")
        assert response.status_code == 404

    async def test_draft_visible_to_admin(self, client: AsyncClient, draft_movie: Movie, admin_auth_headers):
        response = await client.get("/api/movies/directors-cut", headers=admin_auth_headers)
        assert response.status_code == 200

    async def test_unknown(self, client: AsyncClient):
        response = await client.get("/api/movies/ghost-movie")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Movie with slug 'ghost-movie' not found"


class TestCreateMovie:
    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.post("/api/movies", json={"title": "X", "video_url": "https://x"})
        assert response.status_code == 401

    async def test_requires_admin_role(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/movies", json={"title": "X", "video_url": "https://x"}, headers=auth_headers)
        assert response.status_code == 403

    async def test_create_generates_slug(self, client: AsyncClient, admin_auth_headers, test_category: Category):
        payload = {
            "title": "The Grand Heist: Part II",
            "video_url": "https://cdn.example.com/heist.m3u8",
            "release_year": 2023,
            "is_published": True,
            "category_ids": [test_category.id],
        }
        response = await client.post("/api/movies", json=payload, headers=admin_auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "the-grand-heist-part-ii"
        assert data["view_count"] == 0
        assert data["featured"] is False
        assert [c["slug"] for c in data["categories"]] == ["science-fiction"]

    async def test_create_with_admin_cookie(self, client: AsyncClient, admin_cookie_headers):
        payload = {"title": "Cookie Movie", "video_url": "https://cdn.example.com/c.m3u8"}
        response = await client.post("/api/movies", json=payload, headers=admin_cookie_headers)
        assert response.status_code == 201

    async def test_duplicate_slug_conflicts(self, client: AsyncClient, admin_auth_headers, published_movie: Movie):
        payload = {"title": "Quantum Paradox", "video_url": "https://cdn.example.com/q2.m3u8"}
        response = await client.post("/api/movies", json=payload, headers=admin_auth_headers)

        assert response.status_code == 409
        assert response.json()["error"]["error_code"] == "VALIDATION_DUPLICATE_RESOURCE"

    async def test_missing_video_url(self, client: AsyncClient, admin_auth_headers):
        response = await client.post("/api/movies", json={"title": "No Video"}, headers=admin_auth_headers)
        assert response.status_code == 422

    async def test_unknown_category(self, client: AsyncClient, admin_auth_headers, setup_test_database):
        payload = {"title": "Lost", "video_url": "https://x", "category_ids": [999]}
        response = await client.post("/api/movies", json=payload, headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()["error"]["details"]["missing"] == [999]


class TestUpdateMovie:
    async def test_partial_update(self, client: AsyncClient, admin_auth_headers, published_movie: Movie):
        response = await client.put(
            "/api/movies/quantum-paradox",
            json={"featured": True, "synopsis": "Updated", "title": None},
            headers=admin_auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["featured"] is True
        assert data["synopsis"] == "Updated"
        assert data["title"] == "Quantum Paradox"
        assert data["view_count"] == 15420

    async def test_rename_slug(self, client: AsyncClient, admin_auth_headers, published_movie: Movie):
        response = await client.put(
            "/api/movies/quantum-paradox", json={"new_slug": "quantum-paradox-2024"}, headers=admin_auth_headers
        )

        assert response.json()["slug"] == "quantum-paradox-2024"
        assert (await client.get("/api/movies/quantum-paradox")).status_code == 404

    async def test_rename_to_taken_slug(
        self, client: AsyncClient, admin_auth_headers, published_movie: Movie, draft_movie: Movie
    ):
        response = await client.put(
            "/api/movies/quantum-paradox", json={"new_slug": "directors-cut"}, headers=admin_auth_headers
        )
        assert response.status_code == 409

    async def test_rename_to_punctuation_only(self, client: AsyncClient, admin_auth_headers, published_movie: Movie):
        response = await client.put(
            "/api/movies/quantum-paradox", json={"new_slug": "!!!"}, headers=admin_auth_headers
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["error_code"] == "VALIDATION_FAILED"
        assert error["details"]["field"] == "new_slug"
        assert (await client.get("/api/movies/quantum-paradox")).status_code == 200

    async def test_replace_categories(self, client: AsyncClient, admin_auth_headers, published_movie: Movie):
        response = await client.put(
            "/api/movies/quantum-paradox", json={"category_ids": []}, headers=admin_auth_headers
        )
        assert response.json()["categories"] == []

    async def test_update_unknown(self, client: AsyncClient, admin_auth_headers):
        response = await client.put("/api/movies/ghost-movie", json={"featured": True}, headers=admin_auth_headers)
        assert response.status_code == 404


class TestDeleteMovie:
    async def test_delete(self, client: AsyncClient, admin_auth_headers, published_movie: Movie):
        response = await client.delete("/api/movies/quantum-paradox", headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert (await client.get("/api/movies/quantum-paradox")).status_code == 404

    async def test_delete_requires_admin(self, client: AsyncClient, auth_headers, published_movie: Movie):
        response = await client.delete("/api/movies/quantum-paradox", headers=auth_headers)
        assert response.status_code == 403
