"""Radarr API client."""

from seekarr.clients.base import BaseArrClient
from seekarr.models.radarr import Movie


class RadarrClient(BaseArrClient):
    """Client for interacting with the Radarr API.

    Example:
        async with RadarrClient("http://localhost:7878", "api-key") as client:
            movies = await client.get_all_movies()
            await client.search_movies([1, 2, 3])
    """

    async def get_all_movies(self) -> list[Movie]:
        """Fetch all movies in the library.

        Returns:
            List of Movie models
        """
        data = await self._get("/api/v3/movie")
        return [Movie.model_validate(item) for item in data]

    async def search_movies(self, movie_ids: list[int]) -> None:
        """Queue a MoviesSearch command for the given movies.

        Args:
            movie_ids: Radarr movie IDs to search for
        """
        await self._post(
            "/api/v3/command",
            json={"name": "MoviesSearch", "movieIds": list(movie_ids)},
        )
