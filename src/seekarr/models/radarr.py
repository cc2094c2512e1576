"""Radarr-specific models."""

from pydantic import BaseModel, ConfigDict, Field


class MovieFile(BaseModel):
    """The file Radarr holds for a movie."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    quality_cutoff_not_met: bool = Field(default=False, alias="qualityCutoffNotMet")


class Movie(BaseModel):
    """A movie from the Radarr library."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = ""
    year: int = 0
    monitored: bool = True
    has_file: bool = Field(default=False, alias="hasFile")
    movie_file: MovieFile | None = Field(default=None, alias="movieFile")

    @property
    def cutoff_not_met(self) -> bool:
        """Whether the movie has a file whose quality is below the profile cutoff."""
        if not self.has_file or self.movie_file is None:
            return False
        return self.movie_file.quality_cutoff_not_met
