"""Sonarr-specific models."""

from pydantic import BaseModel, ConfigDict, Field


class SeriesRef(BaseModel):
    """The series embedded in a wanted episode when includeSeries is set."""

    id: int = 0
    title: str = ""


class WantedEpisode(BaseModel):
    """An episode from Sonarr's wanted/missing or wanted/cutoff lists."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = ""
    series: SeriesRef | None = None
    season_number: int = Field(default=0, alias="seasonNumber")
    episode_number: int = Field(default=0, alias="episodeNumber")

    @property
    def display_title(self) -> str:
        """Series title plus SxxEyy, e.g. "Show - S01E02"."""
        series_title = self.series.title if self.series and self.series.title else "Unknown"
        return f"{series_title} - S{self.season_number:02d}E{self.episode_number:02d}"


class WantedPage(BaseModel):
    """One page of a paginated wanted list."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = 1
    page_size: int = Field(default=0, alias="pageSize")
    total_records: int = Field(default=0, alias="totalRecords")
    records: list[WantedEpisode] = Field(default_factory=list)
