"""Video Schemas — ffmpeg pipeline requests/results."""

from pydantic import BaseModel, Field


class PhotoWallRequest(BaseModel):
    image_urls: list[str] = Field(min_length=2, max_length=200)


class VideoResponse(BaseModel):
    key: str
    url: str
    scrolled: bool | None = None
