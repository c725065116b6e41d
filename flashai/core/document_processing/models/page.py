"""
Page image models.

Dependencies: pydantic
System role: Units of work flowing from rendering into batch analysis
"""

from pydantic import BaseModel, Field


class PageImage(BaseModel):
    """One rendered PDF page."""

    page_number: int = Field(ge=1, description="1-based page number")
    image_data: str = Field(repr=False, description="data:image/png;base64,... URI")


class PageBatch(BaseModel):
    """Contiguous run of pages sent to the vision API in one call."""

    index: int = Field(description="0-based batch position")
    start_page: int
    end_page: int
    images: list[str] = Field(default_factory=list, repr=False)

    @property
    def page_count(self) -> int:
        return len(self.images)

    @property
    def label(self) -> str:
        return f"{self.start_page}-{self.end_page}"
