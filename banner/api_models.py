"""
Banner API models for FastAPI endpoints.
"""

from typing import Dict, List, Optional

from PIL import Image, ImageColor
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import MissingInputError
from .models import BannerRequest
from .presets import (
    DEFAULT_BG_COLOR,
    DEFAULT_MAIN_TEXT,
    DEFAULT_OPTION_COLOR,
    DEFAULT_OPTIONS,
    DEFAULT_SCALE_FACTOR,
    DEFAULT_STROKE_COLOR,
    DEFAULT_STROKE_WIDTH,
    DEFAULT_TEXT_COLOR,
    MAX_DIMENSION,
    MAX_SCALE_FACTOR,
    get_dimensions,
)


class BannerQuery(BaseModel):
    """Query parameters of GET /banner (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    csv_url: Optional[str] = Field(None, alias="csvUrl")
    preset: Optional[str] = None  # ig_portrait, ig_story, ... or "WxH"
    width: Optional[int] = Field(None, gt=0, le=MAX_DIMENSION)
    height: Optional[int] = Field(None, gt=0, le=MAX_DIMENSION)
    bg_color: str = Field(DEFAULT_BG_COLOR, alias="bgColor")
    text_color: str = Field(DEFAULT_TEXT_COLOR, alias="textColor")
    option_color: str = Field(DEFAULT_OPTION_COLOR, alias="optionColor")
    stroke_style: str = Field(DEFAULT_STROKE_COLOR, alias="strokeStyle")
    line_width: int = Field(DEFAULT_STROKE_WIDTH, alias="lineWidth", ge=0)
    scale_factor: float = Field(DEFAULT_SCALE_FACTOR, alias="scaleFactor", gt=0, le=MAX_SCALE_FACTOR)
    main_text: Optional[str] = Field(None, alias="mainText")
    option1: Optional[str] = None
    option2: Optional[str] = None
    option3: Optional[str] = None
    bg_url: Optional[str] = Field(None, alias="bgUrl")
    img_url: Optional[str] = Field(None, alias="imgUrl")

    @field_validator("bg_color", "text_color", "option_color", "stroke_style")
    @classmethod
    def check_color(cls, value: str) -> str:
        # Raises ValueError for anything Pillow can't parse
        ImageColor.getrgb(value)
        return value

    def require_csv_url(self) -> str:
        if not self.csv_url:
            raise MissingInputError("CSV URL is required")
        return self.csv_url

    def resolve_text(self, row: Dict[str, str]) -> str:
        """Headline: explicit query value, then CSV "text", then the default."""
        if self.main_text:
            return self.main_text
        return row.get("text") or DEFAULT_MAIN_TEXT

    def resolve_options(self, row: Dict[str, str]) -> List[str]:
        """Options 1..3: explicit query value, then CSV column, then positional default."""
        explicit = [self.option1, self.option2, self.option3]
        return [
            explicit[i] or row.get(f"option{i + 1}") or DEFAULT_OPTIONS[i]
            for i in range(len(DEFAULT_OPTIONS))
        ]

    def to_request(
        self,
        row: Dict[str, str],
        background_image: Optional[Image.Image] = None,
        overlay_image: Optional[Image.Image] = None
    ) -> BannerRequest:
        """Apply every default once and build the BannerRequest."""
        width, height = get_dimensions(self.preset, self.width, self.height)
        return BannerRequest(
            width=width,
            height=height,
            background_color=self.bg_color,
            text_color=self.text_color,
            option_color=self.option_color,
            stroke_color=self.stroke_style,
            stroke_width=self.line_width,
            scale_factor=self.scale_factor,
            main_text=self.resolve_text(row),
            options=self.resolve_options(row),
            background_image=background_image,
            overlay_image=overlay_image,
        )


class BannerOptionsResponse(BaseModel):
    """Response with available banner options."""
    presets: List[dict]
    defaults: dict
