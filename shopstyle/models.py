from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    # Page-side scripts and API consumers speak camelCase
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ButtonStyle(_Record):
    background_color: str
    text_color: str
    border_style: Optional[str] = None
    border_width: str
    border_color: str
    border_radius: str
    text_transform: str
    font_family: str
    font_weight: str
    padding: str


class BoundingRect(_Record):
    width: float
    height: float


class Candidate(ButtonStyle):
    """A visible button read off the page, only kept around while scoring."""

    bounding_rect: BoundingRect
    text_content: str = ""

    def to_button_style(self) -> ButtonStyle:
        return ButtonStyle(**self.model_dump(exclude={"bounding_rect", "text_content"}))


class StyleProfile(_Record):
    palette: list[str]
    background_color: str
    primary_button: ButtonStyle


class ExtractOptions(BaseModel):
    use_product_page: bool = True
    remove_overlays: bool = False


DEFAULT_BUTTON_STYLE = ButtonStyle(
    background_color="#000000",
    text_color="#FFFFFF",
    border_style="none",
    border_width="0",
    border_color="#000000",
    border_radius="0",
    text_transform="none",
    font_family=(
        "system-ui, -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, "
        "Ubuntu, Cantarell, 'Open Sans', 'Helvetica Neue', sans-serif"
    ),
    font_weight="normal",
    padding="0",
)
