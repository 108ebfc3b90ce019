from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .config import DEFAULT_NAVIGATION_TIMEOUT_MS

# A row of a reconstructed table: header -> cell text (None when the cell is missing or blank)
TableRow = Dict[str, Optional[str]]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WaitUntil(str, Enum):
    DOM_READY = "domcontentloaded"
    LOADED = "load"


class Viewport(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class ScrapeOptions(CamelModel):
    timeout: int = Field(default=DEFAULT_NAVIGATION_TIMEOUT_MS, gt=0)
    wait_until: WaitUntil = WaitUntil.DOM_READY
    user_agent: Optional[str] = None
    viewport: Optional[Viewport] = None
    retries: int = Field(default=0, ge=0)
    full_page: bool = False

    @field_validator("user_agent")
    @classmethod
    def blank_user_agent(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class _RequestBase(CamelModel):
    url: str = ""
    options: ScrapeOptions = Field(default_factory=ScrapeOptions)

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("options", mode="before")
    @classmethod
    def default_options(cls, value: Any) -> Any:
        return {} if value is None else value


class ScrapeRequest(_RequestBase):
    selector: Optional[str] = None
    selectors: Optional[Union[str, List[str]]] = None

    def selector_list(self) -> List[str]:
        """Requested selectors in order, blanks dropped and duplicates kept.

        ``selectors`` wins over ``selector`` unless nothing usable is left in it.
        """
        for raw in (self.selectors, self.selector):
            if raw is None:
                continue
            if isinstance(raw, str):
                raw = [raw]
            cleaned = [s.strip() for s in raw if s and s.strip()]
            if cleaned:
                return cleaned
        return []


class TableRequest(_RequestBase):
    table_selector: Optional[str] = None


class ScreenshotRequest(_RequestBase):
    pass


class ExportRequest(BaseModel):
    data: Any = None
    filename: Optional[str] = None


class ElementRecord(BaseModel):
    text: Optional[str] = None
    attributes: Optional[Dict[str, str]] = None


# Selector -> matched elements, in order of first request
ExtractionResult = Dict[str, List[ElementRecord]]


class ScrapeStats(CamelModel):
    total_selectors: int
    total_elements: int
    execution_time: int


class TableStats(CamelModel):
    total_rows: int
    execution_time: int


class TimingStats(CamelModel):
    execution_time: int


class ScrapeResponse(CamelModel):
    success: bool = True
    url: str
    selectors: List[str]
    data: ExtractionResult
    stats: ScrapeStats


class TableResponse(CamelModel):
    success: bool = True
    url: str
    table_selector: str
    data: List[TableRow]
    stats: TableStats


class ScreenshotResponse(CamelModel):
    success: bool = True
    url: str
    screenshot: str
    stats: TimingStats
