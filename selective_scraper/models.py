import os
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

# One output row, column name -> scalar
FlatRow = Dict[str, Union[str, int]]

# Tag-specific attribute fields of an ElementRecord
TYPE_SPECIFIC_FIELDS = (
    "href", "title", "target",
    "src", "alt", "width", "height",
    "type", "name", "value", "placeholder",
    "property", "content",
)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-01-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ElementRecord(BaseModel):
    """Normalized record for one matched document node."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    index: int
    tag_name: str
    text: str = ""
    html: Optional[str] = None
    id: str = ""
    class_: str = Field("", alias="class")

    # None means the field does not apply to this tag
    href: Optional[str] = None
    title: Optional[str] = None
    target: Optional[str] = None
    src: Optional[str] = None
    alt: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    value: Optional[str] = None
    placeholder: Optional[str] = None
    property: Optional[str] = None
    content: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[Union[str, int]]]:
        """Plain dict with only the fields that apply to this element's tag."""
        data = {
            "index": self.index,
            "tagName": self.tag_name,
            "text": self.text,
            "html": self.html,
        }
        for field in TYPE_SPECIFIC_FIELDS:
            value = getattr(self, field)
            if value is not None:
                data[field] = value
        data["id"] = self.id
        data["class"] = self.class_
        return data


class SelectorResult(BaseModel):
    """Matches for one selector, or an error placeholder."""
    model_config = ConfigDict(frozen=True)

    selector: str
    count: int = 0
    elements: List[ElementRecord] = Field(default_factory=list)
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_shape(self):
        if self.error is not None:
            if self.count != 0 or self.elements:
                raise ValueError("error results carry no elements")
        elif self.count != len(self.elements):
            raise ValueError("count must equal the number of elements")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None


class PageResult(BaseModel):
    """Complete extraction output for one fetched page."""
    url: str
    timestamp: str = Field(default_factory=utc_timestamp)
    title: str = "No Title"
    # Ordered (key, result) pairs. Keys may repeat, so always iterate positionally.
    selector_results: List[Tuple[str, SelectorResult]] = Field(default_factory=list)

    @property
    def total_elements(self) -> int:
        return sum(result.count for _, result in self.selector_results)

    def to_dict(self) -> dict:
        """Nested dict in the page-object shape (url, timestamp, title, then one entry per key)."""
        data = {"url": self.url, "timestamp": self.timestamp, "title": self.title}
        for key, result in self.selector_results:
            entry = {"selector": result.selector}
            if result.is_error:
                entry["error"] = result.error
            entry["count"] = result.count
            entry["elements"] = [el.to_dict() for el in result.elements]
            data[key] = entry
        return data


class ScraperConfig(BaseModel):
    """Settings handed to the fetch collaborator and batch driver."""
    user_agent: str = DEFAULT_USER_AGENT
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout_ms: int = 15000
    max_redirects: int = 5
    delay_ms: int = 2000

    @field_validator("timeout_ms")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout_ms must be positive")
        return v

    @field_validator("delay_ms", "max_redirects")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @property
    def request_headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent, **self.headers}

    @classmethod
    def from_env(cls, **overrides) -> "ScraperConfig":
        """Build a config from SCRAPER_* environment variables (a .env file is honoured)."""
        load_dotenv()

        values = {}
        env_map = {
            "user_agent": "SCRAPER_USER_AGENT",
            "timeout_ms": "SCRAPER_TIMEOUT_MS",
            "max_redirects": "SCRAPER_MAX_REDIRECTS",
            "delay_ms": "SCRAPER_DELAY_MS",
        }
        for field, env_var in env_map.items():
            value = os.getenv(env_var)
            if value:
                values[field] = value

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
