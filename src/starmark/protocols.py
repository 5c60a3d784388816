"""
Core data structures and collaborator contracts for Starmark.

Architecture Overview:
- A renderer turns a URL into a RenderedPage of raw image and node descriptors
- The extractor deduplicates raw descriptors into ExtractedElement records
- The classifier derives a Category for each record
- Anchors pin interactive records and are re-located on every new extraction
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Protocol, Sequence, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# ============================================================================
# Enums
# ============================================================================


class Category(Enum):
    """Semantic categories assigned by the classifier."""

    IMAGE = "image"
    NAVIGATION = "navigation"
    BUTTON = "button"
    FORM = "form"
    DATA = "data"
    OTHER = "other"


# ============================================================================
# Extracted elements
# ============================================================================


class ImageElement(BaseModel):
    """An image found on the page."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Literal["IMAGE"] = "IMAGE"
    url: str
    format: str = "unknown"


class InteractiveElement(BaseModel):
    """A clickable or focusable control found on the page."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Literal["INTERACTIVE"] = "INTERACTIVE"
    tag: str = ""
    text: str = ""
    id: str = ""
    class_name: str = Field(default="", alias="className")
    title: str = ""
    href: str = ""
    onclick: str = ""
    value: str = ""
    name: str = ""
    placeholder: str = ""
    attributes: Dict[str, str] = Field(default_factory=dict, alias="allAttributes")

    def data_attributes(self) -> Dict[str, str]:
        return {key: value for key, value in self.attributes.items() if key.startswith("data-")}


ExtractedElement = Annotated[Union[ImageElement, InteractiveElement], Field(discriminator="type")]

ELEMENT_LIST_ADAPTER: TypeAdapter[List[ExtractedElement]] = TypeAdapter(List[ExtractedElement])


def dump_elements(elements: Sequence[Union[ImageElement, InteractiveElement]]) -> List[Dict[str, Any]]:
    """Serialize elements to the JSON wire shape (camelCase keys)."""
    return [element.model_dump(by_alias=True) for element in elements]


def load_elements(payload: Any) -> List[Union[ImageElement, InteractiveElement]]:
    """Parse a list of serialized elements, dispatching on their ``type`` tag."""
    return ELEMENT_LIST_ADAPTER.validate_python(payload)


# ============================================================================
# Raw page descriptors (renderer output)
# ============================================================================


@dataclass(frozen=True)
class RawImage:
    """An image node as seen by the renderer.

    ``src`` is the resolved source, ``data_src`` the lazy-load attribute.
    """

    src: Optional[str] = None
    data_src: Optional[str] = None


@dataclass(frozen=True)
class RawNode:
    """One element of the rendered tree, in document order."""

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    id: str = ""
    class_name: str = ""
    value: str = ""
    name: str = ""
    placeholder: str = ""
    inline_cursor: str = ""
    computed_cursor: str = ""

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_attribute(self, name: str) -> str:
        return self.attributes.get(name) or ""


@dataclass(frozen=True)
class RenderedPage:
    """Everything the extractor consumes from one rendered page."""

    url: str
    images: List[RawImage] = field(default_factory=list)
    nodes: List[RawNode] = field(default_factory=list)

    @classmethod
    def from_payload(cls, url: str, payload: Dict[str, Any]) -> RenderedPage:
        """Build a page from the dictionary returned by the in-page collection script."""
        images = [
            RawImage(src=item.get("src") or None, data_src=item.get("dataSrc") or None)
            for item in payload.get("images") or []
        ]
        nodes = [
            RawNode(
                tag=(item.get("tag") or "").lower(),
                attributes={str(k): str(v) for k, v in (item.get("attributes") or {}).items()},
                text=item.get("text") or "",
                id=item.get("id") or "",
                class_name=item.get("className") or "",
                value=item.get("value") or "",
                name=item.get("name") or "",
                placeholder=item.get("placeholder") or "",
                inline_cursor=item.get("inlineCursor") or "",
                computed_cursor=item.get("computedCursor") or "",
            )
            for item in payload.get("nodes") or []
        ]
        return cls(url=url, images=images, nodes=nodes)


# ============================================================================
# Extraction result
# ============================================================================


@dataclass(frozen=True)
class ExtractionCounts:
    total: int
    images: int
    interactive: int


@dataclass(frozen=True)
class ExtractionResult:
    """Deduplicated elements of one page, images first, in document order."""

    url: str
    elements: List[Union[ImageElement, InteractiveElement]]

    @property
    def images(self) -> List[ImageElement]:
        return [e for e in self.elements if isinstance(e, ImageElement)]

    @property
    def interactive(self) -> List[InteractiveElement]:
        return [e for e in self.elements if isinstance(e, InteractiveElement)]

    @property
    def counts(self) -> ExtractionCounts:
        images = len(self.images)
        return ExtractionCounts(total=len(self.elements), images=images, interactive=len(self.elements) - images)

    def to_dict(self) -> Dict[str, Any]:
        counts = self.counts
        return {
            "url": self.url,
            "results": dump_elements(self.elements),
            "counts": {"total": counts.total, "images": counts.images, "interactive": counts.interactive},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExtractionResult:
        return cls(url=data.get("url") or "", elements=load_elements(data.get("results") or []))


# ============================================================================
# Collaborator protocols
# ============================================================================


@runtime_checkable
class Renderer(Protocol):
    """Renders a URL and returns the raw descriptors of the resulting page."""

    name: str

    async def render(
        self,
        url: str,
        *,
        timeout_ms: int,
        settle_ms: int,
        blocked_resource_types: Sequence[str],
    ) -> RenderedPage:
        """Render ``url``.

        Raises:
            RenderFailed: on navigation timeout or browser failure
        """
        ...


@runtime_checkable
class AnchorStorage(Protocol):
    """Persistence capability for the list of serialized anchor records."""

    async def load(self) -> List[Dict[str, Any]]: ...

    async def save(self, records: List[Dict[str, Any]]) -> None: ...
