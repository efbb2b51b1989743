"""Data models used throughout svmd."""

import base64
import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RawDocument:
    """A source file handed to the preprocessor."""
    text: str
    filename: str


@dataclass(frozen=True)
class ComponentOccurrence:
    """One embedded component tag pulled out of the markdown body."""
    index: int
    tag_name: str
    attributes_text: str
    children_text: str | None
    placeholder: str
    original_span: str

    @property
    def is_paired(self) -> bool:
        return self.children_text is not None

    def markup(self) -> str:
        """Rebuild the tag from its recorded parts."""
        attrs = f" {self.attributes_text}" if self.attributes_text else ""
        if self.children_text is not None:
            return f"<{self.tag_name}{attrs}>{self.children_text}</{self.tag_name}>"
        return f"<{self.tag_name}{attrs} />"


@dataclass
class ExtractedBody:
    """Markdown body with every component swapped for its placeholder."""
    body: str
    occurrences: list[ComponentOccurrence] = field(default_factory=list)


@dataclass
class SourceMap:
    """Version 3 source map."""
    file: str
    sources: list[str]
    sources_content: list[str]
    mappings: str
    names: list[str] = field(default_factory=list)
    version: int = 3

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "file": self.file,
            "sources": self.sources,
            "sourcesContent": self.sources_content,
            "names": self.names,
            "mappings": self.mappings,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_url(self) -> str:
        """Inline data URL, suitable for a sourceMappingURL comment."""
        encoded = base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")
        return f"data:application/json;charset=utf-8;base64,{encoded}"


@dataclass
class OutputDocument:
    """Final artifact returned to the host build tool."""
    code: str
    source_map: SourceMap
    metadata: dict[str, str] = field(default_factory=dict)
