"""Relationship parts (.rels) of an Open XML package."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from xml.sax.saxutils import quoteattr

PACKAGE_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/relationships"
DOCUMENT_SCHEMA = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_SCHEMA = "http://schemas.openxmlformats.org/package/2006/relationships"


@dataclass(frozen=True)
class Relationship:
    """One relationship entry: its id, full type URI, target and target mode."""

    id: str
    type: str
    target: str
    target_mode: str = ""


class Relationships:
    """An ordered collection of relationships with ids rId1, rId2, ..."""

    def __init__(self) -> None:
        self._items: list[Relationship] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def _of_type(self, full_type: str) -> list[Relationship]:
        return [item for item in self._items if item.type == full_type]

    def _add(self, full_type: str, target: str, target_mode: str = "") -> Relationship:
        relationship = Relationship(f"rId{len(self._items) + 1}", full_type, target, target_mode)
        self._items.append(relationship)
        return relationship

    def document_relationships(self, relative_type: str) -> list[Relationship]:
        return self._of_type(DOCUMENT_SCHEMA + relative_type)

    def package_relationships(self, relative_type: str) -> list[Relationship]:
        return self._of_type(PACKAGE_SCHEMA + relative_type)

    def worksheet_relationships(self, relative_type: str) -> list[Relationship]:
        return self._of_type(DOCUMENT_SCHEMA + relative_type)

    def add_document_relationship(self, relative_type: str, target: str) -> Relationship:
        return self._add(DOCUMENT_SCHEMA + relative_type, target)

    def add_package_relationship(self, relative_type: str, target: str) -> Relationship:
        return self._add(PACKAGE_SCHEMA + relative_type, target)

    def add_worksheet_relationship(
        self, relative_type: str, target: str, target_mode: str = ""
    ) -> Relationship:
        return self._add(DOCUMENT_SCHEMA + relative_type, target, target_mode)

    def get_by_id(self, rel_id: str) -> Relationship | None:
        """Return the relationship with this id, or None when there is none."""
        return next((item for item in self._items if item.id == rel_id), None)

    def to_xml(self) -> bytes:
        """Serialise the collection as a .rels document."""
        lines = [
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>',
            f"<Relationships xmlns={quoteattr(PACKAGE_NAMESPACE)}>",
        ]
        for item in self._items:
            mode = f" TargetMode={quoteattr(item.target_mode)}" if item.target_mode else ""
            lines.append(
                f"<Relationship Id={quoteattr(item.id)} Type={quoteattr(item.type)}"
                f" Target={quoteattr(item.target)}{mode}/>"
            )
        lines.append("</Relationships>")
        return "".join(lines).encode("utf-8")

    def load_xml(self, data: bytes | str) -> None:
        """Append the relationships read from a .rels document.

        Raises ValueError when the data is not well-formed XML.
        """
        try:
            root = ET.fromstring(data)
        except ET.ParseError as exc:
            raise ValueError(f"invalid relationships document: {exc}") from exc
        for element in root.iter():
            if element.tag.rsplit("}", 1)[-1] != "Relationship":
                continue
            self._items.append(
                Relationship(
                    element.get("Id", ""),
                    element.get("Type", ""),
                    element.get("Target", ""),
                    element.get("TargetMode", ""),
                )
            )

    def clear(self) -> None:
        self._items.clear()