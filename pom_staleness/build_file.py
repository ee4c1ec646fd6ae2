"""
Build descriptor (pom.xml) parsing.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional, Union

from .errors import DescriptorMalformed, DescriptorNotFound
from .models import ArtifactCoordinate, ArtifactVersion, BuildFileDescriptor, PackagingType
from .time_utils import utc_now


logger = logging.getLogger(__name__)

PROPERTY_REFERENCE = re.compile(r"^\$\{([^${}]+)\}$")
PROPERTY_MARKER = "${"
DEFAULT_PLUGIN_GROUP = "org.apache.maven.plugins"


def _local_name(tag: str) -> str:
    """Strip an XML namespace, ``{ns}dependency`` -> ``dependency``."""
    return tag.rsplit("}", 1)[-1]


def _child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if element is None:
        return None
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _children(element: Optional[ET.Element], name: str) -> List[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local_name(child.tag) == name]


def _text(element: Optional[ET.Element], name: str) -> Optional[str]:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    value = child.text.strip()
    return value or None


def resolve_version(raw: Optional[str], properties: Dict[str, str]) -> Optional[str]:
    """Resolve a declared version string against the property table.

    Literals are returned as-is. A ``${name}`` reference is replaced by the
    property value, one level deep. Anything that does not end up as a
    concrete string (missing property, nested or partial reference) is None.
    """
    if raw is None:
        return None
    if PROPERTY_MARKER not in raw:
        return raw
    match = PROPERTY_REFERENCE.match(raw)
    if not match:
        return None
    value = properties.get(match.group(1))
    if not value or PROPERTY_MARKER in value:
        return None
    return value


class PomBuildFile:
    """The representation of a pom.xml file."""

    def __init__(self, path: Union[str, Path] = "pom.xml") -> None:
        self.path = Path(path)
        self._root: Optional[ET.Element] = None

    def descriptor(self) -> BuildFileDescriptor:
        root = self._load()
        properties = self.properties()
        return BuildFileDescriptor(
            parent=self._parent(root, properties),
            dependencies=tuple(self._dependencies(root, properties)),
            plugins=tuple(self._plugins(root, properties)),
        )

    def parent(self) -> Optional[ArtifactVersion]:
        return self._parent(self._load(), self.properties())

    def dependencies(self) -> List[ArtifactVersion]:
        return self._dependencies(self._load(), self.properties())

    def plugins(self) -> List[ArtifactVersion]:
        return self._plugins(self._load(), self.properties())

    def properties(self) -> Dict[str, str]:
        """The property table used for version indirection.

        Declared ``<properties>`` plus the project/parent coordinates
        exposed under ``project.*`` and ``pom.*``.
        """
        root = self._load()
        parent = _child(root, "parent")
        table: Dict[str, str] = {}
        builtins = {
            "version": _text(root, "version") or _text(parent, "version"),
            "groupId": _text(root, "groupId") or _text(parent, "groupId"),
            "artifactId": _text(root, "artifactId"),
            "parent.version": _text(parent, "version"),
            "parent.groupId": _text(parent, "groupId"),
        }
        for key, value in builtins.items():
            if value is not None:
                table[f"project.{key}"] = value
                table[f"pom.{key}"] = value
        declared = _child(root, "properties")
        if declared is not None:
            for prop in declared:
                table[_local_name(prop.tag)] = (prop.text or "").strip()
        return table

    def _load(self) -> ET.Element:
        if self._root is not None:
            return self._root
        try:
            content = self.path.read_bytes()
        except OSError as e:
            raise DescriptorNotFound(self.path, f"cannot read descriptor: {e}") from e
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise DescriptorMalformed(self.path, f"invalid XML: {e}") from e
        if _local_name(root.tag) != "project":
            raise DescriptorMalformed(
                self.path, f"expected <project> root element, found <{_local_name(root.tag)}>"
            )
        logger.debug("Loaded descriptor %s", self.path)
        self._root = root
        return root

    def _parent(self, root: ET.Element, properties: Dict[str, str]) -> Optional[ArtifactVersion]:
        parent = _child(root, "parent")
        if parent is None:
            return None
        return self._artifact(parent, "parent", properties, PackagingType.POM)

    def _dependencies(self, root: ET.Element, properties: Dict[str, str]) -> List[ArtifactVersion]:
        entries = _children(_child(root, "dependencies"), "dependency")
        return [
            self._artifact(
                entry,
                "dependency",
                properties,
                PackagingType.lookup(_text(entry, "type") or PackagingType.JAR.value),
            )
            for entry in entries
        ]

    def _plugins(self, root: ET.Element, properties: Dict[str, str]) -> List[ArtifactVersion]:
        entries = _children(_child(_child(root, "build"), "plugins"), "plugin")
        return [
            self._artifact(
                entry,
                "plugin",
                properties,
                PackagingType.JAR,
                default_group=DEFAULT_PLUGIN_GROUP,
            )
            for entry in entries
        ]

    def _artifact(
        self,
        entry: ET.Element,
        kind: str,
        properties: Dict[str, str],
        packaging: PackagingType,
        default_group: Optional[str] = None,
    ) -> ArtifactVersion:
        group = _text(entry, "groupId") or default_group
        artifact_id = _text(entry, "artifactId")
        try:
            coordinate = ArtifactCoordinate(group=group, artifact_id=artifact_id)
        except ValueError as e:
            raise DescriptorMalformed(
                self.path, f"{kind} {group or '?'}:{artifact_id or '?'} is incomplete: {e}"
            ) from e

        raw_version = _text(entry, "version")
        version = resolve_version(raw_version, properties)
        if version is None:
            logger.debug(
                "Unresolved version %r for %s %s", raw_version, kind, coordinate.identifier
            )
        if packaging is PackagingType.UNKNOWN:
            logger.debug("Unknown packaging for %s %s", kind, coordinate.identifier)
        return ArtifactVersion(
            coordinate=coordinate,
            version=version,
            packaging=packaging,
            observed_at=utc_now(),
        )


def parse_build_file(path: Union[str, Path]) -> BuildFileDescriptor:
    """Parse a descriptor file into a :class:`BuildFileDescriptor`."""
    return PomBuildFile(path).descriptor()
