"""Component coordinates and the Maven coordinate-string convention."""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from constants import Constants

MAVEN = "maven"


class ParseError(ValueError):
    """Raised when a dependency-graph dump holds an unsupported coordinate."""

    def __init__(self, coordinate: str):
        super().__init__(
            f"Unsupported coordinate '{coordinate}': expected 4, 5 or 6 "
            f"'{Constants.COORDINATE_SEPARATOR}'-delimited parts"
        )
        self.coordinate = coordinate


class ComponentIdentifier:
    """Ecosystem-tagged, ordered set of coordinate fields.

    Two identifiers are equal only when the format matches and every field
    present in either one holds the same value in the other. A field missing
    on one side is a mismatch, not a wildcard.
    """

    __slots__ = ("format", "_coordinates")

    def __init__(self, fmt: str, coordinates: Mapping[str, str]):
        self.format = fmt
        self._coordinates: Dict[str, str] = dict(coordinates)

    @classmethod
    def maven(
        cls,
        group_id: str,
        artifact_id: str,
        extension: str,
        classifier: str,
        version: str,
    ) -> "ComponentIdentifier":
        """Create a Maven identifier with the canonical field order."""
        return cls(
            MAVEN,
            {
                "groupId": group_id,
                "artifactId": artifact_id,
                "version": version,
                "classifier": classifier,
                "extension": extension,
            },
        )

    @property
    def coordinates(self) -> Dict[str, str]:
        """A copy of the coordinate fields, in insertion order."""
        return dict(self._coordinates)

    def get(self, field: str) -> Optional[str]:
        return self._coordinates.get(field)

    @property
    def name(self) -> Optional[str]:
        return self._coordinates.get("artifactId")

    @property
    def version(self) -> str:
        return self._coordinates.get("version") or Constants.NOT_AVAILABLE

    @property
    def extension(self) -> Optional[str]:
        return self._coordinates.get("extension")

    @property
    def identity(self) -> str:
        """Stable string key for memoization: format plus every field value."""
        values = Constants.COORDINATE_SEPARATOR.join(self._coordinates.values())
        return f"{self.format}{Constants.COORDINATE_SEPARATOR}{values}"

    def to_lookup_dict(self) -> Dict[str, Any]:
        """Flat form used by the governance API: exactly the held fields."""
        return {"format": self.format, "coordinates": dict(self._coordinates)}

    def to_json(self) -> str:
        """JSON form of to_lookup_dict(), suitable for a query parameter."""
        return json.dumps(self.to_lookup_dict(), separators=(",", ":"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComponentIdentifier):
            return NotImplemented
        if self is other:
            return True
        # dict equality checks both key sets and every value
        return self.format == other.format and self._coordinates == other._coordinates

    def __hash__(self) -> int:
        return hash((self.format, frozenset(self._coordinates.items())))

    def __repr__(self) -> str:
        return f"ComponentIdentifier({self.format!r}, {self._coordinates!r})"

    def __str__(self) -> str:
        group = self._coordinates.get("groupId", "")
        return f"{group}:{self.name}:{self.version}"


def parse_coordinates(parts: Sequence[str]) -> Tuple[ComponentIdentifier, Optional[str]]:
    """Build an identifier (and scope) from a split Maven coordinate string.

    The dependency plugin prints one of three shapes:

    * ``group:artifact:extension:version`` (module roots, no scope)
    * ``group:artifact:extension:version:scope``
    * ``group:artifact:extension:classifier:version:scope``

    Args:
        parts: The coordinate string split on ':'.

    Returns:
        Tuple of (identifier, scope or None).

    Raises:
        ParseError: If the part count is not 4, 5 or 6.
    """
    count = len(parts)
    if count == 4:
        group, artifact, extension, version = parts
        return ComponentIdentifier.maven(group, artifact, extension, "", version), None
    if count == 5:
        group, artifact, extension, version, scope = parts
        return ComponentIdentifier.maven(group, artifact, extension, "", version), scope
    if count == 6:
        group, artifact, extension, classifier, version, scope = parts
        return ComponentIdentifier.maven(group, artifact, extension, classifier, version), scope
    raise ParseError(Constants.COORDINATE_SEPARATOR.join(parts))
