"""
Overpass API source adapter.

Fetches administrative boundary relations from OpenStreetMap via the
Overpass API (``out geom`` so member ways carry their coordinates inline)
and converts them into BoundaryRelation objects for the assembly core.
Tag inspection happens here and nowhere else.

Example:
    from src.osm import OverpassClient, parse_relations

    client = OverpassClient()
    data = client.fetch_relations("Bremen", admin_level="9")
    relations = list(parse_relations(data, admin_level="9"))
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, cast

import requests

from config.logging_config import get_logger
from config.settings import settings
from src.boundaries.models import BoundaryRelation, Role, Segment

logger = get_logger(__name__)

QUERY_TEMPLATE = """
[out:json][timeout:{timeout}];
area["name"="{area}"]->.a;
relation["boundary"="administrative"]["admin_level"="{admin_level}"](area.a);
out geom;
"""


def escape_ql(value: str) -> str:
    """Escape a value for use inside a double-quoted Overpass QL string."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


class SourceError(Exception):
    """Boundary source data could not be fetched or decoded."""


class OverpassClient:
    """
    Minimal Overpass API client.

    Example:
        >>> client = OverpassClient(api_timeout=30)
        >>> data = client.fetch_relations("Bremen")
        >>> len(data["elements"])
    """

    def __init__(self, url: Optional[str] = None, api_timeout: Optional[int] = None):
        """
        Initialize the client.

        Args:
            url: Overpass interpreter endpoint
            api_timeout: Timeout for API requests in seconds
        """
        self.url = url or settings.overpass.url
        self.api_timeout = api_timeout or settings.overpass.timeout

        logger.debug(f"Initialized OverpassClient for {self.url} with timeout={self.api_timeout}s")

    def build_query(self, area_name: str, admin_level: str) -> str:
        return QUERY_TEMPLATE.format(
            timeout=self.api_timeout,
            area=escape_ql(area_name),
            admin_level=escape_ql(admin_level),
        )

    def fetch_relations(
        self, area_name: str, admin_level: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch boundary relations inside a named area.

        Args:
            area_name: Value of the ``name`` tag of the enclosing area
            admin_level: OSM admin_level to select (defaults to settings)

        Returns:
            Decoded Overpass JSON document

        Raises:
            SourceError: On HTTP errors, timeouts or undecodable responses
        """
        level = admin_level or settings.boundaries.admin_level
        logger.info(f"Fetching admin_level={level} boundaries in '{area_name}' from Overpass API...")

        try:
            response = requests.post(
                self.url,
                data={"data": self.build_query(area_name, level)},
                timeout=self.api_timeout,
            )
        except requests.Timeout as e:
            logger.error(f"API request timed out after {self.api_timeout}s")
            raise SourceError(f"Overpass request timed out after {self.api_timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"API request failed: {e}")
            raise SourceError(f"Overpass request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"API returned HTTP {response.status_code}")
            raise SourceError(f"Overpass returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse API response: {e}")
            raise SourceError(f"Invalid JSON from Overpass: {e}") from e

        logger.info(f"Retrieved {len(data.get('elements', []))} elements from API")
        return cast(Dict[str, Any], data)


def load_overpass_json(path: Path) -> Dict[str, Any]:
    """
    Load a saved Overpass JSON response.

    Raises:
        FileNotFoundError: If the file doesn't exist
        SourceError: If it is not valid UTF-8 JSON
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    logger.info(f"Loading relations from {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return cast(Dict[str, Any], json.load(f))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SourceError(f"Failed to parse {path}: {e}") from e


def save_overpass_json(data: Dict[str, Any], path: Path) -> Path:
    """Save a raw Overpass response so later runs can work offline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    logger.info(f"Saved raw Overpass response to: {path}")
    return path


def _segments_from_relation(relation: Dict[str, Any]) -> List[Segment]:
    """
    Extract role-tagged segments from an Overpass relation.

    Only way members with inline geometry are used; ways with missing
    nodes are left out and will surface later as a malformed boundary.
    """
    segments: List[Segment] = []
    outer_roles = settings.boundaries.outer_roles
    inner_roles = settings.boundaries.inner_roles

    for member in relation.get("members", []):
        if member.get("type") != "way" or not member.get("geometry"):
            continue

        points = member["geometry"]
        if any(p is None for p in points):
            logger.debug(f"Way {member.get('ref')} has unresolved nodes, skipping")
            continue

        coords = [(p["lon"], p["lat"]) for p in points]
        if len(coords) < 2:
            continue

        role = Role.from_osm(member.get("role"), outer_roles, inner_roles)
        segments.append(Segment.from_coords(coords, role=role, way_id=member.get("ref")))

    return segments


def is_admin_boundary(element: Dict[str, Any], admin_level: str) -> bool:
    """True for relations tagged boundary=administrative at ``admin_level``."""
    if element.get("type") != "relation":
        return False
    tags = element.get("tags", {})
    return tags.get("boundary") == "administrative" and tags.get("admin_level") == admin_level


def parse_relations(
    data: Dict[str, Any], admin_level: Optional[str] = None
) -> Iterator[BoundaryRelation]:
    """
    Yield resolved boundary relations from an Overpass document.

    Relations without a ``name`` tag are skipped.

    Args:
        data: Overpass JSON document
        admin_level: admin_level to keep (defaults to settings)
    """
    level = admin_level or settings.boundaries.admin_level

    for element in data.get("elements", []):
        if not is_admin_boundary(element, level):
            continue

        name = element.get("tags", {}).get("name")
        if not name:
            logger.debug(f"Relation {element.get('id')} has no name, skipping")
            continue

        yield BoundaryRelation(
            relation_id=element["id"],
            name=name,
            segments=_segments_from_relation(element),
            admin_level=level,
        )
