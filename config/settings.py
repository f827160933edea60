"""Settings and configuration for administrative boundary extraction."""

from pathlib import Path
from typing import Tuple


class OverpassSettings:
    """Overpass API settings."""

    url: str = "https://overpass-api.de/api/interpreter"
    timeout: int = 60
    default_area: str = "Bremen"


class BoundarySettings:
    """Boundary filtering and output geometry settings."""

    admin_level: str = "9"
    # Roles treated as outer rings; OSM mappers leave the role empty for outer ways
    outer_roles: Tuple[str, ...] = ("outer", "")
    inner_roles: Tuple[str, ...] = ("inner",)
    # "ccw" = RFC 7946 (exterior counter-clockwise), "cw" = exterior clockwise
    exterior_winding: str = "ccw"
    crs_geographic: str = "EPSG:4326"


class IndexSettings:
    """Spatial index settings."""

    node_capacity: int = 10


class Settings:
    """Main settings container."""

    def __init__(self):
        self.project_root = Path(__file__).parent.parent
        self.data_dir = self.project_root / "data"
        self.raw_dir = self.data_dir / "raw"

        self.output_dir = self.project_root / "output"
        self.output_path = self.output_dir / "boundaries.geojson"

        self.overpass = OverpassSettings()
        self.boundaries = BoundarySettings()
        self.index = IndexSettings()

    def raw_response_path(self, area_name: str, admin_level: str) -> Path:
        """Default location for a saved Overpass response."""
        slug = "".join(c if c.isalnum() else "_" for c in area_name.lower())
        return self.raw_dir / f"overpass_{slug}_level{admin_level}.json"

    def ensure_dirs(self) -> None:
        """Create data and output directories."""
        for dir_path in [self.raw_dir, self.output_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
