"""
Endpoint Catalog

Static descriptors of the Microsoft Graph operations exposed as tools.
The catalog is produced ahead of time and shipped as endpoints.json.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "endpoints.json"


class CatalogError(Exception):
    """Raised when the endpoint catalog cannot be loaded."""
    pass


class ParameterLocation(str, Enum):
    PATH = "Path"
    QUERY = "Query"
    HEADER = "Header"
    BODY = "Body"


@dataclass(frozen=True)
class ParameterSpec:
    name: str
    location: ParameterLocation
    schema: Optional[Dict[str, Any]] = None
    required: bool = False
    default: Any = None
    description: str = ""


@dataclass(frozen=True)
class EndpointDescriptor:
    name: str
    method: str
    path: str
    parameters: Tuple[ParameterSpec, ...] = ()
    description: str = ""
    error_hints: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_read(self) -> bool:
        return self.method.upper() == "GET"

    def find_parameter(self, name: str) -> Optional[ParameterSpec]:
        for spec in self.parameters:
            if spec.name == name:
                return spec
        return None


def _parse_parameter(endpoint: str, raw: Dict[str, Any]) -> ParameterSpec:
    try:
        location = ParameterLocation(raw["location"])
    except KeyError:
        raise CatalogError(f"{endpoint}: parameter {raw.get('name')!r} has no location")
    except ValueError:
        raise CatalogError(f"{endpoint}: unknown parameter location {raw['location']!r}")

    if "name" not in raw:
        raise CatalogError(f"{endpoint}: parameter without a name")

    return ParameterSpec(
        name=raw["name"],
        location=location,
        schema=raw.get("schema"),
        required=bool(raw.get("required", location is ParameterLocation.PATH)),
        default=raw.get("default"),
        description=raw.get("description", ""),
    )


def parse_descriptor(raw: Dict[str, Any]) -> EndpointDescriptor:
    """Build one EndpointDescriptor from its JSON form."""
    missing = [key for key in ("name", "method", "path") if key not in raw]
    if missing:
        raise CatalogError(f"Endpoint entry missing {', '.join(missing)}: {raw!r}")

    name = raw["name"]
    parameters = tuple(_parse_parameter(name, p) for p in raw.get("parameters") or [])

    seen = set()
    for spec in parameters:
        if spec.name in seen:
            raise CatalogError(f"{name}: duplicate parameter {spec.name!r}")
        seen.add(spec.name)

    return EndpointDescriptor(
        name=name,
        method=raw["method"].upper(),
        path=raw["path"],
        parameters=parameters,
        description=raw.get("description", ""),
        error_hints=frozenset(raw.get("error_hints") or []),
    )


def load_catalog(path: Union[str, Path, None] = None) -> List[EndpointDescriptor]:
    """Load and validate the endpoint catalog. Defaults to the packaged file."""
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH

    try:
        raw_entries = json.loads(catalog_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {catalog_path}: {e}")
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {catalog_path} is not valid JSON: {e}")

    if not isinstance(raw_entries, list):
        raise CatalogError(f"Catalog {catalog_path} must be a JSON array")

    descriptors = [parse_descriptor(entry) for entry in raw_entries]

    names = set()
    for descriptor in descriptors:
        if descriptor.name in names:
            raise CatalogError(f"Duplicate endpoint name: {descriptor.name}")
        names.add(descriptor.name)

    logger.info(f"Loaded {len(descriptors)} endpoints from {catalog_path}")
    return descriptors
