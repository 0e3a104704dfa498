"""
datastore.py

Loads plant catalogs (JSON / CSV / in-memory dicts) into validated,
immutable PlantRecord objects for the matching engine.

Accepted record shapes follow the upload format:
- name (or plantName) is required
- scientificName / scientific_name, usageMethods / usage_methods
- benefits as a list, or a single string (one benefit)
- components as a list, or one delimited string ("curcumin, fiber; oils")
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Union
import json
import logging
import os
import re

import pandas as pd
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import config

logger = logging.getLogger(__name__)

_component_split_re = re.compile(config.COMPONENT_DELIMITERS)
_text_list_split_re = re.compile(config.TEXT_LIST_DELIMITERS)


class CatalogError(ValueError):
    """Raised when a catalog file cannot be read or has the wrong shape."""


def _clean_list(values: Iterable[Any]) -> List[str]:
    out = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s:
            out.append(s)
    return out


class PlantRecord(BaseModel):
    """
    One entry of the remedy catalog.

    components is normalized to a list on ingestion, whatever shape it
    arrived in, so scoring only ever sees one representation.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = ""
    name: str = Field(validation_alias=AliasChoices("name", "plantName"))
    scientific_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("scientific_name", "scientificName")
    )
    description: Optional[str] = None
    benefits: List[str] = Field(default_factory=list)
    components: List[str] = Field(default_factory=list)
    usage_methods: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("usage_methods", "usageMethods")
    )
    precautions: List[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("name must be a non-empty string")
        return v.strip()

    @field_validator("scientific_name", "description", mode="before")
    @classmethod
    def _optional_text(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @field_validator("benefits", "usage_methods", "precautions", mode="before")
    @classmethod
    def _text_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return _clean_list([v])
        if isinstance(v, (list, tuple)):
            return _clean_list(v)
        raise ValueError("must be a list of strings")

    @field_validator("components", mode="before")
    @classmethod
    def _components(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return _clean_list(_component_split_re.split(v))
        if isinstance(v, (list, tuple)):
            return _clean_list(v)
        raise ValueError("components must be a list of strings or a delimited string")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "scientificName": self.scientific_name,
            "description": self.description,
            "benefits": list(self.benefits),
            "components": list(self.components),
            "usageMethods": list(self.usage_methods),
            "precautions": list(self.precautions),
        }


def coerce_plant(item: Union[PlantRecord, Dict[str, Any]]) -> Optional[PlantRecord]:
    """
    Turn a raw record into a PlantRecord.

    Returns None (and logs) for malformed records instead of raising, so one
    bad row never aborts a whole search.
    """
    if isinstance(item, PlantRecord):
        return item
    if not isinstance(item, dict):
        logger.warning(f"Skipping catalog entry of type {type(item).__name__}")
        return None
    try:
        return PlantRecord.model_validate(item)
    except ValidationError as e:
        logger.warning(f"Skipping malformed plant record {item.get('id', item.get('name'))!r}: {e.error_count()} error(s)")
        return None


def coerce_plants(items: Iterable[Union[PlantRecord, Dict[str, Any]]]) -> Iterator[PlantRecord]:
    for item in items or []:
        plant = coerce_plant(item)
        if plant is not None:
            yield plant


class PlantCatalog:
    """
    Holds the plant records of one catalog snapshot and provides:
      - plants(): records in load order
      - id_map: id -> PlantRecord
    Records without an id get the next sequential id not taken by any
    record of the same batch; explicit ids are never reassigned.
    """
    def __init__(self, items: Iterable[Union[PlantRecord, Dict[str, Any]]] = ()):
        self.entries: List[PlantRecord] = []
        self.id_map: Dict[str, PlantRecord] = {}
        self._next_id = 1
        if items:
            self._add_all(items, log=False)

    def _assign_id(self, reserved: Iterable[str] = ()) -> str:
        while str(self._next_id) in self.id_map or str(self._next_id) in reserved:
            self._next_id += 1
        new_id = str(self._next_id)
        self._next_id += 1
        return new_id

    def add(self, item: Union[PlantRecord, Dict[str, Any]]) -> Optional[PlantRecord]:
        """Validate and append one record; returns None if it was skipped."""
        return self._insert(coerce_plant(item))

    def _insert(self, plant: Optional[PlantRecord], reserved: Iterable[str] = ()) -> Optional[PlantRecord]:
        if plant is None:
            return None

        if not plant.id:
            plant = plant.model_copy(update={"id": self._assign_id(reserved)})
        elif plant.id in self.id_map:
            logger.warning(f"Skipping duplicate plant id {plant.id!r} ({plant.name})")
            return None

        self.entries.append(plant)
        self.id_map[plant.id] = plant
        return plant

    # ----------------------------
    # Loaders
    # ----------------------------
    def load_json(self, path: str) -> int:
        """
        Load a JSON catalog: either a list of plant objects or an object
        with a "plants" list.

        Returns:
            number of records added
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Catalog not found: {path}")

        with open(path, "r", encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise CatalogError(f"Catalog {path} is not valid JSON: {e}") from e

        if isinstance(data, dict) and isinstance(data.get("plants"), list):
            data = data["plants"]
        if not isinstance(data, list):
            raise CatalogError(f"Catalog {path} must contain a list of plants")

        return self._add_all(data)

    def load_csv(self, path: str) -> int:
        """
        Load a CSV catalog. A 'name' column is required; list columns
        (benefits, components, usage_methods, precautions) hold delimited text.

        Returns:
            number of records added
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Catalog not found: {path}")

        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise CatalogError(f"Catalog {path} could not be parsed: {e}") from e

        if "name" not in df.columns and "plantName" not in df.columns:
            raise CatalogError(f"CSV {path} missing 'name' column")

        rows = []
        for _, row in df.iterrows():
            record = row.to_dict()
            if isinstance(record.get("benefits"), str):
                record["benefits"] = _component_split_re.split(record["benefits"])
            for col in ("usage_methods", "usageMethods", "precautions"):
                if isinstance(record.get(col), str):
                    record[col] = _text_list_split_re.split(record[col])
            rows.append(record)

        return self._add_all(rows)

    def load(self, path: str) -> int:
        """Dispatch on file extension (.json / .csv)."""
        ext = os.path.splitext(path)[1].lower()
        if ext == ".json":
            return self.load_json(path)
        if ext == ".csv":
            return self.load_csv(path)
        raise CatalogError(f"Unsupported catalog format: {path}")

    def _add_all(self, items: Iterable[Any], log: bool = True) -> int:
        plants = list(coerce_plants(items))
        # ids written in the batch win over generated ones, wherever they appear
        reserved = {p.id for p in plants if p.id}
        added = 0
        for plant in plants:
            if self._insert(plant, reserved) is not None:
                added += 1
        if log:
            logger.info(f"Loaded {added} plants into catalog ({self.size()} total)")
        return added

    # ----------------------------
    # Accessors
    # ----------------------------
    def plants(self) -> List[PlantRecord]:
        return list(self.entries)

    def get(self, plant_id: Any) -> Optional[PlantRecord]:
        return self.id_map.get(str(plant_id))

    def size(self) -> int:
        return len(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[PlantRecord]:
        return iter(list(self.entries))

    def count_with_benefits(self) -> int:
        return sum(1 for p in self.entries if p.benefits)
