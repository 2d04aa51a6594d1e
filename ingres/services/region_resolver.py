"""
Region resolver - maps explicit ids or free text to canonical regions.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ingres.exceptions import RegionNotFound, RegionNotIdentified
from ingres.models.region import Region
from ingres.utils.constants import REGION_GAZETTEER
from ingres.utils.validators import parse_region_ids

logger = logging.getLogger(__name__)

# Checked in order: "in <phrase>", then "for", then "of"
REGION_PATTERNS = [
    re.compile(r"\bin\s+([a-z][a-z\s]*?)\s*(?=[?.,!;:]|$)"),
    re.compile(r"\bfor\s+([a-z][a-z\s]*?)\s*(?=[?.,!;:]|$)"),
    re.compile(r"\bof\s+([a-z][a-z\s]*?)\s*(?=[?.,!;:]|$)"),
]
MIN_PHRASE_LENGTH = 3
MAX_PHRASE_LENGTH = 29


@dataclass
class RegionSet:
    """Regions found for an id list, in input order, plus ids with no region."""
    regions: List[Region] = field(default_factory=list)
    missing: List[int] = field(default_factory=list)


def extract_region_phrase(query: str, context: Optional[Dict[str, Any]] = None) -> str:
    """
    Pull a region name out of a lower-cased query.

    Order: context ``location``, context ``region``, gazetteer (first entry
    in list order that occurs in the query), then the in/for/of patterns.

    Raises:
        RegionNotIdentified: when nothing region-like is found
    """
    if context:
        for key in ("location", "region"):
            value = context.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()

    for name in REGION_GAZETTEER:
        if name in query:
            return name

    for pattern in REGION_PATTERNS:
        match = pattern.search(query)
        if match:
            phrase = match.group(1).strip()
            if MIN_PHRASE_LENGTH <= len(phrase) <= MAX_PHRASE_LENGTH:
                return phrase

    raise RegionNotIdentified(
        "Could not identify a region in your query. Please specify a state, district, or region."
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class RegionResolver:
    """Resolve region references against the regions table."""

    def __init__(self, db: Session):
        self.db = db

    def get_region(self, region_id: int) -> Region:
        region = self.db.get(Region, region_id)
        if region is None:
            raise RegionNotFound("Region not found")
        return region

    def resolve_ids(self, region_ids: List[int]) -> RegionSet:
        """
        Look up regions by id, preserving input order.

        Unknown ids are reported in ``missing``; nothing is raised for them.
        """
        if not region_ids:
            return RegionSet()

        found = {
            r.id: r for r in self.db.query(Region).filter(Region.id.in_(set(region_ids))).all()
        }

        result = RegionSet()
        for region_id in region_ids:
            if region_id in found:
                result.regions.append(found[region_id])
            elif region_id not in result.missing:
                result.missing.append(region_id)
        return result

    def resolve_id_list(self, raw: str) -> RegionSet:
        """Parse a comma-separated id string and resolve it."""
        return self.resolve_ids(parse_region_ids(raw))

    def find_by_name(self, phrase: str) -> Region:
        """
        Case-insensitive substring match on region name.

        Several regions may contain the phrase; the lowest id wins.
        """
        region = self.db.query(Region).filter(
            Region.name.ilike(f"%{_escape_like(phrase)}%", escape="\\")
        ).order_by(Region.id).first()

        if region is None:
            raise RegionNotFound(f"Region '{phrase}' not found in database")
        return region

    def resolve_text(self, query: str, context: Optional[Dict[str, Any]] = None) -> Region:
        """Resolve free text (plus optional context) to one region."""
        phrase = extract_region_phrase(query.lower(), context)
        region = self.find_by_name(phrase)
        logger.debug("Resolved '%s' to region %s (%s)", phrase, region.id, region.name)
        return region

    def list_regions(self, region_ids: Optional[List[int]] = None) -> List[Dict[str, Any]]:
        """Flat region rows for export, ordered by name."""
        query = self.db.query(Region)
        if region_ids:
            query = query.filter(Region.id.in_(region_ids))

        return [
            {
                "id": r.id,
                "name": r.name,
                "type": r.type,
                "parentId": r.parent_id,
                "code": r.code,
                "latitude": r.latitude,
                "longitude": r.longitude,
                "createdAt": r.created_at,
                "updatedAt": r.updated_at,
            }
            for r in query.order_by(Region.name, Region.id).all()
        ]
