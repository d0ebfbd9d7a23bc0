from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from claimsdesk.analytics.aggregation import percent_change
from claimsdesk.models.commissions import CommissionRecord
from claimsdesk.models.people import AdjusterRecord
from claimsdesk.schemas.claims import AdjusterSummary
from claimsdesk.shared.numbers import safe_div

# Art and Artie are different people, so they are deliberately absent.
NICKNAMES: Dict[str, List[str]] = {
    "jeff": ["jeffrey", "jeff"],
    "jeffrey": ["jeffrey", "jeff"],
    "phil": ["philip", "phillip", "phil"],
    "philip": ["philip", "phillip", "phil"],
    "phillip": ["philip", "phillip", "phil"],
    "chris": ["christopher", "chris"],
    "christopher": ["christopher", "chris"],
    "dan": ["daniel", "dan"],
    "daniel": ["daniel", "dan"],
}

OFFICE_CODES = {"h": "Houston", "houston": "Houston", "d": "Dallas", "dallas": "Dallas"}

_WHITESPACE = re.compile(r"\s+")


def normalize_adjuster_name(name: str) -> str:
    return _WHITESPACE.sub(" ", name.strip().lower()).replace(".", "")


def normalize_office(office: Optional[str]) -> Optional[str]:
    if not office or not office.strip():
        return None
    return OFFICE_CODES.get(office.strip().lower(), office.strip())


def _first_name(name: str) -> str:
    return normalize_adjuster_name(name).split(" ")[0]


def _same_first_name(first: str, other: str) -> bool:
    return first == other or other in NICKNAMES.get(first, [])


def _is_abbreviation(parts: List[str], other: List[str]) -> bool:
    if len(parts) < 2 or len(other) < 2:
        return False
    abbreviation = parts[1]
    return 0 < len(abbreviation) <= 2 and other[1].startswith(abbreviation)


def names_match(name: str, registry_name: str, registry_full_name: Optional[str] = None) -> bool:
    candidate = normalize_adjuster_name(name)
    short = normalize_adjuster_name(registry_name)
    full = normalize_adjuster_name(registry_full_name) if registry_full_name else None
    if not candidate:
        return False

    if candidate == short or (full and candidate == full):
        return True

    parts = candidate.split(" ")
    first = parts[0]
    registry_firsts = [_first_name(registry_name)]
    if full:
        registry_firsts.append(full.split(" ")[0])
    if not any(_same_first_name(first, other) for other in registry_firsts):
        return False
    if len(parts) == 1:
        return True

    short_parts = short.split(" ")
    full_parts = full.split(" ") if full else []
    if _is_abbreviation(parts, short_parts) or _is_abbreviation(parts, full_parts):
        return True
    # Nicknamed first names match regardless of surname spelling.
    return first in NICKNAMES


def find_registry_match(
    name: str, registry: Sequence[AdjusterRecord]
) -> Optional[AdjusterRecord]:
    for adjuster in registry:
        if names_match(name, adjuster.name, adjuster.full_name):
            return adjuster
    return None


@dataclass
class _AdjusterGroup:
    name: str
    office: Optional[str]
    records: List[CommissionRecord] = field(default_factory=list)


def _most_frequent_office(records: Sequence[CommissionRecord]) -> Optional[str]:
    counts: Counter[str] = Counter()
    for record in records:
        office = normalize_office(record.office)
        if office:
            counts[office] += 1
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def summarize_adjuster_commissions(
    records: Iterable[CommissionRecord],
    registry: Sequence[AdjusterRecord],
) -> List[AdjusterSummary]:
    groups: Dict[str, _AdjusterGroup] = {}
    for record in records:
        if not record.adjuster or not record.adjuster.strip():
            continue
        canonical = find_registry_match(record.adjuster, registry)
        display_name = canonical.name if canonical else record.adjuster.strip()
        key = normalize_adjuster_name(display_name)
        if key not in groups:
            groups[key] = _AdjusterGroup(
                name=display_name,
                office=normalize_office(canonical.office) if canonical else None,
            )
        groups[key].records.append(record)

    summaries: List[AdjusterSummary] = []
    for group in groups.values():
        total_estimate = sum(r.initial_estimate for r in group.records)
        total_revised = sum(r.revised_estimate for r in group.records)
        differences = [r.revised_estimate - r.initial_estimate for r in group.records]
        positives = [d for d in differences if d > 0]
        negatives = [d for d in differences if d < 0]
        changes = [percent_change(r.initial_estimate, r.revised_estimate) for r in group.records]
        summaries.append(
            AdjusterSummary(
                adjuster=group.name,
                office=group.office or _most_frequent_office(group.records),
                total_claims=len(group.records),
                total_estimate=total_estimate,
                total_revised=total_revised,
                avg_percent_change=safe_div(sum(changes), len(changes)),
                total_dollar_difference=total_revised - total_estimate,
                positive_claims=len(positives),
                negative_claims=len(negatives),
                positive_difference=sum(positives),
                negative_difference=sum(negatives),
            )
        )
    return summaries
