"""
Site model and signal extraction.

The browsing engine hands us a read-only Site describing the loaded page
and what the tracker blocker saw on it. The CTA selector only needs a
handful of derived facts (is this the search results page, did we block
trackers, does a major network own the page or its trackers), which
extract_site_signals() computes fresh on every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse


class HttpsStatus(str, Enum):
    NONE = "NONE"
    MIXED = "MIXED"
    SECURE = "SECURE"


class PrivacyGrade(str, Enum):
    A = "A"
    B_PLUS = "B_PLUS"
    B = "B"
    C_PLUS = "C_PLUS"
    C = "C"
    D = "D"
    UNKNOWN = "UNKNOWN"


class PrivacyPractices(str, Enum):
    """Terms-of-service classification of the site owner."""
    GOOD = "GOOD"
    POOR = "POOR"
    MIXED = "MIXED"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Entity:
    """Company that owns a domain."""
    name: str
    display_name: str
    prevalence: float = 0.0


@dataclass(frozen=True)
class TrackingEvent:
    """A tracker request seen while loading a page."""
    document_url: str
    tracker_url: str
    categories: Optional[List[str]] = None
    entity: Optional[Entity] = None
    blocked: bool = True


@dataclass(frozen=True)
class SiteGrades:
    grade: PrivacyGrade
    improved_grade: PrivacyGrade


@dataclass
class Site:
    """Read-only view of the currently loaded page."""
    url: str
    https: HttpsStatus = HttpsStatus.SECURE
    tracker_count: int = 0
    tracking_events: List[TrackingEvent] = field(default_factory=list)
    major_network_count: int = 0
    all_trackers_blocked: bool = True
    privacy_practices: PrivacyPractices = PrivacyPractices.UNKNOWN
    entity: Optional[Entity] = None
    grade: PrivacyGrade = PrivacyGrade.UNKNOWN
    improved_grade: PrivacyGrade = PrivacyGrade.UNKNOWN

    @property
    def host(self) -> Optional[str]:
        try:
            return urlparse(self.url).hostname
        except ValueError:
            # Malformed authority, e.g. an unterminated IPv6 literal
            return None

    def calculate_grades(self) -> SiteGrades:
        return SiteGrades(self.grade, self.improved_grade)


@dataclass(frozen=True)
class SiteSignals:
    """Compact privacy summary of a page, as used by the CTA selector."""
    host: Optional[str]
    base_domain: Optional[str]
    is_serp: bool
    has_tracking_events: bool
    major_network_tracker_count: int
    network_name: Optional[str]
    tracker_entity_names: Tuple[str, ...]
    all_trackers_blocked: bool
    grades: SiteGrades

    @property
    def blocked_entity_name(self) -> Optional[str]:
        """A single representative blocked tracker, for dialog text."""
        return self.tracker_entity_names[0] if self.tracker_entity_names else None

    @property
    def has_major_network(self) -> bool:
        return self.network_name is not None


def base_domain(host: Optional[str]) -> Optional[str]:
    """Host without a leading www."""
    if not host:
        return None
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def _ordered_tracker_entities(events: Iterable[TrackingEvent]) -> Tuple[str, ...]:
    # Most prevalent networks first; ties keep page order.
    seen = {}
    for position, event in enumerate(events):
        if event.entity is None or not event.blocked:
            continue
        name = event.entity.display_name
        if name not in seen:
            seen[name] = (-event.entity.prevalence, position)
    return tuple(sorted(seen, key=lambda name: seen[name]))


def extract_site_signals(
    site: Site,
    serp_domain: str,
    main_networks: Iterable[str],
) -> SiteSignals:
    """
    Derive the CTA-relevant signals of a page.

    Args:
        site: Page being browsed
        serp_domain: Domain of the search results page
        main_networks: Entity display names treated as major networks

    Returns:
        SiteSignals for the page
    """
    networks = set(main_networks)
    host = site.host
    domain = base_domain(host)
    events = list(site.tracking_events or [])

    major_tracker_names = [
        e.entity.display_name for e in events
        if e.entity is not None and e.entity.display_name in networks
    ]

    network_name = None
    if site.entity is not None and site.entity.display_name in networks:
        network_name = site.entity.display_name
    elif major_tracker_names:
        network_name = major_tracker_names[0]

    return SiteSignals(
        host=host,
        base_domain=domain,
        is_serp=domain is not None and domain == serp_domain,
        has_tracking_events=bool(events),
        major_network_tracker_count=len(major_tracker_names),
        network_name=network_name,
        tracker_entity_names=_ordered_tracker_entities(events),
        all_trackers_blocked=site.all_trackers_blocked,
        grades=site.calculate_grades(),
    )
