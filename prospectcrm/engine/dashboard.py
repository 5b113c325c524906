"""
Dashboard figures computed from already-loaded records.
No backend access here; the CLI fetches the lists and passes them in.
"""

import math
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from prospectcrm.models import Appointment, Contract, Organization, REGIONS

UNDEFINED_ZONE = 'Non définie'
UNDEFINED_DISTRICT = 'Non défini'
UNDEFINED_SECTOR = 'Non défini'
MISSING_ORGANIZATION = '(organization not found)'


@dataclass
class DashboardStats:
    total_organizations: int = 0
    active_organizations: int = 0
    prospect_organizations: int = 0
    total_rooms: int = 0
    total_appointments: int = 0
    total_contracts: int = 0


@dataclass
class Group:
    """Organizations sharing a zone, district or sector."""
    label: str
    count: int = 0
    percentage: int = 0
    zone: Optional[str] = None
    organizations: List[Organization] = field(default_factory=list, repr=False)


def _percent(part: int, total: int) -> int:
    # half-up, so 12.5 shows as 13
    return int(math.floor(part * 100 / total + 0.5)) if total else 0


def _status_is(org: Organization, status: str) -> bool:
    return (org.status or '').lower() == status


def compute_stats(orgs: List[Organization], appointments: List[Appointment] = None,
                  contracts: List[Contract] = None) -> DashboardStats:
    return DashboardStats(
        total_organizations=len(orgs),
        active_organizations=sum(1 for o in orgs if _status_is(o, 'active')),
        prospect_organizations=sum(1 for o in orgs if _status_is(o, 'prospect')),
        total_rooms=sum(o.nb_chambres or 0 for o in orgs),
        total_appointments=len(appointments or []),
        total_contracts=len(contracts or []),
    )


def geographical_groups(orgs: List[Organization]) -> List[Group]:
    """
    One group per zone. The four cardinal zones always appear; Centre only
    when it has members. Anything else lands in 'Non définie'.
    """
    total = len(orgs)
    known = {zone.lower() for zone in REGIONS}
    groups = []

    for zone in REGIONS:
        members = [o for o in orgs if (o.region or '').lower() == zone.lower()]
        if members or zone != 'Centre':
            groups.append(Group(zone, len(members), _percent(len(members), total), zone, members))

    orphans = [o for o in orgs if (o.region or '').lower() not in known]
    if orphans:
        groups.append(Group(UNDEFINED_ZONE, len(orphans), _percent(len(orphans), total), None, orphans))

    groups.sort(key=lambda g: g.count, reverse=True)
    return groups


def _group_by(orgs: List[Organization], key) -> List[Group]:
    total = len(orgs)
    buckets: Dict[str, Group] = OrderedDict()
    for org in orgs:
        label = key(org)
        if label not in buckets:
            # zone of the first member stands for the whole group
            buckets[label] = Group(label, zone=org.region)
        buckets[label].count += 1
        buckets[label].organizations.append(org)

    groups = list(buckets.values())
    for group in groups:
        group.percentage = _percent(group.count, total)
    groups.sort(key=lambda g: g.count, reverse=True)
    return groups


def district_groups(orgs: List[Organization]) -> List[Group]:
    return _group_by(orgs, lambda o: (o.district or '').strip() or UNDEFINED_DISTRICT)


def sector_groups(orgs: List[Organization]) -> List[Group]:
    return _group_by(
        orgs, lambda o: (o.secteur or '').strip() or (o.industry or '').strip() or UNDEFINED_SECTOR
    )


def related_counts(orgs: List[Organization], appointments: List[Appointment],
                   contracts: List[Contract]) -> Dict[str, Dict[str, int]]:
    """{org_id: {'appointments': n, 'contracts': m}} for every organization."""
    counts = {o.id: {'appointments': 0, 'contracts': 0} for o in orgs}
    for appt in appointments:
        if appt.organization_id in counts:
            counts[appt.organization_id]['appointments'] += 1
    for contract in contracts:
        if contract.organization_id in counts:
            counts[contract.organization_id]['contracts'] += 1
    return counts


def contract_display_rows(contracts: List[Contract], orgs: List[Organization]) -> List[Dict]:
    """Flatten contracts for display; orphaned contracts keep a placeholder name."""
    names = {o.id: o.name for o in orgs}
    return [
        {
            'id': c.id,
            'title': c.title or c.description or '',
            'organization': names.get(c.organization_id, MISSING_ORGANIZATION),
            'status': c.status,
            'value': c.value,
            'currency': c.currency,
            'assigned_to': c.assigned_to,
            'documents': len(c.documents),
        }
        for c in contracts
    ]
