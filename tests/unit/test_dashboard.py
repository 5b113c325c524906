"""
Unit tests for prospectcrm/engine/dashboard.py. Pure functions, no mocking.
"""

from prospectcrm.engine import dashboard
from prospectcrm.models import Appointment, Contract, Organization


def org(oid, region=None, status=None, rooms=None, district=None, secteur=None, industry=None):
    return Organization(id=oid, name=f'Org {oid}', region=region, status=status, nb_chambres=rooms,
                        district=district, secteur=secteur, industry=industry)


ORGS = [
    org('1', 'Nord', 'Active', 100, 'Pamplemousses', 'Tourisme'),
    org('2', 'nord', 'prospect', 50, ' Pamplemousses ', industry='Santé'),
    org('3', 'Ouest', 'prospect', None, 'Port Louis'),
    org('4', None, 'inactive', 20),
    org('5', 'Atlantis', 'active'),
    org('6', 'Sud', 'client', 10, 'Savanne', 'Tourisme'),
    org('7', 'Est', 'prospect'),
    org('8', 'Est', 'PROSPECT'),
]


def test_stats():
    stats = dashboard.compute_stats(ORGS, [Appointment()], [Contract(), Contract()])
    assert stats == dashboard.DashboardStats(
        total_organizations=8,
        active_organizations=2,
        prospect_organizations=4,
        total_rooms=180,
        total_appointments=1,
        total_contracts=2,
    )


def test_stats_on_empty_lists():
    assert dashboard.compute_stats([]) == dashboard.DashboardStats()


def test_geographical_groups():
    groups = dashboard.geographical_groups(ORGS)
    summary = [(g.label, g.count, g.percentage) for g in groups]
    # Centre is empty and omitted; ties keep zone order
    assert summary == [
        ('Nord', 2, 25),
        ('Est', 2, 25),
        ('Non définie', 2, 25),
        ('Sud', 1, 13),
        ('Ouest', 1, 13),
    ]
    undefined = next(g for g in groups if g.label == 'Non définie')
    assert [o.id for o in undefined.organizations] == ['4', '5']


def test_centre_shown_when_populated():
    groups = dashboard.geographical_groups([org('1', 'Centre')])
    assert [(g.label, g.count, g.percentage) for g in groups] == [
        ('Centre', 1, 100), ('Nord', 0, 0), ('Sud', 0, 0), ('Est', 0, 0), ('Ouest', 0, 0),
    ]


def test_geographical_groups_empty():
    groups = dashboard.geographical_groups([])
    assert [g.label for g in groups] == ['Nord', 'Sud', 'Est', 'Ouest']
    assert all(g.percentage == 0 for g in groups)


def test_district_groups():
    groups = dashboard.district_groups(ORGS)
    assert (groups[0].label, groups[0].count, groups[0].zone) == ('Non défini', 4, None)
    assert (groups[1].label, groups[1].count, groups[1].zone) == ('Pamplemousses', 2, 'Nord')
    assert sum(g.count for g in groups) == len(ORGS)


def test_sector_groups_fall_back_to_industry():
    groups = {g.label: g.count for g in dashboard.sector_groups(ORGS)}
    assert groups == {'Tourisme': 2, 'Santé': 1, 'Non défini': 5}


def test_related_counts():
    appts = [Appointment(organization_id='1'), Appointment(organization_id='1'), Appointment(organization_id='x')]
    contracts = [Contract(organization_id='2')]
    counts = dashboard.related_counts(ORGS[:2], appts, contracts)
    assert counts == {
        '1': {'appointments': 2, 'contracts': 0},
        '2': {'appointments': 0, 'contracts': 1},
    }


def test_contract_rows_flag_missing_organization():
    contracts = [
        Contract(id='k1', organization_id='1', title='Offer', status='sent'),
        Contract(id='k2', organization_id='gone', description='Orphan', status='draft'),
    ]
    rows = dashboard.contract_display_rows(contracts, ORGS)
    assert rows[0]['organization'] == 'Org 1'
    assert rows[1]['organization'] == '(organization not found)'
    assert rows[1]['title'] == 'Orphan'
    assert rows[0]['documents'] == 0


def test_stats_with_room_counts_stored_as_text():
    orgs = [
        Organization.from_record({'id': 'a', 'name': 'A', 'nb_chambres': '120'}),
        Organization.from_record({'id': 'b', 'name': 'B', 'nb_chambres': '30 chambres'}),
        Organization.from_record({'id': 'c', 'name': 'C', 'nb_chambres': ''}),
    ]
    assert dashboard.compute_stats(orgs).total_rooms == 150
