"""Zone management."""

from mms.extensions import db
from mms.models import MemberStatus, MembershipType, Zone


def create_zone(client, headers, name, description=None):
    payload = {'name': name}
    if description is not None:
        payload['description'] = description
    return client.post('/api/v1/zones', json=payload, headers=headers)


def test_create_zone(client, admin_headers):
    response = create_zone(client, admin_headers, 'East Zone', 'Eastern district')

    assert response.status_code == 201
    zone = response.get_json()['data']['zone']
    assert zone['name'] == 'East Zone'
    assert zone['isActive'] is True


def test_zone_names_are_unique_ignoring_case(client, admin_headers, zone):
    response = create_zone(client, admin_headers, 'north ZONE')

    assert response.status_code == 409
    assert response.get_json()['message'] == 'Zone with this name already exists'


def test_name_of_deleted_zone_can_be_reused(client, admin_headers, zone):
    zone.is_active = False
    db.session.commit()

    assert create_zone(client, admin_headers, 'North Zone').status_code == 201


def test_list_zones_with_member_counts(client, member_headers, make_member, zone):
    empty = Zone(name='Alpha Zone')
    db.session.add(empty)
    db.session.commit()
    make_member()

    body = client.get('/api/v1/zones', headers=member_headers).get_json()

    assert [(z['name'], z['memberCount']) for z in body['data']] == [('Alpha Zone', 0), ('North Zone', 2)]
    assert body['meta']['totalZones'] == 2


def test_zone_details(client, admin_headers, zone, make_member):
    make_member(membership_type=MembershipType.VIP)
    suspended = make_member()
    suspended.status = MemberStatus.SUSPENDED
    db.session.commit()

    zone_data = client.get(f'/api/v1/zones/{zone.id}', headers=admin_headers).get_json()['data']['zone']
    stats = client.get(f'/api/v1/zones/{zone.id}/statistics', headers=admin_headers).get_json()['data']

    assert zone_data['memberCount'] == 2
    assert zone_data['activeMemberCount'] == 1
    assert zone_data['membersByType'] == {'Basic': 1, 'Premium': 0, 'VIP': 1}
    assert stats['statistics']['memberCount'] == 2


def test_update_zone(client, admin_headers, zone):
    response = client.put(
        f'/api/v1/zones/{zone.id}',
        json={'description': 'Updated description'},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.get_json()['data']['zone']
    assert data['name'] == 'North Zone'
    assert data['description'] == 'Updated description'


def test_rename_to_existing_name_conflicts(client, admin_headers, zone):
    other = create_zone(client, admin_headers, 'South Zone').get_json()['data']['zone']

    response = client.put(f'/api/v1/zones/{other["id"]}', json={'name': 'NORTH zone'}, headers=admin_headers)

    assert response.status_code == 409


def test_delete_guard(client, admin_headers, zone, member):
    response = client.delete(f'/api/v1/zones/{zone.id}', headers=admin_headers)

    assert response.status_code == 409
    assert response.get_json()['message'] == (
        'Cannot delete zone. It has 1 active member(s). Please reassign or remove members first.'
    )
    assert db.session.get(Zone, zone.id).is_active is True


def test_delete_empty_zone(client, admin_headers, zone):
    response = client.delete(f'/api/v1/zones/{zone.id}', headers=admin_headers)

    assert response.status_code == 200
    assert client.get(f'/api/v1/zones/{zone.id}', headers=admin_headers).status_code == 404


def test_zone_members(client, admin_headers, zone, make_member):
    make_member(name='Zed')
    make_member(name='Amy', membership_type=MembershipType.PREMIUM)

    body = client.get(f'/api/v1/zones/{zone.id}/members', headers=admin_headers).get_json()
    premium = client.get(
        f'/api/v1/zones/{zone.id}/members?membershipType=Premium', headers=admin_headers
    ).get_json()

    assert [m['name'] for m in body['data']['members']] == ['Amy', 'Zed']
    assert body['meta']['totalMembers'] == 2
    assert [m['name'] for m in premium['data']['members']] == ['Amy']


def test_search_zones(client, member_headers, zone):
    found = client.get('/api/v1/zones/search?search=north', headers=member_headers)
    missing = client.get('/api/v1/zones/search', headers=member_headers)

    assert [z['id'] for z in found.get_json()['data']] == [zone.id]
    assert missing.status_code == 400


def test_members_cannot_manage_zones(client, member_headers, zone):
    assert create_zone(client, member_headers, 'West Zone').status_code == 403
    assert client.delete(f'/api/v1/zones/{zone.id}', headers=member_headers).status_code == 403
