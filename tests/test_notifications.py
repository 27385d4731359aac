"""Notifications: broadcasts, targeted messages and the member inbox."""

import pytest

from conftest import auth_headers
from mms.services.auth import auth_service
from mms.services.notification import notification_service


@pytest.fixture
def broadcast(admin):
    return notification_service.send_to_all_members(
        'Office closed', 'The office is closed on Monday for maintenance.', sent_by=admin.id
    )


def test_send_to_all(client, admin_headers, member, member_headers):
    response = client.post('/api/v1/notifications/send-all', json={
        'title': 'Welcome',
        'message': 'Welcome to the new membership portal!',
        'priority': 'High',
    }, headers=admin_headers)

    assert response.status_code == 201
    notification = response.get_json()['data']['notification']
    assert notification['targetMembers'] == []
    assert notification['priority'] == 'High'
    assert notification['status'] == 'Sent'

    inbox = client.get('/api/v1/notifications/my', headers=member_headers).get_json()
    assert [n['title'] for n in inbox['data']] == ['Welcome']
    assert inbox['meta']['totalNotifications'] == 1


def test_targeted_notifications_only_reach_targets(client, admin_headers, member, member_headers, make_member):
    other = make_member()
    response = client.post('/api/v1/notifications/send-members', json={
        'title': 'Private note',
        'message': 'This message is only for one member.',
        'type': 'Membership',
        'targetMembers': [other.id],
    }, headers=admin_headers)
    assert response.status_code == 201
    notification_id = response.get_json()['data']['notification']['id']

    mine = client.get('/api/v1/notifications/my', headers=member_headers).get_json()
    theirs = client.get(
        '/api/v1/notifications/my',
        headers=auth_headers(auth_service.generate_token(other.user_id)),
    ).get_json()

    assert mine['data'] == []
    assert [n['id'] for n in theirs['data']] == [notification_id]
    assert client.get(f'/api/v1/notifications/{notification_id}', headers=member_headers).status_code == 403


def test_unknown_target(client, admin_headers, member):
    response = client.post('/api/v1/notifications/send-members', json={
        'title': 'Hello there',
        'message': 'Somebody does not exist here.',
        'targetMembers': [member.id, 'f' * 24],
    }, headers=admin_headers)

    assert response.status_code == 400
    assert response.get_json()['message'] == 'One or more target members not found'


def test_send_members_requires_targets(client, admin_headers):
    response = client.post('/api/v1/notifications/send-members', json={
        'title': 'Hello there',
        'message': 'Nobody to send this to.',
        'targetMembers': [],
    }, headers=admin_headers)

    assert response.status_code == 400


def test_mark_as_read(client, member_headers, broadcast):
    response = client.patch(f'/api/v1/notifications/{broadcast.id}/read', headers=member_headers)

    assert response.status_code == 200
    assert response.get_json()['data']['notification']['isRead'] is True

    unread = client.get('/api/v1/notifications/my?unreadOnly=true', headers=member_headers).get_json()
    assert unread['data'] == []


def test_drafts_are_not_delivered(client, admin_headers, member_headers):
    client.post('/api/v1/notifications', json={
        'title': 'Draft notice',
        'message': 'Not ready to go out yet.',
        'type': 'General',
        'status': 'Draft',
    }, headers=admin_headers)

    assert client.get('/api/v1/notifications/my', headers=member_headers).get_json()['data'] == []


def test_admin_listing_and_delete(client, admin_headers, broadcast):
    listing = client.get('/api/v1/notifications?priority=Medium', headers=admin_headers).get_json()
    assert [n['id'] for n in listing['data']] == [broadcast.id]

    assert client.delete(f'/api/v1/notifications/{broadcast.id}', headers=admin_headers).status_code == 200
    assert client.get(f'/api/v1/notifications/{broadcast.id}', headers=admin_headers).status_code == 404


def test_admin_cannot_use_member_inbox(client, admin_headers):
    assert client.get('/api/v1/notifications/my', headers=admin_headers).status_code == 403
