"""Payments and receipt uploads."""

import io
from datetime import timedelta

import pytest

from mms.extensions import db
from mms.models import Payment, PaymentMethod, PaymentStatus, PaymentType
from mms.services.event import event_service
from mms.services.helpers import utcnow
from mms.services.payment import payment_service

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64


@pytest.fixture
def payment(admin, member):
    return payment_service.create_payment({
        'memberId': member.id,
        'amount': 40,
        'paymentType': PaymentType.LATE_FEE,
        'paymentMethod': PaymentMethod.CASH,
    }, admin.id)


def upload(client, headers, payment_id, content=PNG_BYTES, filename='receipt.png', mimetype='image/png'):
    return client.post(
        f'/api/v1/payments/{payment_id}/receipt',
        data={'receipt': (io.BytesIO(content), filename, mimetype)},
        content_type='multipart/form-data',
        headers=headers,
    )


class TestPayments:

    def test_create_payment(self, client, admin_headers, member):
        response = client.post('/api/v1/payments', json={
            'memberId': member.id,
            'amount': 19.99,
            'paymentType': 'Other',
            'paymentMethod': 'Credit Card',
            'description': 'Club t-shirt',
        }, headers=admin_headers)

        assert response.status_code == 201
        payment = response.get_json()['data']['payment']
        assert payment['paymentId'].startswith('PAY')
        assert payment['status'] == 'Pending'
        assert payment['amount'] == 19.99
        assert payment['member']['id'] == member.id

    def test_amount_must_be_positive(self, client, admin_headers, member):
        response = client.post('/api/v1/payments', json={
            'memberId': member.id,
            'amount': 0,
            'paymentType': 'Other',
            'paymentMethod': 'Cash',
        }, headers=admin_headers)

        assert response.status_code == 400

    def test_unknown_member(self, client, admin_headers):
        response = client.post('/api/v1/payments', json={
            'memberId': 'e' * 24,
            'amount': 10,
            'paymentType': 'Other',
            'paymentMethod': 'Cash',
        }, headers=admin_headers)

        assert response.status_code == 404
        assert response.get_json()['message'] == 'Member not found'

    def test_list_and_filter(self, client, admin_headers, payment, make_member, admin):
        other = make_member()
        payment_service.create_payment({
            'memberId': other.id,
            'amount': 15,
            'paymentType': PaymentType.OTHER,
            'paymentMethod': PaymentMethod.ONLINE,
        }, admin.id)

        everything = client.get('/api/v1/payments', headers=admin_headers).get_json()
        filtered = client.get(f'/api/v1/payments?memberId={other.id}', headers=admin_headers).get_json()

        assert everything['meta']['totalPayments'] == 2
        assert [p['member']['id'] for p in filtered['data']] == [other.id]

    def test_update_status(self, client, admin_headers, payment):
        response = client.put(
            f'/api/v1/payments/{payment.id}',
            json={'status': 'Completed', 'transactionId': 'BANK-42'},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.get_json()['data']['payment']
        assert data['status'] == 'Completed'
        assert data['transactionId'] == 'BANK-42'
        assert data['amount'] == 40.0

    def test_amount_cannot_be_updated(self, client, admin_headers, payment):
        response = client.put(f'/api/v1/payments/{payment.id}', json={'amount': 1}, headers=admin_headers)

        assert response.status_code == 400

    def test_member_sees_own_payments_only(self, client, member, member_headers, payment, make_member):
        other = make_member()

        own = client.get(f'/api/v1/payments/member/{member.id}', headers=member_headers)
        single = client.get(f'/api/v1/payments/{payment.id}', headers=member_headers)
        theirs = client.get(f'/api/v1/payments/member/{other.id}', headers=member_headers)

        assert own.status_code == 200
        assert [p['id'] for p in own.get_json()['data']['payments']] == [payment.id]
        assert single.status_code == 200
        assert theirs.status_code == 403

    def test_event_payments_summary(self, client, admin, admin_headers, member):
        event = event_service.create_event({
            'title': 'Workshop',
            'description': 'Hands-on skills workshop',
            'eventDate': utcnow() + timedelta(days=5),
            'location': 'Room 4',
            'registrationFee': 12,
        }, admin.id)
        for status in (PaymentStatus.COMPLETED, PaymentStatus.PENDING):
            payment = payment_service.create_payment({
                'memberId': member.id,
                'amount': 12,
                'paymentType': PaymentType.EVENT_REGISTRATION,
                'paymentMethod': PaymentMethod.CASH,
                'eventId': event.id,
            }, admin.id)
            payment.status = status
        db.session.commit()

        data = client.get(f'/api/v1/payments/event/{event.id}', headers=admin_headers).get_json()['data']

        assert data['eventTitle'] == 'Workshop'
        assert data['summary'] == {
            'totalAmount': 24.0,
            'totalPayments': 2,
            'completedPayments': 1,
            'pendingPayments': 1,
        }


class TestReceipts:

    def test_upload_receipt(self, app, client, admin_headers, payment):
        response = upload(client, admin_headers, payment.id)

        assert response.status_code == 200
        url = response.get_json()['data']['payment']['receiptFile']
        assert url.startswith('/uploads/receipts/')
        assert url.endswith('-receipt.png')

        served = client.get(url)
        assert served.status_code == 200
        assert served.data == PNG_BYTES
        served.close()

    def test_replacing_receipt_removes_old_file(self, app, client, admin_headers, payment):
        from pathlib import Path

        first = upload(client, admin_headers, payment.id).get_json()['data']['payment']['receiptFile']
        second = upload(client, admin_headers, payment.id, filename='second.png').get_json()
        second_url = second['data']['payment']['receiptFile']

        receipts = Path(app.config['UPLOAD_FOLDER']) / 'receipts'
        assert not (receipts / first.rsplit('/', 1)[-1]).exists()
        assert (receipts / second_url.rsplit('/', 1)[-1]).exists()

    def test_missing_file(self, client, admin_headers, payment):
        response = client.post(
            f'/api/v1/payments/{payment.id}/receipt',
            data={},
            content_type='multipart/form-data',
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Receipt file is required'

    def test_disallowed_type(self, client, admin_headers, payment):
        response = upload(client, admin_headers, payment.id, content=b'GIF89a', filename='r.gif', mimetype='image/gif')

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Only JPEG, PNG, and WebP images are allowed'

    def test_signature_mismatch(self, client, admin_headers, payment):
        response = upload(client, admin_headers, payment.id, content=b'<script>alert(1)</script>')

        assert response.status_code == 400
        assert response.get_json()['message'] == 'File content does not match the declared type'
        assert db.session.get(Payment, payment.id).receipt_file is None

    def test_riff_container_that_is_not_webp(self, client, admin_headers, payment):
        wav = b'RIFF' + b'\x24\x00\x00\x00' + b'WAVEfmt ' + b'\x00' * 32
        response = upload(client, admin_headers, payment.id, content=wav, filename='r.webp', mimetype='image/webp')

        assert response.status_code == 400
        assert response.get_json()['message'] == 'File content does not match the declared type'

    def test_webp_upload(self, client, admin_headers, payment):
        webp = b'RIFF' + b'\x24\x00\x00\x00' + b'WEBPVP8 ' + b'\x00' * 32
        response = upload(client, admin_headers, payment.id, content=webp, filename='r.webp', mimetype='image/webp')

        assert response.status_code == 200
        assert response.get_json()['data']['payment']['receiptFile'].endswith('-r.webp')

    def test_too_large(self, app, client, admin_headers, payment):
        app.config['MAX_FILE_SIZE'] = 32

        response = upload(client, admin_headers, payment.id)

        assert response.status_code == 400
        assert response.get_json()['message'].startswith('File too large')
