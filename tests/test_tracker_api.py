import uuid

import pytest
from sqlalchemy.exc import OperationalError

from iskolarlink.models import PROGRAM_CONFIGS
from iskolarlink.services import directory_service

BASE = '/api/v1'


@pytest.mark.parametrize('config', list(PROGRAM_CONFIGS.values()), ids=lambda c: c.program.value)
def test_full_flow_for_every_program(client, scholar, admin, config):
    """Set budget, record, reset and read history through each program's routes"""
    prefix = f"{BASE}{config.url_prefix}"
    headers = {'X-Performed-By': str(admin.user_id)}

    response = client.put(f"{prefix}/{scholar.user_id}/budget", json={'allottedBudget': 1000}, headers=headers)
    assert response.status_code == 200
    assert response.json()['remaining'] == 1000

    response = client.put(f"{prefix}/{scholar.user_id}/{config.consume_verb}", json={'addAmount': 1200}, headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data['total_consumed'] == 1200
    assert data['remaining'] == -200
    assert data['program'] == config.program.value

    response = client.get(prefix)
    assert response.status_code == 200
    (row,) = response.json()
    assert row['scholar_id'] == str(scholar.user_id)
    assert row['remaining'] == -200

    response = client.put(f"{prefix}/{scholar.user_id}/reset", headers=headers)
    assert response.status_code == 200
    assert (response.json()['allotted_budget'], response.json()['remaining']) == (0, 0)

    response = client.get(f"{prefix}/{scholar.user_id}/history")
    assert response.status_code == 200
    history = response.json()
    assert [entry['action'] for entry in history] == ['Reset', 'Consume', 'SetBudget']
    assert history[1]['label'] == config.consume_label
    assert history[1]['remaining_after'] == -200
    assert history[0]['performed_by'] == {'user_id': str(admin.user_id), 'full_name': 'Ana Admin'}


def test_snake_case_bodies_are_accepted(client, scholar):
    response = client.put(f"{BASE}/allowances/{scholar.user_id}/budget", json={'allotted_budget': 250})
    assert response.status_code == 200

    response = client.put(f"{BASE}/allowances/{scholar.user_id}/given", json={'add_amount': 50})
    assert response.status_code == 200
    assert response.json()['remaining'] == 200


def test_invalid_amounts_are_client_errors(client, scholar):
    response = client.put(f"{BASE}/book/{scholar.user_id}/budget", json={'allottedBudget': -5})
    assert response.status_code == 400
    assert 'allotted budget' in response.json()['detail']

    response = client.put(f"{BASE}/book/{scholar.user_id}/reimburse", json={'addAmount': 0})
    assert response.status_code == 400

    response = client.put(f"{BASE}/book/{scholar.user_id}/reimburse", json={'addAmount': 'lots'})
    assert response.status_code == 422

    response = client.get(f"{BASE}/book/{scholar.user_id}/history")
    assert response.json() == []


def test_unknown_scholar_is_not_found(client, make_user):
    pending = make_user(verified=False)

    for scholar_id in (pending.user_id, uuid.uuid4()):
        response = client.put(f"{BASE}/tuition/{scholar_id}/pay", json={'addAmount': 10})
        assert response.status_code == 404
        assert response.json()['detail'] == f"Scholar {scholar_id} not found or not verified"


def test_get_single_record(client, scholar):
    response = client.get(f"{BASE}/tuition-reimbursement/{scholar.user_id}")
    assert response.status_code == 404

    client.put(f"{BASE}/tuition-reimbursement/{scholar.user_id}/reimburse", json={'addAmount': 320.5})
    response = client.get(f"{BASE}/tuition-reimbursement/{scholar.user_id}")
    assert response.status_code == 200
    assert response.json()['total_consumed'] == 320.5


def test_store_outage_is_reported_as_server_error(client, scholar, monkeypatch):
    def unavailable(session, scholar_id):
        raise OperationalError('SELECT users', {}, Exception('timeout'))

    monkeypatch.setattr(directory_service, 'find_verified_scholar_by_id', unavailable)

    response = client.put(f"{BASE}/allowances/{scholar.user_id}/given", json={'addAmount': 10})
    assert response.status_code == 503
    assert 'unavailable' in response.json()['detail']


def test_listing_with_no_scholars(client):
    response = client.get(f"{BASE}/allowances")
    assert response.status_code == 200
    assert response.json() == []


def test_programs_and_health(client):
    response = client.get(f"{BASE}/programs")
    assert response.status_code == 200
    verbs = {item['program']: item['consume_verb'] for item in response.json()}
    assert verbs == {
        'allowance': 'given',
        'book_reimbursement': 'reimburse',
        'tuition_payment': 'pay',
        'tuition_reimbursement': 'reimburse',
    }

    assert client.get(f"{BASE}/health").json() == {'status': 'ok'}


def test_huge_amounts_never_reach_the_store(client, scholar):
    for _ in range(2):
        response = client.put(f"{BASE}/allowances/{scholar.user_id}/given", json={'addAmount': 1e308})
        assert response.status_code == 400

    client.put(f"{BASE}/allowances/{scholar.user_id}/given", json={'addAmount': 25})
    (row,) = client.get(f"{BASE}/allowances").json()
    assert row['total_consumed'] == 25
    assert row['remaining'] == -25
