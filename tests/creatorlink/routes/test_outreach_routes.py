"""Tests for creatorlink.routes.outreach — unlock endpoint + generic outreach trigger."""
import pytest
from unittest.mock import patch

from sqlalchemy import func, select

from creatorlink.models.outreach_event import OutreachEvent
from creatorlink.models.unlock import DiscoveredCreatorUnlock


@pytest.fixture(autouse=True)
def patch_outreach_session(db_session):
    """Patch get_session where the outreach routes imported it."""
    with patch('creatorlink.routes.outreach.get_session', return_value=db_session):
        yield db_session


@pytest.fixture
def patch_sender(sender):
    with patch('creatorlink.extensions.email_sender', sender):
        yield sender


def _unlock_count(session):
    return session.execute(select(func.count(DiscoveredCreatorUnlock.id))).scalar()


# ---------------------------------------------------------------------------
# POST /api/unlocks/discovered
# ---------------------------------------------------------------------------

class TestUnlockDiscovered:

    def test_records_unlock_and_sends(self, client, db_session, patch_sender, make_brand, make_discovered_creator):
        brand = make_brand()
        dc = make_discovered_creator()

        resp = client.post('/api/unlocks/discovered', json={
            'brand_profile_id': brand.id, 'discovered_creator_id': dc.id,
        })

        assert resp.status_code == 201
        data = resp.get_json()
        assert data['success'] is True
        assert data['already_unlocked'] is False
        assert data['outreach']['sent'] is True
        assert data['outreach']['template_type'] == 'interest_alert'
        assert _unlock_count(db_session) == 1
        assert len(patch_sender.sent) == 1

    def test_second_unlock_is_idempotent(self, client, db_session, patch_sender, make_brand, make_discovered_creator):
        brand = make_brand()
        dc = make_discovered_creator()
        body = {'brand_profile_id': brand.id, 'discovered_creator_id': dc.id}

        client.post('/api/unlocks/discovered', json=body)
        resp = client.post('/api/unlocks/discovered', json=body)

        assert resp.status_code == 200
        data = resp.get_json()
        assert data['already_unlocked'] is True
        assert data['outreach']['reason'] == 'already_sent'
        assert _unlock_count(db_session) == 1

    def test_unlock_survives_outreach_crash(self, client, db_session, make_brand, make_discovered_creator):
        brand = make_brand()
        dc = make_discovered_creator()
        with patch('creatorlink.services.outreach.OutreachOrchestrator.trigger_outreach',
                   side_effect=RuntimeError('boom')):
            resp = client.post('/api/unlocks/discovered', json={
                'brand_profile_id': brand.id, 'discovered_creator_id': dc.id,
            })
        assert resp.status_code == 201
        assert resp.get_json()['outreach'] is None
        assert _unlock_count(db_session) == 1

    def test_unlock_survives_failed_send(self, client, db_session, failing_sender, make_brand, make_discovered_creator):
        brand = make_brand()
        dc = make_discovered_creator()
        with patch('creatorlink.extensions.email_sender', failing_sender):
            resp = client.post('/api/unlocks/discovered', json={
                'brand_profile_id': brand.id, 'discovered_creator_id': dc.id,
            })
        assert resp.status_code == 201
        assert resp.get_json()['outreach']['reason'] == 'send_failed'
        assert _unlock_count(db_session) == 1
        event = db_session.execute(select(OutreachEvent)).scalar_one()
        assert event.status == 'failed'

    def test_missing_fields(self, client):
        resp = client.post('/api/unlocks/discovered', json={'brand_profile_id': 1})
        assert resp.status_code == 400
        assert 'discovered_creator_id' in resp.get_json()['error']

    def test_non_integer_id(self, client):
        resp = client.post('/api/unlocks/discovered', json={
            'brand_profile_id': 'abc', 'discovered_creator_id': 1,
        })
        assert resp.status_code == 400

    def test_unknown_creator(self, client, make_brand):
        brand = make_brand()
        resp = client.post('/api/unlocks/discovered', json={
            'brand_profile_id': brand.id, 'discovered_creator_id': 999,
        })
        assert resp.status_code == 404

    def test_unknown_brand(self, client, make_discovered_creator):
        dc = make_discovered_creator()
        resp = client.post('/api/unlocks/discovered', json={
            'brand_profile_id': 999, 'discovered_creator_id': dc.id,
        })
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# POST /api/outreach
# ---------------------------------------------------------------------------

class TestTriggerOutreach:

    def test_campaign_match(self, client, patch_sender, make_brand, make_discovered_creator):
        brand = make_brand()
        dc = make_discovered_creator()
        resp = client.post('/api/outreach', json={
            'action': 'campaign_match',
            'brand_profile_id': brand.id,
            'discovered_creator_id': dc.id,
            'campaign_id': 3,
            'campaign_name': 'Summer Glow',
        })
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['sent'] is True
        assert data['sent_to'] == 'jane@brandmail.com'
        assert data['template_type'] == 'campaign_match'

    def test_no_email_reports_manual_outreach(self, client, patch_sender, make_brand, make_discovered_creator):
        brand = make_brand()
        dc = make_discovered_creator(description='dm me')
        resp = client.post('/api/outreach', json={
            'action': 'message', 'brand_profile_id': brand.id, 'discovered_creator_id': dc.id,
        })
        data = resp.get_json()
        assert data['reason'] == 'no_email'
        assert data['needs_manual_outreach'] is True
        assert patch_sender.sent == []

    def test_bad_action(self, client):
        resp = client.post('/api/outreach', json={'action': 'poke', 'brand_profile_id': 1})
        assert resp.status_code == 400

    def test_missing_brand(self, client):
        resp = client.post('/api/outreach', json={'action': 'unlock'})
        assert resp.status_code == 400

    def test_database_error_is_json_500(self, client, make_brand, make_discovered_creator):
        brand = make_brand()
        dc = make_discovered_creator()
        with patch('creatorlink.services.identity.IdentityResolver.resolve_by_discovered_id',
                   side_effect=RuntimeError('db down')):
            resp = client.post('/api/outreach', json={
                'action': 'message', 'brand_profile_id': brand.id, 'discovered_creator_id': dc.id,
            })
        assert resp.status_code == 500
        assert resp.get_json() == {'error': 'db down'}
