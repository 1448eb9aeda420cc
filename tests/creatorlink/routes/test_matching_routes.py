"""Tests for creatorlink.routes.matching — campaign rankings and creator opportunities."""
import pytest
from unittest.mock import patch

from creatorlink.models.creator_profile import CreatorProfile


@pytest.fixture(autouse=True)
def patch_matching_session(db_session):
    with patch('creatorlink.routes.matching.get_session', return_value=db_session):
        yield db_session


def _tiered_ids(data):
    return {c['id'] for tier in ('perfect', 'strong', 'potential') for c in data[tier]}


class TestCampaignCreators:

    def test_ranks_discovered_creators(self, client, make_campaign, make_discovered_creator):
        campaign = make_campaign()
        jane = make_discovered_creator()
        make_discovered_creator(name='Gamer Greg', niche=['gaming'], primary_niche='gaming',
                                description='speedruns every night', platform='youtube')

        resp = client.get(f'/api/campaigns/{campaign.id}/creators')

        assert resp.status_code == 200
        data = resp.get_json()
        assert data['campaign_name'] == 'Summer Glow'
        assert len(data['creators']) == 2
        top = data['creators'][0]
        assert top['id'] == jane.id
        assert top['name'] == 'Jane Doe'
        assert top['grade'] in ('A+', 'A', 'B+', 'B', 'C', 'D')
        assert top['score'] >= data['creators'][1]['score']

    def test_min_score_and_limit(self, client, make_campaign, make_discovered_creator):
        campaign = make_campaign()
        for _ in range(3):
            make_discovered_creator()
        assert len(client.get(f'/api/campaigns/{campaign.id}/creators?limit=2').get_json()['creators']) == 2
        assert client.get(f'/api/campaigns/{campaign.id}/creators?min_score=101').get_json()['creators'] == []

    def test_unknown_campaign(self, client):
        assert client.get('/api/campaigns/999/creators').status_code == 404


class TestCampaignMatches:

    def test_splits_tiers_and_missed(self, client, make_campaign, make_discovered_creator):
        campaign = make_campaign()
        jane = make_discovered_creator()
        tiny = make_discovered_creator(name='Tiny Tess', subscriber_count=500)

        resp = client.get(f'/api/campaigns/{campaign.id}/matches')

        assert resp.status_code == 200
        data = resp.get_json()
        assert jane.id in _tiered_ids(data)
        assert [c['id'] for c in data['missed']] == [tiny.id]
        missed = data['missed'][0]
        assert missed['tier'] is None
        assert missed['meets_follower_range'] is False
        assert missed['follower_gap'] == {'type': 'below', 'current': 500, 'needed': 10000, 'gap': 9500}

    def test_parallel_scoring_matches_sequential(self, client, make_campaign, make_discovered_creator):
        campaign = make_campaign()
        for n in range(6):
            make_discovered_creator(subscriber_count=5000 * (n + 1))
        sequential = client.get(f'/api/campaigns/{campaign.id}/matches').get_json()
        with patch('creatorlink.routes.matching.MATCHING_MAX_WORKERS', 3):
            parallel = client.get(f'/api/campaigns/{campaign.id}/matches').get_json()
        assert parallel == sequential

    def test_unknown_campaign(self, client):
        assert client.get('/api/campaigns/999/matches').status_code == 404


class TestCreatorOpportunities:

    def _profile(self, db_session, **overrides):
        defaults = dict(display_name='Jane', bio='beauty and skincare tutorials', niche=['beauty'],
                        instagram_followers=25000, instagram_handle='janedoes', engagement_rate=4.0)
        defaults.update(overrides)
        profile = CreatorProfile(**defaults)
        db_session.add(profile)
        db_session.commit()
        return profile

    def test_budgets_split_between_matches_and_missed(self, client, db_session, make_campaign):
        profile = self._profile(db_session)
        fit = make_campaign(budget_per_creator=500.0)
        big = make_campaign(name='Mega Launch', min_followers=100000, max_followers=None,
                            budget_per_creator=2000.0)
        make_campaign(name='Old Promo', status='paused', budget_per_creator=9999.0)

        resp = client.get(f'/api/creators/{profile.id}/opportunities')

        assert resp.status_code == 200
        data = resp.get_json()
        assert _tiered_ids(data) == {fit.id}
        assert [c['id'] for c in data['missed']] == [big.id]
        assert data['missed'][0]['follower_gap']['gap'] == 75000
        assert data['total_budget'] == 500.0
        assert data['missed_budget'] == 2000.0

    def test_unknown_creator(self, client):
        assert client.get('/api/creators/999/opportunities').status_code == 404
