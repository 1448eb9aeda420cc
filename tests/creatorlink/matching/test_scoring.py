"""Tests for creatorlink.matching.scoring — brand and campaign match scoring."""
import pytest
from unittest.mock import patch

from creatorlink.matching.base import (
    BrandCriteria,
    CampaignCriteria,
    CreatorFeatures,
)
from creatorlink.matching.scoring import (
    _default_config,
    extract_keywords,
    format_followers,
    follower_gap,
    grade_for_score,
    load_scoring_config,
    rank_campaigns_for_creator,
    rank_creators_for_brand,
    rank_creators_for_campaign,
    score_creator_against_brand,
    score_creator_against_campaign,
    tier_for,
)


# ── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def reset_config_cache():
    """Reset module-level cache between tests so each test starts clean."""
    import creatorlink.matching.scoring as mod
    mod._scoring_config = None
    yield
    mod._scoring_config = None


@pytest.fixture
def jane():
    return CreatorFeatures.from_discovered({
        'id': 1,
        'platform': 'instagram',
        'name': 'Jane Doe',
        'description': 'collab: jane@brandmail.com, insta: @janedoes',
        'subscriber_count': 25000,
        'niche': ['beauty'],
    })


@pytest.fixture
def glow_campaign():
    return CampaignCriteria.from_campaign({
        'id': 7,
        'name': 'Summer Glow',
        'target_niches': ['beauty'],
        'min_followers': 10000,
        'max_followers': 50000,
        'preferred_platforms': ['instagram'],
        'budget_per_creator': 500,
    })


def _creator(key='discovered:1', **kw):
    return CreatorFeatures(key=key, **kw)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

class TestLoadScoringConfig:

    def test_loads_yaml(self):
        cfg = load_scoring_config()
        assert cfg['campaign_weights']['keywords'] == 25
        assert cfg['brand_weights']['niche'] == 30

    def test_cached(self):
        assert load_scoring_config() is load_scoring_config()

    def test_falls_back_to_defaults_when_yaml_missing(self):
        with patch('builtins.open', side_effect=FileNotFoundError('nope')):
            cfg = load_scoring_config()
        assert cfg['version'] == 'default'
        assert cfg == _default_config()

    def test_yaml_and_defaults_agree_on_weights(self):
        cfg = load_scoring_config()
        default = _default_config()
        assert cfg['brand_weights'] == default['brand_weights']
        assert cfg['campaign_weights'] == default['campaign_weights']
        assert cfg['campaign_tiers'] == default['campaign_tiers']


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestExtractKeywords:

    def test_drops_stop_words_and_short_words(self):
        assert extract_keywords("Looking for a skincare creator who loves hiking") == [
            'skincare', 'loves', 'hiking',
        ]

    def test_unique_in_order(self):
        assert extract_keywords("vegan recipes, vegan baking!") == ['vegan', 'recipes', 'baking']

    def test_empty(self):
        assert extract_keywords('') == []
        assert extract_keywords(None) == []


class TestFormatFollowers:

    @pytest.mark.parametrize('n, expected', [
        (999, '999'),
        (25000, '25.0K'),
        (1_500_000, '1.5M'),
    ])
    def test_format(self, n, expected):
        assert format_followers(n) == expected


class TestFollowerGap:

    def test_below(self, glow_campaign):
        gap = follower_gap(glow_campaign, 4000)
        assert gap.kind == 'below'
        assert gap.needed == 10000
        assert gap.shortfall == 6000
        assert gap.to_dict() == {'type': 'below', 'current': 4000, 'needed': 10000, 'gap': 6000}

    def test_above(self, glow_campaign):
        gap = follower_gap(glow_campaign, 90000)
        assert gap.kind == 'above'
        assert gap.max == 50000
        assert gap.to_dict()['too_large'] is True

    def test_inside(self, glow_campaign):
        assert follower_gap(glow_campaign, 10000) is None
        assert follower_gap(glow_campaign, 50000) is None

    def test_defaults_when_unset(self):
        open_campaign = CampaignCriteria(key='campaign:1')
        assert follower_gap(open_campaign, 0) is None
        assert follower_gap(open_campaign, 10_000_001).kind == 'above'


class TestGradesAndTiers:

    @pytest.mark.parametrize('score, grade', [
        (95, 'A+'), (90, 'A+'), (85, 'A'), (72, 'B+'), (60, 'B'), (55, 'C'), (49, 'D'), (0, 'D'),
    ])
    def test_grade(self, score, grade):
        assert grade_for_score(score) == grade

    def test_perfect_needs_two_highlights(self):
        assert tier_for(80, 2) == 'perfect'
        assert tier_for(80, 1) == 'strong'

    def test_strong_and_potential(self):
        assert tier_for(50, 0) == 'strong'
        assert tier_for(49, 5) == 'potential'


# ---------------------------------------------------------------------------
# Campaign scoring
# ---------------------------------------------------------------------------

class TestScoreCreatorAgainstCampaign:

    def test_end_to_end_scenario(self, jane, glow_campaign):
        match = score_creator_against_campaign(glow_campaign, jane)
        assert match.tier in ('strong', 'perfect')
        assert match.meets_follower_range is True
        assert match.follower_gap is None
        assert any('niche' in h.lower() for h in match.highlights)
        assert 'Niche match: beauty' in match.highlights

    def test_exact_score_for_scenario(self, jane, glow_campaign):
        # follower 15 + niche 20 + platform 10 + engagement 5 + style 7.5 = 57.5
        assert score_creator_against_campaign(glow_campaign, jane).score == 58

    def test_sweet_spot_highlight(self, jane, glow_campaign):
        match = score_creator_against_campaign(glow_campaign, jane)
        assert 'Follower count (25.0K) is in their sweet spot' in match.highlights
        assert 'Active on all requested platforms' in match.highlights

    def test_edge_of_range_is_a_reason_not_highlight(self, glow_campaign):
        creator = _creator(followers=11000, niches=('beauty',), platforms=('instagram',))
        match = score_creator_against_campaign(glow_campaign, creator)
        assert 'Follower count in range' in match.reasons

    def test_below_range_has_no_tier_and_gap(self, glow_campaign):
        creator = _creator(followers=4000, niches=('beauty',), platforms=('instagram',))
        match = score_creator_against_campaign(glow_campaign, creator)
        assert match.tier is None
        assert match.meets_follower_range is False
        assert match.follower_gap.shortfall == 6000
        assert 'Follower count outside target range' in match.misses

    def test_above_range_has_no_tier(self, glow_campaign):
        creator = _creator(followers=2_000_000, niches=('beauty',), platforms=('instagram',))
        match = score_creator_against_campaign(glow_campaign, creator)
        assert match.tier is None
        assert match.follower_gap.max == 50000

    def test_no_niche_overlap_is_a_miss(self, glow_campaign):
        creator = _creator(followers=25000, niches=('gaming',), platforms=('instagram',))
        match = score_creator_against_campaign(glow_campaign, creator)
        assert 'No direct niche overlap' in match.misses

    def test_wrong_platform_is_a_miss(self, glow_campaign):
        creator = _creator(followers=25000, niches=('beauty',), platforms=('youtube',))
        match = score_creator_against_campaign(glow_campaign, creator)
        assert 'Not active on requested platforms' in match.misses

    def test_engagement_reason_names_numbers(self):
        campaign = CampaignCriteria(key='campaign:2', target_engagement_rate=5)
        creator = _creator(followers=1000, engagement_rate=6.2)
        match = score_creator_against_campaign(campaign, creator)
        assert 'Engagement 6.2% exceeds your 5% minimum' in match.highlights

    def test_engagement_close_to_target(self):
        campaign = CampaignCriteria(key='campaign:2', target_engagement_rate=5)
        creator = _creator(followers=1000, engagement_rate=4.2)
        match = score_creator_against_campaign(campaign, creator)
        assert 'Engagement 4.2% is close to your 5% minimum' in match.reasons

    def test_engagement_below_target_is_a_miss(self):
        campaign = CampaignCriteria(key='campaign:2', target_engagement_rate=5)
        creator = _creator(followers=1000, engagement_rate=1.0)
        match = score_creator_against_campaign(campaign, creator)
        assert 'Engagement 1% is below your 5% target' in match.misses

    def test_strong_keyword_alignment(self):
        campaign = CampaignCriteria(
            key='campaign:3',
            ideal_creator_description='skincare routine reviews sunscreen moisturizer serum',
        )
        creator = _creator(
            followers=1000,
            bio='Daily skincare routine, honest reviews of sunscreen, moisturizer and serum',
        )
        match = score_creator_against_campaign(campaign, creator)
        assert 'Strong keyword alignment with campaign needs' in match.highlights

    def test_good_keyword_match_quotes_keywords(self):
        campaign = CampaignCriteria(key='campaign:3', brief='skincare sunscreen serum hiking')
        creator = _creator(followers=1000, bio='skincare, sunscreen and serum talk')
        match = score_creator_against_campaign(campaign, creator)
        assert 'Good keyword match: "skincare", "sunscreen", "serum"' in match.highlights

    def test_content_style_match(self):
        campaign = CampaignCriteria(key='campaign:4', content_style=('educational', 'vlogs'))
        creator = _creator(followers=1000, bio='Makeup tutorial videos and tips')
        match = score_creator_against_campaign(campaign, creator)
        assert 'Content style match: educational' in match.reasons

    def test_past_brands_and_readiness_are_reasons(self):
        campaign = CampaignCriteria(key='campaign:5')
        creator = _creator(followers=1000, brand_readiness_score=80, past_brands=('Sephora',))
        match = score_creator_against_campaign(campaign, creator)
        assert 'Brand ready profile' in match.reasons
        assert 'Previous brand collaboration experience' in match.reasons

    def test_score_capped_at_100(self):
        campaign = CampaignCriteria(
            key='campaign:6', target_niches=('beauty',), preferred_platforms=('instagram',),
            target_engagement_rate=3, content_style=('educational',),
            brief='skincare sunscreen serum moisturizer cleanser',
        )
        creator = _creator(
            followers=5_000_000, niches=('beauty',), platforms=('instagram',), engagement_rate=9,
            bio='skincare sunscreen serum moisturizer cleanser tutorial',
            brand_readiness_score=90, past_brands=('Glossier',),
        )
        match = score_creator_against_campaign(campaign, creator)
        assert 0 <= match.score <= 100

    def test_deterministic(self, jane, glow_campaign):
        a = score_creator_against_campaign(glow_campaign, jane)
        b = score_creator_against_campaign(glow_campaign, jane)
        assert a == b
        assert a.reasons == b.reasons


# ---------------------------------------------------------------------------
# Brand scoring
# ---------------------------------------------------------------------------

class TestScoreCreatorAgainstBrand:

    def test_full_match(self):
        brand = BrandCriteria(
            key='brand:1', target_niches=('beauty',), min_followers=10000, max_followers=50000,
            target_engagement_rate=3, preferred_platforms=('instagram',),
            description='skincare sunscreen serum',
        )
        creator = _creator(
            followers=20000, niches=('beauty',), platforms=('instagram',), engagement_rate=4,
            brand_readiness_score=75, bio='skincare sunscreen serum',
        )
        match = score_creator_against_brand(brand, creator)
        assert match.score == 100
        assert match.grade == 'A+'
        assert 'Niche match: beauty' in match.reasons
        assert 'Platform match: instagram' in match.reasons
        assert 'Engagement 4% exceeds your 3% minimum' in match.reasons
        assert 'Strong keyword match' in match.reasons

    def test_no_criteria_is_neutral(self):
        match = score_creator_against_brand(BrandCriteria(key='brand:2'), _creator(followers=5000))
        # niche 15 + followers 20 + engagement 10 + platform 7.5 = 52.5
        assert match.score == 52
        assert match.grade == 'C'

    def test_near_range_gets_partial_credit(self):
        brand = BrandCriteria(key='brand:3', min_followers=10000, max_followers=50000)
        near = score_creator_against_brand(brand, _creator(followers=9000))
        far = score_creator_against_brand(brand, _creator(followers=1000))
        assert near.score > far.score

    def test_from_brand_profile_falls_back_to_industry(self):
        criteria = BrandCriteria.from_brand_profile({'id': 3, 'industry': ['fitness']})
        assert criteria.target_niches == ('fitness',)


# ---------------------------------------------------------------------------
# Rankings
# ---------------------------------------------------------------------------

class TestRankCreatorsForCampaign:

    def _creators(self):
        return [
            _creator('discovered:1', followers=25000, niches=('beauty',), platforms=('instagram',)),
            _creator('discovered:2', followers=4000, niches=('beauty',), platforms=('instagram',)),
            _creator('discovered:3', followers=30000, niches=('gaming',), platforms=('youtube',)),
            _creator('discovered:4', followers=900000, niches=('beauty',), platforms=('instagram',)),
        ]

    def test_follower_gate_exclusivity(self, glow_campaign):
        ranking = rank_creators_for_campaign(glow_campaign, self._creators())
        matching_keys = {e.key for e in ranking.matching}
        missed_keys = {e.key for e in ranking.missed}
        assert matching_keys == {'discovered:1', 'discovered:3'}
        assert missed_keys == {'discovered:2', 'discovered:4'}
        below = next(e for e in ranking.missed if e.key == 'discovered:2')
        assert below.match.follower_gap.shortfall == 10000 - 4000
        above = next(e for e in ranking.missed if e.key == 'discovered:4')
        assert above.match.follower_gap.max == 50000

    def test_sorted_by_score_desc(self, glow_campaign):
        ranking = rank_creators_for_campaign(glow_campaign, self._creators())
        assert [e.key for e in ranking.matching] == ['discovered:1', 'discovered:3']

    def test_ties_broken_by_key(self, glow_campaign):
        twins = [
            _creator('discovered:b', followers=25000, niches=('beauty',), platforms=('instagram',)),
            _creator('discovered:a', followers=25000, niches=('beauty',), platforms=('instagram',)),
        ]
        ranking = rank_creators_for_campaign(glow_campaign, twins)
        assert [e.key for e in ranking.matching] == ['discovered:a', 'discovered:b']

    def test_parallel_matches_sequential(self, glow_campaign):
        creators = self._creators() * 5
        creators = [
            CreatorFeatures(key=f'discovered:{i}', followers=c.followers, niches=c.niches, platforms=c.platforms)
            for i, c in enumerate(creators)
        ]
        sequential = rank_creators_for_campaign(glow_campaign, creators)
        parallel = rank_creators_for_campaign(glow_campaign, creators, max_workers=4)
        assert sequential.to_dict() == parallel.to_dict()


class TestRankCampaignsForCreator:

    def test_budgets(self, jane):
        campaigns = [
            CampaignCriteria(key='campaign:1', target_niches=('beauty',), min_followers=10000,
                             max_followers=50000, budget_per_creator=500),
            CampaignCriteria(key='campaign:2', min_followers=100000, budget_per_creator=2000),
            CampaignCriteria(key='campaign:3', budget_per_creator=None),
        ]
        ranking = rank_campaigns_for_creator(jane, campaigns)
        assert [e.key for e in ranking.missed] == ['campaign:2']
        assert ranking.total_budget == 500
        assert ranking.missed_budget == 2000
        assert {e.key for e in ranking.matching} == {'campaign:1', 'campaign:3'}


class TestRankCreatorsForBrand:

    def test_best_first(self):
        brand = BrandCriteria(key='brand:1', target_niches=('beauty',), preferred_platforms=('instagram',))
        creators = [
            _creator('discovered:1', followers=1000, niches=('gaming',), platforms=('youtube',)),
            _creator('discovered:2', followers=1000, niches=('beauty',), platforms=('instagram',)),
        ]
        ranked = rank_creators_for_brand(brand, creators)
        assert [e.key for e in ranked] == ['discovered:2', 'discovered:1']
        assert ranked[0].match.score > ranked[1].match.score
