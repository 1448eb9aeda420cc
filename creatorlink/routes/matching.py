"""
Matching routes — brand-side creator rankings and creator-side opportunities.
"""
import logging

from flask import Blueprint, request, jsonify
from sqlalchemy import select

from creatorlink.config import MATCHING_MAX_WORKERS
from creatorlink.database import get_session
from creatorlink.matching.base import BrandCriteria, CampaignCriteria, CreatorFeatures
from creatorlink.matching.scoring import (
    rank_campaigns_for_creator,
    rank_creators_for_brand,
    rank_creators_for_campaign,
)
from creatorlink.models.campaign import Campaign
from creatorlink.models.creator_profile import CreatorProfile
from creatorlink.models.discovered_creator import DiscoveredCreator

logger = logging.getLogger(__name__)

bp = Blueprint('matching', __name__)


def _discovered_features(session):
    rows = session.execute(select(DiscoveredCreator).order_by(DiscoveredCreator.id)).scalars().all()
    return {f"discovered:{dc.id}": dc for dc in rows}, [CreatorFeatures.from_discovered(dc) for dc in rows]


def _creator_entry(entry, rows):
    dc = rows[entry.key]
    return {
        'id': dc.id,
        'name': dc.display_name,
        'platform': dc.platform,
        'subscriber_count': dc.subscriber_count,
        'thumbnail_url': dc.thumbnail_url,
        **entry.to_dict(),
    }


@bp.route('/api/campaigns/<int:campaign_id>/creators')
def campaign_creators(campaign_id):
    """Discovered creators ranked by brand fit for this campaign's criteria."""
    min_score = request.args.get('min_score', 0, type=int)
    limit = request.args.get('limit', 50, type=int)

    session = get_session()
    try:
        campaign = session.get(Campaign, campaign_id)
        if not campaign:
            return jsonify({'error': 'Campaign not found'}), 404

        rows, creators = _discovered_features(session)
        ranked = rank_creators_for_brand(BrandCriteria.from_campaign(campaign), creators)
        ranked = [e for e in ranked if e.match.score >= min_score][:limit]

        return jsonify({
            'campaign_id': campaign.id,
            'campaign_name': campaign.name,
            'creators': [_creator_entry(e, rows) for e in ranked],
        })
    except Exception as e:
        logger.error("Ranking creators for campaign %s failed", campaign_id, exc_info=True)
        return jsonify({'error': str(e)}), 500
    finally:
        session.close()


@bp.route('/api/campaigns/<int:campaign_id>/matches')
def campaign_matches(campaign_id):
    """Tiered campaign matches (perfect/strong/potential) plus follower-gated misses."""
    session = get_session()
    try:
        campaign = session.get(Campaign, campaign_id)
        if not campaign:
            return jsonify({'error': 'Campaign not found'}), 404

        rows, creators = _discovered_features(session)
        ranking = rank_creators_for_campaign(
            CampaignCriteria.from_campaign(campaign), creators,
            max_workers=MATCHING_MAX_WORKERS or None,
        )

        return jsonify({
            'campaign_id': campaign.id,
            'campaign_name': campaign.name,
            'perfect': [_creator_entry(e, rows) for e in ranking.perfect],
            'strong': [_creator_entry(e, rows) for e in ranking.strong],
            'potential': [_creator_entry(e, rows) for e in ranking.potential],
            'missed': [_creator_entry(e, rows) for e in ranking.missed],
        })
    except Exception as e:
        logger.error("Tiered matching for campaign %s failed", campaign_id, exc_info=True)
        return jsonify({'error': str(e)}), 500
    finally:
        session.close()


@bp.route('/api/creators/<int:profile_id>/opportunities')
def creator_opportunities(profile_id):
    """Active campaigns a creator matches, and the ones their follower count misses."""
    session = get_session()
    try:
        profile = session.get(CreatorProfile, profile_id)
        if not profile:
            return jsonify({'error': 'Creator not found'}), 404

        campaigns = session.execute(
            select(Campaign).where(Campaign.status == 'active').order_by(Campaign.id)
        ).scalars().all()
        by_key = {f"campaign:{c.id}": c for c in campaigns}
        ranking = rank_campaigns_for_creator(
            CreatorFeatures.from_profile(profile),
            [CampaignCriteria.from_campaign(c) for c in campaigns],
        )

        def _campaign_entry(entry):
            c = by_key[entry.key]
            return {
                'id': c.id,
                'name': c.name,
                'brand_profile_id': c.brand_profile_id,
                'budget_per_creator': c.budget_per_creator,
                **entry.to_dict(),
            }

        return jsonify({
            'creator_profile_id': profile.id,
            'perfect': [_campaign_entry(e) for e in ranking.perfect],
            'strong': [_campaign_entry(e) for e in ranking.strong],
            'potential': [_campaign_entry(e) for e in ranking.potential],
            'missed': [_campaign_entry(e) for e in ranking.missed],
            'total_budget': ranking.total_budget,
            'missed_budget': ranking.missed_budget,
        })
    except Exception as e:
        logger.error("Opportunities for creator %s failed", profile_id, exc_info=True)
        return jsonify({'error': str(e)}), 500
    finally:
        session.close()
