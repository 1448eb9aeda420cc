"""
Outreach routes — brand unlocks a discovered creator, generic outreach trigger.
"""
import logging

from flask import Blueprint, request, jsonify
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from creatorlink import extensions
from creatorlink.config import OUTREACH_ACTIONS
from creatorlink.database import get_session
from creatorlink.models.brand_profile import BrandProfile
from creatorlink.models.discovered_creator import DiscoveredCreator
from creatorlink.models.unlock import DiscoveredCreatorUnlock
from creatorlink.services.outreach import OutreachOrchestrator

logger = logging.getLogger(__name__)

bp = Blueprint('outreach', __name__)


def _orchestrator():
    return OutreachOrchestrator(extensions.email_sender, session_factory=get_session)


def _int_field(data, name, required=True):
    value = data.get(name)
    if value is None:
        if required:
            raise ValueError(f'{name} is required')
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f'{name} must be an integer')


# ── Unlocks ──────────────────────────────────────────────────────────────────

@bp.route('/api/unlocks/discovered', methods=['POST'])
def unlock_discovered_creator():
    """
    Record that a brand unlocked a discovered creator, then try outreach.

    The unlock is the primary effect: outreach problems are logged and
    reported in the body, never turned into an error response.
    """
    data = request.get_json(silent=True) or {}
    try:
        brand_profile_id = _int_field(data, 'brand_profile_id')
        discovered_creator_id = _int_field(data, 'discovered_creator_id')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    session = get_session()
    try:
        if session.get(BrandProfile, brand_profile_id) is None:
            return jsonify({'error': 'Brand not found'}), 404
        if session.get(DiscoveredCreator, discovered_creator_id) is None:
            return jsonify({'error': 'Creator not found'}), 404

        created = True
        try:
            session.add(DiscoveredCreatorUnlock(
                brand_profile_id=brand_profile_id,
                discovered_creator_id=discovered_creator_id,
            ))
            session.commit()
        except IntegrityError:
            session.rollback()
            created = False

        unlock = session.execute(
            select(DiscoveredCreatorUnlock).where(
                DiscoveredCreatorUnlock.brand_profile_id == brand_profile_id,
                DiscoveredCreatorUnlock.discovered_creator_id == discovered_creator_id,
            )
        ).scalar_one()
        unlock_id = unlock.id
    except Exception as e:
        session.rollback()
        logger.error("Unlock failed for brand %s / creator %s", brand_profile_id, discovered_creator_id, exc_info=True)
        return jsonify({'error': str(e)}), 500
    finally:
        session.close()

    outreach = None
    try:
        outreach = _orchestrator().trigger_outreach(
            discovered_creator_id=discovered_creator_id,
            brand_profile_id=brand_profile_id,
            action='unlock',
        ).to_dict()
    except Exception:
        logger.error("Outreach after unlock failed for creator %s", discovered_creator_id, exc_info=True)

    return jsonify({
        'success': True,
        'unlock_id': unlock_id,
        'already_unlocked': not created,
        'outreach': outreach,
    }), 201 if created else 200


# ── Generic trigger ──────────────────────────────────────────────────────────

@bp.route('/api/outreach', methods=['POST'])
def trigger_outreach():
    """Fire outreach for a brand action (message, campaign_match, contacted, ...)."""
    data = request.get_json(silent=True) or {}
    action = data.get('action')
    if action not in OUTREACH_ACTIONS:
        return jsonify({'error': f"action must be one of {', '.join(OUTREACH_ACTIONS)}"}), 400

    try:
        kwargs = {
            'brand_profile_id': _int_field(data, 'brand_profile_id'),
            'discovered_creator_id': _int_field(data, 'discovered_creator_id', required=False),
            'creator_profile_id': _int_field(data, 'creator_profile_id', required=False),
            'campaign_id': _int_field(data, 'campaign_id', required=False),
        }
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        result = _orchestrator().trigger_outreach(
            action=action,
            campaign_name=data.get('campaign_name'),
            message_preview=data.get('message_preview'),
            **kwargs,
        )
    except Exception as e:
        logger.error("Outreach trigger %s failed", action, exc_info=True)
        return jsonify({'error': str(e)}), 500
    return jsonify(result.to_dict())
