"""
Discovery routes — discovered-creator import and the creator claim flow.
"""
import logging

from flask import Blueprint, request, jsonify

from creatorlink.database import get_session
from creatorlink.models.creator_profile import CreatorProfile
from creatorlink.services.discovery import import_discovered_creators
from creatorlink.services.identity import link_joined_creator

logger = logging.getLogger(__name__)

bp = Blueprint('discovery', __name__)


@bp.route('/api/discovered-creators/import', methods=['POST'])
def import_creators():
    """Upsert harvested channels; niches and rising score are derived on import."""
    data = request.get_json(silent=True) or {}
    channels = data.get('channels')
    if not channels or not isinstance(channels, list):
        return jsonify({'error': 'No channels to import'}), 400

    session = get_session()
    try:
        summary = import_discovered_creators(session, channels)
        return jsonify(summary.to_dict())
    except Exception as e:
        logger.error("Discovered creator import failed", exc_info=True)
        return jsonify({'error': str(e)}), 500
    finally:
        session.close()


@bp.route('/api/creators/<int:profile_id>/claim', methods=['POST'])
def claim_discovered_creator(profile_id):
    """A signed-up creator claims their discovered row; outreach to them stops."""
    data = request.get_json(silent=True) or {}
    try:
        discovered_creator_id = int(data['discovered_creator_id'])
    except (KeyError, TypeError, ValueError):
        return jsonify({'error': 'discovered_creator_id must be an integer'}), 400

    session = get_session()
    try:
        if session.get(CreatorProfile, profile_id) is None:
            return jsonify({'error': 'Creator not found'}), 404

        result = link_joined_creator(session, discovered_creator_id, profile_id)
        if result.reason == 'creator_not_found':
            return jsonify({'error': 'Discovered creator not found'}), 404
        if result.reason == 'already_claimed':
            return jsonify({'error': 'Discovered creator already claimed'}), 409
        if not result.found:
            return jsonify({'error': result.reason}), 500

        identity = result.identity
        return jsonify({
            'success': True,
            'creator_identity_id': identity.id,
            'status': identity.status,
            'discovered_creator_id': discovered_creator_id,
        })
    except Exception as e:
        session.rollback()
        logger.error("Claim failed for profile %s / creator %s", profile_id, discovered_creator_id, exc_info=True)
        return jsonify({'error': str(e)}), 500
    finally:
        session.close()
