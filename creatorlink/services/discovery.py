"""
Discovered-creator ingest — upsert harvested channels/accounts by
(platform, platform_id), filling niches and the rising score on the way in.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from creatorlink.config import PLATFORMS
from creatorlink.matching.categorize import calculate_rising_score, categorize_creator
from creatorlink.models.discovered_creator import DiscoveredCreator

logger = logging.getLogger('services.discovery')

MAX_DESCRIPTION_LENGTH = 500


@dataclass
class ImportSummary:
    imported: int = 0
    updated: int = 0
    failed: List[Dict] = field(default_factory=list)

    def to_dict(self):
        return {'imported': self.imported, 'updated': self.updated, 'failed': list(self.failed)}


def _find(session, platform, platform_id):
    return session.execute(
        select(DiscoveredCreator).where(
            DiscoveredCreator.platform == platform,
            DiscoveredCreator.platform_id == platform_id,
        )
    ).scalar_one_or_none()


def _apply(dc, channel):
    title = channel.get('title') or channel.get('name') or ''
    description = (channel.get('description') or '')[:MAX_DESCRIPTION_LENGTH]
    followers = int(channel.get('subscriber_count') or channel.get('followers') or 0)
    total_posts = int(channel.get('total_posts') or channel.get('video_count') or 0)
    avg_views = channel.get('avg_views')
    if avg_views is None and channel.get('view_count') is not None:
        avg_views = int(channel['view_count']) / max(total_posts, 1)

    niches = list(channel.get('niche') or []) or categorize_creator(title, description)

    dc.name = title or dc.name
    dc.channel_title = channel.get('channel_title') or title or dc.channel_title
    dc.channel_url = channel.get('channel_url') or dc.channel_url
    dc.thumbnail_url = channel.get('thumbnail_url') or dc.thumbnail_url
    dc.description = description or dc.description
    dc.subscriber_count = followers
    if channel.get('engagement_rate') is not None:
        dc.engagement_rate = float(channel['engagement_rate'])
    dc.niche = niches
    dc.primary_niche = niches[0]
    dc.rising_score = calculate_rising_score(
        followers,
        channel.get('growth_7d'),
        channel.get('growth_30d'),
        avg_views or 0,
        total_posts,
    )


def upsert_discovered_creator(session, channel: Dict):
    """
    Insert or refresh one discovered creator. Returns (row, created).

    Raises ValueError for a payload without a platform id or with an unknown
    platform. Does not commit.
    """
    platform = (channel.get('platform') or 'youtube').lower()
    platform_id = channel.get('platform_id') or channel.get('id')
    if not platform_id:
        raise ValueError('platform_id is required')
    if platform not in PLATFORMS:
        raise ValueError(f"unknown platform '{platform}'")
    platform_id = str(platform_id)

    dc = _find(session, platform, platform_id)
    created = dc is None
    if created:
        dc = DiscoveredCreator(platform=platform, platform_id=platform_id)
        session.add(dc)
    _apply(dc, channel)
    session.flush()
    return dc, created


def import_discovered_creators(session, channels: List[Dict]) -> ImportSummary:
    """Upsert a batch, committing per creator so one bad row never sinks the rest."""
    summary = ImportSummary()
    for channel in channels:
        ref = channel.get('platform_id') or channel.get('id')
        try:
            try:
                _dc, created = upsert_discovered_creator(session, channel)
                session.commit()
            except IntegrityError:
                # Inserted concurrently; the retry finds the row and updates it
                session.rollback()
                _dc, created = upsert_discovered_creator(session, channel)
                session.commit()
        except ValueError as e:
            session.rollback()
            summary.failed.append({'platform_id': ref, 'error': str(e)})
            continue
        except Exception as e:
            session.rollback()
            logger.error("Import failed for discovered creator %s", ref, exc_info=True)
            summary.failed.append({'platform_id': ref, 'error': str(e)})
            continue

        if created:
            summary.imported += 1
        else:
            summary.updated += 1

    logger.info(
        "Imported %d, updated %d, failed %d discovered creators",
        summary.imported, summary.updated, len(summary.failed),
    )
    return summary
