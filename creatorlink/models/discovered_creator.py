"""
DiscoveredCreator model — one row per creator harvested from an external platform.

Deduplicated by (platform, platform_id). Linked to a CreatorIdentity lazily,
the first time a brand action makes the creator worth contacting.
"""
from sqlalchemy import Column, Integer, Float, Text, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from creatorlink.database import Base


class DiscoveredCreator(Base):
    __tablename__ = 'discovered_creators'

    id = Column(Integer, primary_key=True, autoincrement=True)
    platform = Column(Text, nullable=False, default='youtube')
    platform_id = Column(Text, nullable=False)       # channel id / IG handle / TikTok id
    name = Column(Text, nullable=True)
    channel_title = Column(Text, nullable=True)
    channel_url = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    subscriber_count = Column(Integer, default=0)
    engagement_rate = Column(Float, nullable=True)    # percent, e.g. 6.2
    niche = Column(JSON, default=list)
    primary_niche = Column(Text, nullable=True)
    brand_readiness_score = Column(Float, nullable=True)
    rising_score = Column(Float, nullable=True)
    audience_quality_score = Column(Float, nullable=True)
    creator_identity_id = Column(Integer, ForeignKey('creator_identities.id'), nullable=True, index=True)
    claimed_by = Column(Integer, ForeignKey('creator_profiles.id'), nullable=True)
    first_seen_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('platform', 'platform_id', name='uq_discovered_creator_platform_id'),
    )

    @property
    def display_name(self):
        return self.name or self.channel_title or ''
