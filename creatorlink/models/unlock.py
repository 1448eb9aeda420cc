"""
DiscoveredCreatorUnlock model — one row per brand per unlocked discovered creator.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from creatorlink.database import Base


class DiscoveredCreatorUnlock(Base):
    __tablename__ = 'discovered_creator_unlocks'

    id = Column(Integer, primary_key=True, autoincrement=True)
    brand_profile_id = Column(Integer, ForeignKey('brand_profiles.id'), nullable=False)
    discovered_creator_id = Column(Integer, ForeignKey('discovered_creators.id'), nullable=False)
    unlocked_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('brand_profile_id', 'discovered_creator_id', name='uq_unlock_brand_creator'),
    )
