"""
CreatorProfile model — a creator who signed up. Read-only from the matching core.
"""
from sqlalchemy import Column, Integer, Float, Text, DateTime, JSON
from sqlalchemy.sql import func

from creatorlink.database import Base


class CreatorProfile(Base):
    __tablename__ = 'creator_profiles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=True)   # set once linked to a real account
    display_name = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    niche = Column(JSON, default=list)
    youtube_subscribers = Column(Integer, nullable=True)
    tiktok_followers = Column(Integer, nullable=True)
    instagram_followers = Column(Integer, nullable=True)
    youtube_channel_id = Column(Text, nullable=True)
    tiktok_handle = Column(Text, nullable=True)
    instagram_handle = Column(Text, nullable=True)
    engagement_rate = Column(Float, nullable=True)
    brand_readiness_score = Column(Float, nullable=True)
    past_brands = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
