"""
Campaign model — a brand's paid campaign and its creator requirements.
"""
from sqlalchemy import Column, Integer, Float, Text, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func

from creatorlink.database import Base


class Campaign(Base):
    __tablename__ = 'campaigns'

    id = Column(Integer, primary_key=True, autoincrement=True)
    brand_profile_id = Column(Integer, ForeignKey('brand_profiles.id'), nullable=False, index=True)
    name = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default='active')
    target_niches = Column(JSON, nullable=True)
    min_followers = Column(Integer, nullable=True)
    max_followers = Column(Integer, nullable=True)
    target_engagement_rate = Column(Float, nullable=True)
    preferred_platforms = Column(JSON, nullable=True)
    content_style = Column(JSON, nullable=True)
    ideal_creator_description = Column(Text, nullable=True)
    content_requirements = Column(Text, nullable=True)
    brief = Column(Text, nullable=True)
    budget_per_creator = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
