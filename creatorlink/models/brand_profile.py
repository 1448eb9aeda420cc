"""
BrandProfile model — brand-side targeting criteria. Mutated only by brand edits.
"""
from sqlalchemy import Column, Integer, Float, Text, DateTime, JSON
from sqlalchemy.sql import func

from creatorlink.database import Base


class BrandProfile(Base):
    __tablename__ = 'brand_profiles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=True)
    company_name = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)
    website = Column(Text, nullable=True)
    industry = Column(JSON, nullable=True)
    bio = Column(Text, nullable=True)
    target_niches = Column(JSON, nullable=True)
    target_keywords = Column(JSON, nullable=True)
    min_followers = Column(Integer, nullable=True)
    max_followers = Column(Integer, nullable=True)
    target_engagement_rate = Column(Float, nullable=True)
    preferred_platforms = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
