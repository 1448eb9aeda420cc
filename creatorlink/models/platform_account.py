"""
PlatformAccount model — one external account owned by exactly one CreatorIdentity.

match_method records how the account was tied to the identity
(e.g. "direct_discovery").
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from creatorlink.database import Base


class PlatformAccount(Base):
    __tablename__ = 'creator_platform_accounts'

    id = Column(Integer, primary_key=True, autoincrement=True)
    creator_identity_id = Column(Integer, ForeignKey('creator_identities.id'), nullable=False, index=True)
    platform = Column(Text, nullable=False)
    platform_id = Column(Text, nullable=False)
    platform_username = Column(Text, nullable=True)
    platform_url = Column(Text, nullable=True)
    followers = Column(Integer, default=0)
    profile_image_url = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    email_found = Column(Text, nullable=True)
    discovered_creator_id = Column(Integer, ForeignKey('discovered_creators.id'), nullable=True)
    match_method = Column(Text, nullable=False, default='direct_discovery')
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    identity = relationship('CreatorIdentity', back_populates='platform_accounts')

    __table_args__ = (
        UniqueConstraint('platform', 'platform_id', name='uq_platform_account_platform_id'),
        UniqueConstraint('discovered_creator_id', name='uq_platform_account_discovered_creator'),
    )
