"""
CreatorIdentity model — canonical, platform-agnostic record for a creator who
has not (yet) joined as a user. The outreach target and dedup key.

Lifecycle: discovered → contacted → joined. Transitions only move forward.
"""
from sqlalchemy import Column, Integer, Float, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from creatorlink.config import IDENTITY_STATUSES
from creatorlink.database import Base


class InvalidStatusTransition(ValueError):
    """Raised when a status change would move an identity backwards."""
    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move creator identity from '{current}' to '{requested}'")


class CreatorIdentity(Base):
    __tablename__ = 'creator_identities'

    id = Column(Integer, primary_key=True, autoincrement=True)
    display_name = Column(Text, nullable=True)
    profile_image_url = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    contact_email = Column(Text, nullable=True)
    contact_email_source = Column(Text, nullable=True)
    contact_email_confidence = Column(Float, default=0.0)
    backup_emails = Column(JSON, default=list)
    hub_url = Column(Text, nullable=True)
    social_links = Column(JSON, default=dict)
    total_followers = Column(Integer, default=0)
    primary_platform = Column(Text, nullable=True)
    primary_niche = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default='discovered')
    creator_profile_id = Column(Integer, ForeignKey('creator_profiles.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    platform_accounts = relationship('PlatformAccount', back_populates='identity')

    @property
    def has_joined(self):
        return self.creator_profile_id is not None or self.status == 'joined'

    def advance_status(self, new_status):
        """
        Move the lifecycle forward. Re-applying the current status is a no-op;
        moving backwards raises InvalidStatusTransition.

        Returns True if the status changed.
        """
        if new_status not in IDENTITY_STATUSES:
            raise ValueError(f"Unknown identity status '{new_status}'")
        current = self.status or 'discovered'
        if IDENTITY_STATUSES.index(new_status) < IDENTITY_STATUSES.index(current):
            raise InvalidStatusTransition(current, new_status)
        if new_status == current:
            return False
        self.status = new_status
        return True
