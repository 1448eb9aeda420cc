"""
OutreachEvent model — one row per outreach email attempt.

Doubles as the audit trail and the dedup signal. A row is written as
'pending' before dispatch and finished as 'sent' or 'failed' afterwards.
dedup_key is unique: holding it is what entitles a trigger to send, and a
failed send releases it.
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func

from creatorlink.database import Base


class OutreachEvent(Base):
    __tablename__ = 'outreach_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    creator_identity_id = Column(Integer, ForeignKey('creator_identities.id'), nullable=False)
    discovered_creator_id = Column(Integer, ForeignKey('discovered_creators.id'), nullable=True)
    email_sent_to = Column(Text, nullable=False)
    template_type = Column(Text, nullable=False)
    triggering_brand_id = Column(Integer, nullable=False)
    triggering_campaign_id = Column(Integer, nullable=True)
    triggering_action = Column(Text, nullable=False)
    provider_message_id = Column(Text, nullable=True)
    status = Column(Text, nullable=False)             # pending / sent / failed
    error = Column(Text, nullable=True)
    dedup_key = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('ix_outreach_events_identity_template', 'creator_identity_id', 'template_type'),
        Index('ux_outreach_events_dedup_key', 'dedup_key', unique=True),
    )
