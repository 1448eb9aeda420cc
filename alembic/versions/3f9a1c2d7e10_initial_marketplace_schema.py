"""Initial marketplace schema: profiles, campaigns, discovered creators, identities, outreach log

Revision ID: 3f9a1c2d7e10
Revises:
Create Date: 2026-10-12 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOW = sa.text('(CURRENT_TIMESTAMP)')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('creator_profiles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Text(), nullable=True),
        sa.Column('display_name', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('niche', sa.JSON(), nullable=True),
        sa.Column('youtube_subscribers', sa.Integer(), nullable=True),
        sa.Column('tiktok_followers', sa.Integer(), nullable=True),
        sa.Column('instagram_followers', sa.Integer(), nullable=True),
        sa.Column('youtube_channel_id', sa.Text(), nullable=True),
        sa.Column('tiktok_handle', sa.Text(), nullable=True),
        sa.Column('instagram_handle', sa.Text(), nullable=True),
        sa.Column('engagement_rate', sa.Float(), nullable=True),
        sa.Column('brand_readiness_score', sa.Float(), nullable=True),
        sa.Column('past_brands', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('brand_profiles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Text(), nullable=True),
        sa.Column('company_name', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('website', sa.Text(), nullable=True),
        sa.Column('industry', sa.JSON(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('target_niches', sa.JSON(), nullable=True),
        sa.Column('target_keywords', sa.JSON(), nullable=True),
        sa.Column('min_followers', sa.Integer(), nullable=True),
        sa.Column('max_followers', sa.Integer(), nullable=True),
        sa.Column('target_engagement_rate', sa.Float(), nullable=True),
        sa.Column('preferred_platforms', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('campaigns',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('brand_profile_id', sa.Integer(), sa.ForeignKey('brand_profiles.id'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False, server_default='active'),
        sa.Column('target_niches', sa.JSON(), nullable=True),
        sa.Column('min_followers', sa.Integer(), nullable=True),
        sa.Column('max_followers', sa.Integer(), nullable=True),
        sa.Column('target_engagement_rate', sa.Float(), nullable=True),
        sa.Column('preferred_platforms', sa.JSON(), nullable=True),
        sa.Column('content_style', sa.JSON(), nullable=True),
        sa.Column('ideal_creator_description', sa.Text(), nullable=True),
        sa.Column('content_requirements', sa.Text(), nullable=True),
        sa.Column('brief', sa.Text(), nullable=True),
        sa.Column('budget_per_creator', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_campaigns_brand_profile_id', 'campaigns', ['brand_profile_id'])

    op.create_table('creator_identities',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('display_name', sa.Text(), nullable=True),
        sa.Column('profile_image_url', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('contact_email', sa.Text(), nullable=True),
        sa.Column('contact_email_source', sa.Text(), nullable=True),
        sa.Column('contact_email_confidence', sa.Float(), nullable=True),
        sa.Column('backup_emails', sa.JSON(), nullable=True),
        sa.Column('hub_url', sa.Text(), nullable=True),
        sa.Column('social_links', sa.JSON(), nullable=True),
        sa.Column('total_followers', sa.Integer(), nullable=True),
        sa.Column('primary_platform', sa.Text(), nullable=True),
        sa.Column('primary_niche', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False, server_default='discovered'),
        sa.Column('creator_profile_id', sa.Integer(), sa.ForeignKey('creator_profiles.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('discovered_creators',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('platform', sa.Text(), nullable=False, server_default='youtube'),
        sa.Column('platform_id', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('channel_title', sa.Text(), nullable=True),
        sa.Column('channel_url', sa.Text(), nullable=True),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('subscriber_count', sa.Integer(), nullable=True),
        sa.Column('engagement_rate', sa.Float(), nullable=True),
        sa.Column('niche', sa.JSON(), nullable=True),
        sa.Column('primary_niche', sa.Text(), nullable=True),
        sa.Column('brand_readiness_score', sa.Float(), nullable=True),
        sa.Column('rising_score', sa.Float(), nullable=True),
        sa.Column('audience_quality_score', sa.Float(), nullable=True),
        sa.Column('creator_identity_id', sa.Integer(), sa.ForeignKey('creator_identities.id'), nullable=True),
        sa.Column('claimed_by', sa.Integer(), sa.ForeignKey('creator_profiles.id'), nullable=True),
        sa.Column('first_seen_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('platform', 'platform_id', name='uq_discovered_creator_platform_id'),
    )
    op.create_index('ix_discovered_creators_creator_identity_id', 'discovered_creators', ['creator_identity_id'])

    op.create_table('creator_platform_accounts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('creator_identity_id', sa.Integer(), sa.ForeignKey('creator_identities.id'), nullable=False),
        sa.Column('platform', sa.Text(), nullable=False),
        sa.Column('platform_id', sa.Text(), nullable=False),
        sa.Column('platform_username', sa.Text(), nullable=True),
        sa.Column('platform_url', sa.Text(), nullable=True),
        sa.Column('followers', sa.Integer(), nullable=True),
        sa.Column('profile_image_url', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('email_found', sa.Text(), nullable=True),
        sa.Column('discovered_creator_id', sa.Integer(), sa.ForeignKey('discovered_creators.id'), nullable=True),
        sa.Column('match_method', sa.Text(), nullable=False, server_default='direct_discovery'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('platform', 'platform_id', name='uq_platform_account_platform_id'),
        sa.UniqueConstraint('discovered_creator_id', name='uq_platform_account_discovered_creator'),
    )
    op.create_index('ix_creator_platform_accounts_creator_identity_id', 'creator_platform_accounts', ['creator_identity_id'])

    op.create_table('discovered_creator_unlocks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('brand_profile_id', sa.Integer(), sa.ForeignKey('brand_profiles.id'), nullable=False),
        sa.Column('discovered_creator_id', sa.Integer(), sa.ForeignKey('discovered_creators.id'), nullable=False),
        sa.Column('unlocked_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('brand_profile_id', 'discovered_creator_id', name='uq_unlock_brand_creator'),
    )

    op.create_table('outreach_events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('creator_identity_id', sa.Integer(), sa.ForeignKey('creator_identities.id'), nullable=False),
        sa.Column('discovered_creator_id', sa.Integer(), sa.ForeignKey('discovered_creators.id'), nullable=True),
        sa.Column('email_sent_to', sa.Text(), nullable=False),
        sa.Column('template_type', sa.Text(), nullable=False),
        sa.Column('triggering_brand_id', sa.Integer(), nullable=False),
        sa.Column('triggering_campaign_id', sa.Integer(), nullable=True),
        sa.Column('triggering_action', sa.Text(), nullable=False),
        sa.Column('provider_message_id', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_outreach_events_identity_template', 'outreach_events', ['creator_identity_id', 'template_type'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_outreach_events_identity_template', table_name='outreach_events')
    op.drop_table('outreach_events')
    op.drop_table('discovered_creator_unlocks')
    op.drop_index('ix_creator_platform_accounts_creator_identity_id', table_name='creator_platform_accounts')
    op.drop_table('creator_platform_accounts')
    op.drop_index('ix_discovered_creators_creator_identity_id', table_name='discovered_creators')
    op.drop_table('discovered_creators')
    op.drop_table('creator_identities')
    op.drop_index('ix_campaigns_brand_profile_id', table_name='campaigns')
    op.drop_table('campaigns')
    op.drop_table('brand_profiles')
    op.drop_table('creator_profiles')
