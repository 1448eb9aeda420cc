"""
Identity resolution — map a DiscoveredCreator to exactly one CreatorIdentity.

Idempotent and race-safe: concurrent resolutions for the same discovered
creator converge on one identity. Uniqueness is enforced by the database
(unique (platform, platform_id) on platform accounts) and a compare-and-set
on discovered_creators.creator_identity_id; a loser rolls back and re-reads
the winner. There is no check-then-insert window.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from creatorlink.config import HUB_ENRICHMENT_ENABLED
from creatorlink.models.creator_identity import CreatorIdentity
from creatorlink.models.discovered_creator import DiscoveredCreator
from creatorlink.models.platform_account import PlatformAccount
from creatorlink.services.contacts import extract_contacts, fetch_hub_page_links, merge_contacts

logger = logging.getLogger('services.identity')


@dataclass
class IdentityResolution:
    identity: Optional[CreatorIdentity] = None
    created: bool = False
    reason: Optional[str] = None   # creator_not_found | identity_creation_failed | already_claimed

    @property
    def found(self) -> bool:
        return self.identity is not None

    @property
    def already_joined(self) -> bool:
        return self.identity is not None and self.identity.creator_profile_id is not None


def _find_platform_account(session, platform, platform_id):
    return session.execute(
        select(PlatformAccount).where(
            PlatformAccount.platform == platform,
            PlatformAccount.platform_id == platform_id,
        )
    ).scalar_one_or_none()


def _claim_discovered_creator(session, discovered_creator_id, identity_id):
    """
    Compare-and-set the back-link. Returns False when another writer
    linked the discovered creator first.
    """
    result = session.execute(
        update(DiscoveredCreator)
        .where(
            DiscoveredCreator.id == discovered_creator_id,
            DiscoveredCreator.creator_identity_id.is_(None),
        )
        .values(creator_identity_id=identity_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _release_dangling_link(session, discovered_creator_id, stale_identity_id):
    """Clear a back-link whose identity row no longer exists, so it can be re-created."""
    logger.warning(
        "Discovered creator %s points at missing identity %s, clearing link",
        discovered_creator_id, stale_identity_id,
    )
    session.execute(
        update(DiscoveredCreator)
        .where(
            DiscoveredCreator.id == discovered_creator_id,
            DiscoveredCreator.creator_identity_id == stale_identity_id,
        )
        .values(creator_identity_id=None)
        .execution_options(synchronize_session=False)
    )
    session.commit()


def _resolution_for(session, identity_id):
    identity = session.get(CreatorIdentity, identity_id) if identity_id else None
    if identity is None:
        return IdentityResolution(reason='identity_creation_failed')
    return IdentityResolution(identity=identity)


class IdentityResolver:
    """
    Resolve-or-create for discovered creators.

    Args:
        enrich_hub: fetch the creator's link-hub page for extra contacts
                    when the bio points at one.
        fetch_hub: hub page fetcher, injectable for tests.
    """

    def __init__(self, enrich_hub=HUB_ENRICHMENT_ENABLED, fetch_hub=fetch_hub_page_links):
        self.enrich_hub = enrich_hub
        self.fetch_hub = fetch_hub

    def resolve_by_discovered_id(self, session, discovered_creator_id) -> IdentityResolution:
        dc = session.get(DiscoveredCreator, discovered_creator_id)
        if dc is None:
            return IdentityResolution(reason='creator_not_found')
        return self.resolve_or_create_identity(session, dc)

    def resolve_or_create_identity(self, session, discovered_creator) -> IdentityResolution:
        """Return the identity for a discovered creator, creating it on first contact."""
        dc = discovered_creator
        if dc is None:
            return IdentityResolution(reason='creator_not_found')

        dc_id, platform, platform_id = dc.id, dc.platform, dc.platform_id

        if dc.creator_identity_id:
            identity = session.get(CreatorIdentity, dc.creator_identity_id)
            if identity is not None:
                return IdentityResolution(identity=identity)
            _release_dangling_link(session, dc_id, dc.creator_identity_id)

        try:
            account = _find_platform_account(session, platform, platform_id)
            if account is not None:
                return self._link_existing(session, dc_id, account.creator_identity_id)

            identity = self._create_identity(session, dc)
            if not _claim_discovered_creator(session, dc_id, identity.id):
                logger.info("Lost identity race for discovered creator %s", dc_id)
                session.rollback()
                return self._reread_winner(session, dc_id, platform, platform_id)

            session.commit()
            logger.info(
                "Created identity %s for %s/%s (email=%s)",
                identity.id, platform, platform_id, bool(identity.contact_email),
            )
            return IdentityResolution(identity=identity, created=True)
        except IntegrityError:
            session.rollback()
            logger.info("Identity for %s/%s created concurrently, re-reading", platform, platform_id)
            return self._reread_winner(session, dc_id, platform, platform_id)

    # ── internals ───────────────────────────────────────────────────────────

    def _create_identity(self, session, dc):
        parsed = extract_contacts(dc.description or '', f'{dc.platform}_description')
        if self.enrich_hub and parsed.hub_url:
            parsed = merge_contacts(parsed, self.fetch_hub(parsed.hub_url))

        best = parsed.best_email
        identity = CreatorIdentity(
            display_name=dc.display_name,
            profile_image_url=dc.thumbnail_url,
            bio=dc.description,
            contact_email=best.email if best else None,
            contact_email_source=best.source if best else None,
            contact_email_confidence=best.confidence if best else 0.0,
            backup_emails=parsed.backup_emails,
            hub_url=parsed.hub_url,
            social_links=parsed.social_links,
            total_followers=dc.subscriber_count or 0,
            primary_platform=dc.platform,
            primary_niche=dc.primary_niche,
            status='discovered',
        )
        session.add(identity)
        session.flush()

        session.add(PlatformAccount(
            creator_identity_id=identity.id,
            platform=dc.platform,
            platform_id=dc.platform_id,
            platform_username=dc.display_name,
            platform_url=dc.channel_url,
            followers=dc.subscriber_count or 0,
            profile_image_url=dc.thumbnail_url,
            bio=dc.description,
            email_found=best.email if best else None,
            discovered_creator_id=dc.id,
            match_method='direct_discovery',
        ))
        session.flush()
        return identity

    def _link_existing(self, session, dc_id, identity_id):
        if session.get(CreatorIdentity, identity_id) is None:
            logger.error("Platform account for discovered creator %s points at missing identity %s",
                         dc_id, identity_id)
            return IdentityResolution(reason='identity_creation_failed')
        if _claim_discovered_creator(session, dc_id, identity_id):
            session.commit()
            return _resolution_for(session, identity_id)
        session.rollback()
        dc = session.get(DiscoveredCreator, dc_id)
        return _resolution_for(session, dc.creator_identity_id)

    def _reread_winner(self, session, dc_id, platform, platform_id):
        dc = session.get(DiscoveredCreator, dc_id)
        if dc is None:
            return IdentityResolution(reason='creator_not_found')
        if dc.creator_identity_id:
            return _resolution_for(session, dc.creator_identity_id)

        account = _find_platform_account(session, platform, platform_id)
        if account is not None:
            return self._link_existing(session, dc_id, account.creator_identity_id)

        logger.error("Could not resolve identity for discovered creator %s", dc_id)
        return IdentityResolution(reason='identity_creation_failed')


def link_joined_creator(session, discovered_creator_id, creator_profile_id, resolver=None) -> IdentityResolution:
    """
    Claim flow: a discovered creator signed up. Marks the discovered row as
    claimed and moves the identity to 'joined' so outreach stops.
    """
    resolver = resolver or IdentityResolver(enrich_hub=False)
    dc = session.get(DiscoveredCreator, discovered_creator_id)
    if dc is None:
        return IdentityResolution(reason='creator_not_found')
    if dc.claimed_by is not None and dc.claimed_by != creator_profile_id:
        logger.warning("Discovered creator %s already claimed by profile %s", discovered_creator_id, dc.claimed_by)
        return IdentityResolution(reason='already_claimed')

    resolution = resolver.resolve_or_create_identity(session, dc)
    if not resolution.found:
        return resolution

    dc = session.get(DiscoveredCreator, discovered_creator_id)
    dc.claimed_by = creator_profile_id
    identity = resolution.identity
    identity.creator_profile_id = creator_profile_id
    identity.advance_status('joined')
    session.commit()
    logger.info("Identity %s joined as creator profile %s", identity.id, creator_profile_id)
    return resolution
