"""
Outreach orchestrator — decides, per brand action, whether to email a
not-yet-onboarded creator, and logs every attempt.

    brand action → joined? → identity (resolve/create) → email? → dedup slot
                 → render + send → finish OutreachEvent → status discovered→contacted

Every early exit is a reason code on OutreachResult, never an exception.
The only exception is an unknown action, which is a caller bug.
"""
import logging
from dataclasses import dataclass, asdict
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from creatorlink.config import OUTREACH_DEDUP_POLICY
from creatorlink.database import get_session
from creatorlink.models.brand_profile import BrandProfile
from creatorlink.models.creator_identity import CreatorIdentity
from creatorlink.models.creator_profile import CreatorProfile
from creatorlink.models.outreach_event import OutreachEvent
from creatorlink.models.unlock import DiscoveredCreatorUnlock
from creatorlink.services.identity import IdentityResolver
from creatorlink.services.mailer import EmailSender, SendResult, send_creator_email

logger = logging.getLogger('services.outreach')


ACTION_TO_TEMPLATE = {
    'unlock': 'interest_alert',
    'message': 'direct_message',
    'campaign_match': 'campaign_match',
    'contacted': 'active_outreach',
}

DEDUP_POLICIES = ('none', 'per_template', 'per_brand_template')


@dataclass
class OutreachResult:
    sent: bool
    reason: Optional[str] = None
    email_id: Optional[str] = None
    sent_to: Optional[str] = None
    template_type: Optional[str] = None
    needs_manual_outreach: bool = False

    def to_dict(self):
        return asdict(self)


class OutreachOrchestrator:
    """
    Args:
        email_sender: EmailSender used for dispatch.
        session_factory: callable returning a SQLAlchemy session; one per call.
        resolver: IdentityResolver (default: no hub enrichment override).
        dedup_policy: 'none' | 'per_template' | 'per_brand_template'.
    """

    def __init__(self, email_sender: EmailSender, session_factory=get_session,
                 resolver: IdentityResolver = None, dedup_policy: str = OUTREACH_DEDUP_POLICY):
        if dedup_policy not in DEDUP_POLICIES:
            raise ValueError(f"Unknown outreach dedup policy '{dedup_policy}'")
        self.email_sender = email_sender
        self.session_factory = session_factory
        self.resolver = resolver or IdentityResolver()
        self.dedup_policy = dedup_policy

    def trigger_outreach(
        self,
        discovered_creator_id=None,
        creator_profile_id=None,
        brand_profile_id=None,
        action=None,
        campaign_id=None,
        campaign_name=None,
        message_preview=None,
    ) -> OutreachResult:
        template_type = ACTION_TO_TEMPLATE.get(action)
        if template_type is None:
            raise ValueError(f"Unknown outreach action '{action}'")

        session = self.session_factory()
        try:
            if creator_profile_id is not None:
                profile = session.get(CreatorProfile, creator_profile_id)
                if profile is not None and profile.user_id:
                    return OutreachResult(sent=False, reason='creator_joined')

            if not discovered_creator_id:
                return OutreachResult(sent=False, reason='no_discovered_creator')

            resolution = self.resolver.resolve_by_discovered_id(session, discovered_creator_id)
            if not resolution.found:
                return OutreachResult(sent=False, reason=resolution.reason or 'creator_not_found')
            if resolution.already_joined or resolution.identity.has_joined:
                return OutreachResult(sent=False, reason='creator_joined')

            identity = resolution.identity
            identity_id, to = identity.id, identity.contact_email
            creator_name = identity.display_name or 'Creator'
            if not to:
                logger.info("Identity %s has no contact email, flagging for manual outreach", identity_id)
                return OutreachResult(sent=False, reason='no_email', needs_manual_outreach=True)

            event_id = None
            if not self._already_sent(session, identity_id, template_type, brand_profile_id):
                event_id = self._claim_slot(
                    session, identity_id, to, discovered_creator_id, template_type,
                    brand_profile_id, campaign_id, action,
                )
            if event_id is None:
                logger.info(
                    "Suppressed duplicate %s to identity %s (policy=%s)",
                    template_type, identity_id, self.dedup_policy,
                )
                return OutreachResult(
                    sent=False, reason='already_sent',
                    sent_to=to, template_type=template_type,
                )

            brand = session.get(BrandProfile, brand_profile_id) if brand_profile_id else None
            interested = self._interested_brands_count(session, discovered_creator_id) if action == 'unlock' else None

            send_result = self._dispatch(
                to,
                template_type,
                creator_name=creator_name,
                brand_name=brand.company_name if brand else None,
                brand_logo=brand.logo_url if brand else None,
                campaign_name=campaign_name,
                message_preview=message_preview,
                interested_brands_count=interested,
            )

            self._finish_event(session, event_id, identity_id, template_type, send_result)

            if not send_result.success:
                return OutreachResult(
                    sent=False, reason='send_failed',
                    sent_to=to, template_type=template_type,
                )

            logger.info(
                "Sent %s to identity %s", template_type, identity_id,
                extra={'creator_identity_id': identity_id, 'template_type': template_type},
            )
            return OutreachResult(
                sent=True,
                email_id=send_result.provider_message_id,
                sent_to=to,
                template_type=template_type,
            )
        finally:
            session.close()

    # ── internals ───────────────────────────────────────────────────────────

    def _dedup_key(self, identity_id, template_type, brand_profile_id):
        if self.dedup_policy == 'per_template':
            return f"{identity_id}:{template_type}"
        if self.dedup_policy == 'per_brand_template':
            return f"{identity_id}:{template_type}:{brand_profile_id}"
        return None

    def _already_sent(self, session, identity_id, template_type, brand_profile_id):
        if self.dedup_policy == 'none':
            return False
        stmt = select(func.count(OutreachEvent.id)).where(
            OutreachEvent.creator_identity_id == identity_id,
            OutreachEvent.template_type == template_type,
            OutreachEvent.status.in_(('pending', 'sent')),
        )
        if self.dedup_policy == 'per_brand_template':
            stmt = stmt.where(OutreachEvent.triggering_brand_id == brand_profile_id)
        return session.execute(stmt).scalar() > 0

    def _claim_slot(self, session, identity_id, to, discovered_creator_id, template_type,
                    brand_profile_id, campaign_id, action):
        """
        Write the 'pending' event that reserves this send. Returns its id, or
        None when a concurrent trigger already holds the dedup_key.
        """
        event = OutreachEvent(
            creator_identity_id=identity_id,
            discovered_creator_id=discovered_creator_id,
            email_sent_to=to,
            template_type=template_type,
            triggering_brand_id=brand_profile_id,
            triggering_campaign_id=campaign_id,
            triggering_action=action,
            status='pending',
            dedup_key=self._dedup_key(identity_id, template_type, brand_profile_id),
        )
        try:
            session.add(event)
            session.flush()
            event_id = event.id
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.info("Outreach slot for identity %s (%s) taken concurrently", identity_id, template_type)
            return None
        return event_id

    def _interested_brands_count(self, session, discovered_creator_id):
        return session.execute(
            select(func.count(DiscoveredCreatorUnlock.id)).where(
                DiscoveredCreatorUnlock.discovered_creator_id == discovered_creator_id,
            )
        ).scalar() or 1

    def _dispatch(self, to, template_type, **params) -> SendResult:
        try:
            return send_creator_email(self.email_sender, to, template_type, **params)
        except Exception as e:
            logger.error("Email dispatch to %s raised", to, exc_info=True)
            return SendResult(success=False, error=str(e))

    def _finish_event(self, session, event_id, identity_id, template_type, send_result):
        """Mark the pending event sent or failed. A failed write is logged, never raised."""
        try:
            event = session.get(OutreachEvent, event_id)
            event.provider_message_id = send_result.provider_message_id
            event.error = send_result.error
            if send_result.success:
                event.status = 'sent'
                session.get(CreatorIdentity, identity_id).advance_status('contacted')
            else:
                event.status = 'failed'
                event.dedup_key = None
            session.commit()
        except Exception:
            session.rollback()
            logger.error(
                "Failed to record outcome of outreach event %s for identity %s (%s)",
                event_id, identity_id, template_type, exc_info=True,
            )
