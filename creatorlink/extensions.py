"""
Shared client instances — outbound email sender.

Initialized at import; safe when env vars are missing (the sender reports
'email provider not configured' instead of sending).
"""
import logging

from creatorlink.config import RESEND_API_KEY
from creatorlink.services.mailer import ResendEmailSender

logger = logging.getLogger('creatorlink.extensions')

# ── Resend ────────────────────────────────────────────────────────────────────
email_sender = ResendEmailSender()
if not RESEND_API_KEY:
    logger.warning("RESEND_API_KEY not set — outreach emails will be logged as failed")
