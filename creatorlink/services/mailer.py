"""
Outbound creator email — template rendering + Resend delivery.

EmailSender is the seam the outreach orchestrator depends on. Senders never
raise: delivery problems come back as SendResult(success=False, error=...).
"""
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import requests
from jinja2 import Environment, FileSystemLoader, select_autoescape

from creatorlink.config import (
    APP_URL, RESEND_API_KEY, RESEND_API_URL, RESEND_FROM_EMAIL, EMAIL_TIMEOUT,
)

logger = logging.getLogger('services.email')


@dataclass
class SendResult:
    success: bool
    provider_message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class RenderedEmail:
    subject: str
    html: str


class EmailSender:
    """Interface: send(to, subject, html) -> SendResult."""

    def send(self, to: str, subject: str, html: str) -> SendResult:
        raise NotImplementedError


class ResendEmailSender(EmailSender):
    """Resend HTTP API (https://resend.com/docs/api-reference/emails/send-email)."""

    def __init__(self, api_key=None, from_email=None, api_url=None, timeout=None, http=None):
        self.api_key = api_key or RESEND_API_KEY
        self.from_email = from_email or RESEND_FROM_EMAIL
        self.api_url = api_url or RESEND_API_URL
        self.timeout = timeout or EMAIL_TIMEOUT
        self.http = http or requests

    def send(self, to, subject, html):
        if not self.api_key:
            logger.warning("RESEND_API_KEY not set, email to %s not sent", to)
            return SendResult(success=False, error='email provider not configured')

        try:
            resp = self.http.post(
                self.api_url,
                json={
                    'from': self.from_email,
                    'to': [to],
                    'subject': subject,
                    'html': html,
                },
                headers={
                    'Authorization': f'Bearer {self.api_key}',
                    'Content-Type': 'application/json',
                },
                timeout=self.timeout,
            )
            if resp.status_code >= 400:
                logger.error("Resend rejected email to %s: %s %s", to, resp.status_code, resp.text[:200])
                return SendResult(success=False, error=f'HTTP {resp.status_code}: {resp.text[:200]}')

            message_id = (resp.json() or {}).get('id')
            logger.info("Email sent to %s (id=%s)", to, message_id)
            return SendResult(success=True, provider_message_id=message_id)

        except Exception as e:
            logger.error("Failed to send email to %s", to, exc_info=True)
            return SendResult(success=False, error=str(e))


# ── Templates ────────────────────────────────────────────────────────────────

def _brand(p):
    return p.get('brand_name') or 'A brand'


def _interested_subject(p):
    count = p.get('interested_brands_count') or 1
    return f"{count} brand{'s' if count > 1 else ''} discovered your content"


EMAIL_TEMPLATES = {
    'interest_alert': {
        'subject': _interested_subject,
        'headline': "Brands are already interested in you! 👀",
        'cta': "See Who's Interested →",
        'urgency': 'low',
    },
    'direct_message': {
        'subject': lambda p: f"{_brand(p)} sent you a message",
        'headline': "You've got a message waiting! 💬",
        'cta': "Read Your Message →",
        'urgency': 'medium',
    },
    'campaign_match': {
        'subject': lambda p: f'You\'ve been matched to "{p.get("campaign_name") or "a paid campaign"}"',
        'headline': "You're a match for a paid campaign! 🎯",
        'cta': "View Campaign Details →",
        'urgency': 'high',
    },
    'active_outreach': {
        'subject': lambda p: f"🔥 {_brand(p)} wants to work with you NOW",
        'headline': "A brand is ready to work with you! 🔥",
        'cta': "Respond Now →",
        'urgency': 'critical',
    },
}

URGENCY_COLORS = {
    'low': {'bg': '#6366f1', 'accent': '#818cf8'},
    'medium': {'bg': '#6366f1', 'accent': '#818cf8'},
    'high': {'bg': '#f59e0b', 'accent': '#fbbf24'},
    'critical': {'bg': '#ef4444', 'accent': '#f87171'},
}

BENEFITS = [
    "Get discovered by brands actively looking for creators",
    "Set your rates and get paid what you're worth",
    "Manage all your brand deals in one place",
    "100% free for creators, always",
]

_TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'templates', 'emails')

_env = Environment(
    loader=FileSystemLoader(_TEMPLATE_DIR),
    autoescape=select_autoescape(['html']),
)


def render_creator_email(
    template_type: str,
    creator_name: str,
    brand_name: str = None,
    brand_logo: str = None,
    campaign_name: str = None,
    message_preview: str = None,
    invite_token: str = None,
    interested_brands_count: int = None,
) -> RenderedEmail:
    """Render subject + HTML for one of EMAIL_TEMPLATES. Unknown types raise KeyError."""
    template = EMAIL_TEMPLATES[template_type]
    params = {
        'brand_name': brand_name,
        'campaign_name': campaign_name,
        'interested_brands_count': interested_brands_count,
    }
    subject = template['subject'](params)

    invite_url = f"{APP_URL}/join"
    if invite_token:
        invite_url += f"?ref={invite_token}"

    first_name = (creator_name or '').strip().split(' ')[0] or 'there'

    html = _env.get_template('creator_outreach.html').render(
        subject=subject,
        headline=template['headline'],
        cta=template['cta'],
        colors=URGENCY_COLORS[template['urgency']],
        body_template=f"_{template_type}.html",
        first_name=first_name,
        brand_name=_brand(params),
        brand_logo=brand_logo,
        campaign_name=campaign_name,
        message_preview=message_preview,
        invite_url=invite_url,
        app_url=APP_URL,
        benefits=BENEFITS,
        year=datetime.now().year,
    )
    return RenderedEmail(subject=subject, html=html)


def send_creator_email(sender: EmailSender, to: str, template_type: str, creator_name: str, **kwargs) -> SendResult:
    """Render a creator email and hand it to the sender."""
    rendered = render_creator_email(template_type, creator_name, **kwargs)
    return sender.send(to, rendered.subject, rendered.html)
