"""
Contact extraction — emails, social handles and link-hub URLs from free-text bios.

Pure parsing: extract_contacts() never does network I/O and never raises on
malformed input. fetch_hub_page_links() is the only networked entry point and
degrades to an empty result on any failure.

Extraction rules are declarative tables; add a row to add a rule.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from creatorlink.config import HUB_FETCH_USER_AGENT, HUB_FETCH_TIMEOUT

logger = logging.getLogger('services.contacts')


@dataclass
class ContactCandidate:
    email: str
    confidence: float
    source: str

    def to_dict(self) -> Dict:
        return {'email': self.email, 'confidence': self.confidence, 'source': self.source}


@dataclass
class ParsedContact:
    emails: List[ContactCandidate] = field(default_factory=list)
    social_links: Dict[str, str] = field(default_factory=dict)
    hub_url: Optional[str] = None

    @property
    def best_email(self) -> Optional[ContactCandidate]:
        return self.emails[0] if self.emails else None

    @property
    def backup_emails(self) -> List[str]:
        return [c.email for c in self.emails[1:]]

    def to_dict(self) -> Dict:
        return {
            'emails': [c.to_dict() for c in self.emails],
            'social_links': dict(self.social_links),
            'hub_url': self.hub_url,
        }


# ── Email patterns (priority order) ──────────────────────────────────────────
# Each row: (name, compiled pattern, builder(match) -> raw email string)

def _whole(m):
    return m.group(0)


def _labeled(m):
    return m.group(1)


def _deobfuscate(m):
    return f"{m.group(1)}@{m.group(2)}.{m.group(3)}"


# Bracketed separators; "(at)" may pair with a literal "." and "@" with "(dot)"
_AT_WORD = r'\s*[\(\[\{]\s*at\s*[\)\]\}]\s*'
_DOT_WORD = r'\s*[\(\[\{]\s*dot\s*[\)\]\}]\s*'
_DOMAIN = r'([\w-]+(?:\.[\w-]+)*)'

EMAIL_PATTERNS = [
    ('bare', re.compile(r'[\w.+-]+@[\w-]+(?:\.[\w-]+)*\.[a-zA-Z]{2,}'), _whole),
    ('labeled', re.compile(
        r'(?:email|e-mail|mail|contact|business|enquiries|inquiries)[:\s]+'
        r'([^\s<>,]+@[^\s<>,]+\.[^\s<>,]+)', re.I), _labeled),
    ('obfuscated', re.compile(
        r'([\w.+-]+)' + _AT_WORD + _DOMAIN + r'(?:' + _DOT_WORD + r'|\.)([a-zA-Z]{2,})\b', re.I), _deobfuscate),
    ('obfuscated_dot', re.compile(
        r'([\w.+-]+)@' + _DOMAIN + _DOT_WORD + r'([a-zA-Z]{2,})\b', re.I), _deobfuscate),
    ('obfuscated_words', re.compile(
        r'([\w.+-]+)\s+at\s+([\w-]+)\s+dot\s+([a-zA-Z]{2,})\b', re.I), _deobfuscate),
]

# Substrings that mark a match as a placeholder or an asset URL, not a real inbox
BLOCKED_EMAIL_PATTERNS = [
    'example', 'email@',
    '.png', '.jpg', '.jpeg', '.gif', '.webp', '.svg',
    'sentry.io', 'cloudfront', 'amazonaws', 'w3.org', 'schema.org',
    'googleapis.com', 'gstatic.com', 'cdninstagram', 'fbcdn',
]

MIN_EMAIL_LENGTH = 5

# ── Confidence rules (first match wins) ──────────────────────────────────────
# Applied to the clause surrounding an email, independent of which pattern hit.

CONFIDENCE_RULES = [
    (('business', 'inquir', 'enquir'), 0.9),
    (('contact', 'email', 'e-mail'), 0.8),
    (('collab', 'partner'), 0.7),
]
DEFAULT_CONFIDENCE = 0.5

# Clause boundaries for confidence context
_CONTEXT_BREAK_RE = re.compile(r'\n\s*\n|[|•;]')

# ── Social handle patterns (per platform, tried in order) ────────────────────

SOCIAL_PATTERNS: Dict[str, List[re.Pattern]] = {
    'youtube': [
        re.compile(r'youtube\.com/(?:c/|channel/|user/|@)?([\w-]+)', re.I),
        re.compile(r'youtu\.be/([\w-]+)', re.I),
    ],
    'instagram': [
        re.compile(r'instagram\.com/(?!p/|reel/|explore/)([\w.]+)', re.I),
        re.compile(r'\b(?:ig|insta|instagram)[:\s@]+@?([\w.]+)', re.I),
    ],
    'tiktok': [
        re.compile(r'tiktok\.com/@?([\w.]+)', re.I),
        re.compile(r'\b(?:tiktok|tt)[:\s@]+@?([\w.]+)', re.I),
    ],
    'twitter': [
        re.compile(r'(?:twitter\.com/|x\.com/)(\w+)', re.I),
        re.compile(r'\b(?:twitter|x)[:\s@]+@?(\w+)', re.I),
    ],
    'twitch': [
        re.compile(r'twitch\.tv/(\w+)', re.I),
    ],
}

# ── Link aggregators ─────────────────────────────────────────────────────────

HUB_PATTERNS = [
    re.compile(r'(?:linktr\.ee|linktree\.com)/[\w.-]+', re.I),
    re.compile(r'beacons\.ai/[\w.-]+', re.I),
    re.compile(r'stan\.store/[\w.-]+', re.I),
    re.compile(r'bio\.link/[\w.-]+', re.I),
    re.compile(r'allmylinks\.com/[\w.-]+', re.I),
    re.compile(r'linkpop\.com/[\w.-]+', re.I),
    re.compile(r'tap\.bio/@?[\w.-]+', re.I),
    re.compile(r'solo\.to/[\w.-]+', re.I),
    re.compile(r'campsite\.bio/[\w.-]+', re.I),
]


# ── Public API ───────────────────────────────────────────────────────────────

def extract_contacts(text: str, source_label: str = 'unknown') -> ParsedContact:
    """
    Parse free text into contact candidates, social handles and a hub URL.

    Emails are deduplicated case-insensitively and returned sorted by
    confidence, highest first; callers treat index 0 as the primary address.
    """
    result = ParsedContact()
    if not text or not isinstance(text, str):
        return result

    spans = _find_email_spans(text)
    for email, start, end in spans:
        context = _surrounding_context(text, start, end, spans)
        result.emails.append(ContactCandidate(
            email=email,
            confidence=confidence_for_context(context),
            source=source_label,
        ))

    # sort() is stable, so equal-confidence emails keep text order
    result.emails.sort(key=lambda c: c.confidence, reverse=True)

    result.social_links = extract_social_links(text)
    result.hub_url = extract_hub_url(text)
    return result


def confidence_for_context(context: str) -> float:
    """Apply CONFIDENCE_RULES to a snippet of text."""
    lowered = (context or '').lower()
    for keywords, confidence in CONFIDENCE_RULES:
        if any(k in lowered for k in keywords):
            return confidence
    return DEFAULT_CONFIDENCE


def extract_social_links(text: str) -> Dict[str, str]:
    """First plausible handle per platform."""
    links: Dict[str, str] = {}
    if not text:
        return links
    for platform, patterns in SOCIAL_PATTERNS.items():
        handle = _first_handle(text, patterns)
        if handle:
            links[platform] = handle
    return links


def extract_hub_url(text: str) -> Optional[str]:
    """First link-aggregator URL, verbatim."""
    if not text:
        return None
    for pattern in HUB_PATTERNS:
        m = pattern.search(text)
        if m:
            return m.group(0).rstrip('.')
    return None


def merge_contacts(*parsed: ParsedContact) -> ParsedContact:
    """
    Fold several parses (bio, hub page, ...) into one.

    Keeps the highest confidence seen per email; the first parse that found a
    social handle or hub URL wins.
    """
    merged = ParsedContact()
    by_email: Dict[str, ContactCandidate] = {}
    order: List[str] = []
    for p in parsed:
        if p is None:
            continue
        for c in p.emails:
            existing = by_email.get(c.email)
            if existing is None:
                by_email[c.email] = c
                order.append(c.email)
            elif c.confidence > existing.confidence:
                by_email[c.email] = c
        for platform, handle in p.social_links.items():
            merged.social_links.setdefault(platform, handle)
        if not merged.hub_url and p.hub_url:
            merged.hub_url = p.hub_url

    merged.emails = [by_email[e] for e in order]
    merged.emails.sort(key=lambda c: c.confidence, reverse=True)
    return merged


def fetch_hub_page_links(hub_url: str, http=None) -> ParsedContact:
    """
    Fetch a Linktree-style hub page and parse it as additional text.

    Network errors and non-2xx responses return an empty ParsedContact.
    """
    result = ParsedContact()
    if not hub_url:
        return result

    url = hub_url if hub_url.startswith(('http://', 'https://')) else f'https://{hub_url}'
    http = http or requests
    try:
        resp = http.get(
            url,
            headers={'User-Agent': HUB_FETCH_USER_AGENT},
            timeout=HUB_FETCH_TIMEOUT,
            allow_redirects=True,
        )
        if not resp.ok:
            logger.info("Hub page %s returned %s", url, resp.status_code)
            return result
        return extract_contacts(_flatten_html(resp.text), 'hub_page')
    except Exception as e:
        logger.error("Error fetching hub page %s: %s", url, e)
        return result


# ── Private helpers ──────────────────────────────────────────────────────────

def _find_email_spans(text):
    """Return [(email, start, end)] in text order, one entry per unique email."""
    seen = {}
    for _name, pattern, build in EMAIL_PATTERNS:
        for m in pattern.finditer(text):
            email = _clean_email(build(m))
            if not email or _is_blocked_email(email):
                continue
            if email not in seen:
                seen[email] = (m.start(), m.end())
    spans = [(email, start, end) for email, (start, end) in seen.items()]
    spans.sort(key=lambda s: s[1])
    return spans


def _clean_email(raw):
    email = (raw or '').strip().lower().replace(' ', '')
    email = email.strip('.,;:!?()[]{}<>"\'')
    if email.startswith('mailto:'):
        email = email[len('mailto:'):]
    if email.count('@') != 1:
        return None
    local, _, domain = email.partition('@')
    if not local or '.' not in domain:
        return None
    return email


def _is_blocked_email(email):
    return len(email) < MIN_EMAIL_LENGTH or any(p in email for p in BLOCKED_EMAIL_PATTERNS)


def _surrounding_context(text, start, end, spans):
    """
    Text of the clause containing one email: back to the previous break or
    email, forward to the next break or email.
    """
    left, right = 0, len(text)
    for _email, s, e in spans:
        if e <= start:
            left = max(left, e)
        elif s >= end:
            right = min(right, s)

    before = text[left:start]
    breaks = list(_CONTEXT_BREAK_RE.finditer(before))
    if breaks:
        before = before[breaks[-1].end():]

    after = text[end:right]
    m = _CONTEXT_BREAK_RE.search(after)
    if m:
        after = after[:m.start()]

    return f"{before} {after}"


def _first_handle(text, patterns):
    for pattern in patterns:
        for m in pattern.finditer(text):
            handle = m.group(1).lstrip('@').rstrip('.')
            if len(handle) > 1 and '.com' not in handle.lower():
                return handle
    return None


def _flatten_html(html):
    """Visible text plus every href, so link-only contacts are still parsed."""
    soup = BeautifulSoup(html or '', 'html.parser')
    parts = [soup.get_text(' ', strip=True)]
    for a in soup.find_all('a', href=True):
        href = a['href']
        if href.lower().startswith('mailto:'):
            parts.append('email: ' + href[len('mailto:'):].split('?')[0])
        else:
            parts.append(href)
    return '\n'.join(parts)
