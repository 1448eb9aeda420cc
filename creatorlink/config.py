"""
Centralized configuration — env vars and marketplace constants.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── PostgreSQL ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')
DB_POOL_SIZE = int(os.getenv('DB_POOL_SIZE', '5'))
DB_MAX_OVERFLOW = int(os.getenv('DB_MAX_OVERFLOW', '10'))

# ── Flask ─────────────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')
APP_URL = os.getenv('APP_URL', 'https://risingcreators.vercel.app')

# ── Resend (outbound email) ───────────────────────────────────────────────────
RESEND_API_KEY = os.getenv('RESEND_API_KEY')
RESEND_API_URL = os.getenv('RESEND_API_URL', 'https://api.resend.com/emails')
RESEND_FROM_EMAIL = os.getenv('RESEND_FROM_EMAIL', 'Rising Creators <onboarding@resend.dev>')
EMAIL_TIMEOUT = float(os.getenv('EMAIL_TIMEOUT', '10'))

# ── Hub page enrichment ──────────────────────────────────────────────────────
HUB_FETCH_USER_AGENT = os.getenv(
    'HUB_FETCH_USER_AGENT', 'Mozilla/5.0 (compatible; RisingCreatorsBot/1.0)',
)
HUB_FETCH_TIMEOUT = float(os.getenv('HUB_FETCH_TIMEOUT', '10'))
HUB_ENRICHMENT_ENABLED = os.getenv('HUB_ENRICHMENT_ENABLED', 'false').lower() in ('1', 'true', 'yes')

# ── Outreach ──────────────────────────────────────────────────────────────────
# none | per_template | per_brand_template
OUTREACH_DEDUP_POLICY = os.getenv('OUTREACH_DEDUP_POLICY', 'per_template')

OUTREACH_ACTIONS = [
    'unlock',
    'message',
    'campaign_match',
    'contacted',
]

# ── Creator identity lifecycle ────────────────────────────────────────────────
IDENTITY_STATUSES = [
    'discovered',
    'contacted',
    'joined',
]

# ── Platforms ─────────────────────────────────────────────────────────────────
PLATFORMS = [
    'youtube',
    'instagram',
    'tiktok',
    'twitter',
    'twitch',
]

# ── Matching ──────────────────────────────────────────────────────────────────
# Thread-pool size for campaign ranking; 0 scores sequentially
MATCHING_MAX_WORKERS = int(os.getenv('MATCHING_MAX_WORKERS', '0'))
