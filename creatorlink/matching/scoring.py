"""
Match scoring — explainable creator ↔ brand / campaign compatibility.

Brand scoring:    niche, follower range, engagement, platform, brand readiness,
                  keyword overlap → 0-100 score + letter grade + reasons.
Campaign scoring: same idea with content style and past-brand factors, a hard
                  follower-range gate, and perfect/strong/potential tiers.

Every factor is an independent 0-100 sub-score with a human-readable note.
Notes from contributing factors are surfaced verbatim so the brand UI can
explain a ranking.

All scoring functions are pure: same inputs, same output, no I/O beyond the
one-time config load.
"""
import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence

import yaml

from creatorlink.matching.base import (
    BrandCriteria,
    BrandMatch,
    CampaignCriteria,
    CampaignMatch,
    CampaignRanking,
    CreatorFeatures,
    FollowerGap,
    RankedEntry,
    SubScore,
)

logger = logging.getLogger('matching.scoring')


# ── Scoring config (YAML with hardcoded fallback) ────────────────────────────

_scoring_config = None


def _default_config():
    """Hardcoded fallback if YAML is missing."""
    return {
        'version': 'default',
        'brand_weights': {
            'niche': 30, 'follower_range': 20, 'engagement': 20,
            'platform': 15, 'brand_readiness': 15, 'keywords': 10,
        },
        'campaign_weights': {
            'follower_range': 15, 'niche': 20, 'platform': 10, 'engagement': 10,
            'keywords': 25, 'content_style': 15, 'brand_readiness': 5, 'past_brands': 5,
        },
        'strong_signal_threshold': 80,
        'highlight_factors': [
            'follower_range', 'niche', 'platform', 'engagement', 'keywords', 'content_style',
        ],
        'neutral_score': 50,
        'follower_range': {
            'sweet_spot_margin': 0.25,
            'near_range_low': 0.8,
            'near_range_high': 1.2,
        },
        'engagement': {
            'campaign_close_ratio': 0.8,
            'brand_close_ratio': 0.7,
        },
        'keywords': {
            'strong_count': 5,
            'good_count': 3,
            'min_length': 4,
            'brand_strong_count': 3,
        },
        'brand_readiness': {'ready': 70, 'good': 50, 'fair': 30},
        'campaign_tiers': {
            'perfect': {'min_score': 75, 'min_highlights': 2},
            'strong': {'min_score': 50},
        },
        'brand_grades': [
            {'min_score': 90, 'grade': 'A+'},
            {'min_score': 80, 'grade': 'A'},
            {'min_score': 70, 'grade': 'B+'},
            {'min_score': 60, 'grade': 'B'},
            {'min_score': 50, 'grade': 'C'},
        ],
        'content_styles': {
            'educational': ['tutorial', 'learn', 'teach', 'how to', 'tips', 'guide', 'explain'],
            'entertaining': ['fun', 'comedy', 'funny', 'entertainment', 'laugh', 'humor'],
            'reviews': ['review', 'honest', 'opinion', 'testing', 'tried', 'verdict'],
            'tutorials': ['tutorial', 'step by step', 'walkthrough', 'how to', 'guide'],
            'vlogs': ['vlog', 'day in', 'life', 'behind the scenes', 'daily'],
            'lifestyle': ['lifestyle', 'life', 'routine', 'daily', 'living'],
        },
        'stop_words': [
            'i', 'me', 'my', 'we', 'our', 'you', 'your', 'the', 'a', 'an', 'and', 'or',
            'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by', 'from', 'is',
            'are', 'was', 'were', 'be', 'been', 'being', 'have', 'has', 'had', 'do',
            'does', 'did', 'will', 'would', 'could', 'should', 'may', 'might', 'must',
            'that', 'which', 'who', 'whom', 'this', 'these', 'those', 'am', 'not',
            'looking', 'want', 'need', 'like', 'love', 'someone', 'something', 'content',
            'creator', 'creators', 'brand', 'brands', 'campaign', 'video', 'videos',
            'post', 'posts', 'their', 'they', 'them', 'about', 'just', 'really',
            'very', 'also', 'can', 'make', 'get', 'more', 'some',
        ],
    }


def load_scoring_config():
    """Load scoring config from YAML, with in-memory cache and hardcoded fallback."""
    global _scoring_config
    if _scoring_config is not None:
        return _scoring_config

    config_path = os.path.join(os.path.dirname(__file__), 'scoring_config.yaml')
    try:
        with open(config_path, 'r') as f:
            _scoring_config = yaml.safe_load(f)
        logger.info("Config loaded from YAML (version=%s)", _scoring_config.get('version', '?'))
    except Exception as e:
        logger.warning("YAML config not found (%s), using defaults", e)
        _scoring_config = _default_config()

    return _scoring_config


# ── Text helpers ─────────────────────────────────────────────────────────────

_NON_ALNUM_RE = re.compile(r'[^a-z0-9\s]')


def extract_keywords(text: str, cfg: Dict = None) -> List[str]:
    """Meaningful unique keywords from free text, in first-seen order."""
    if not text:
        return []
    cfg = cfg or load_scoring_config()
    stop_words = set(cfg.get('stop_words', []))
    min_length = cfg.get('keywords', {}).get('min_length', 4)

    words = _NON_ALNUM_RE.sub(' ', text.lower()).split()
    keywords = [w for w in words if len(w) >= min_length and w not in stop_words]
    return list(dict.fromkeys(keywords))


def format_followers(n: int) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def _pct(value: float) -> str:
    return f"{value:g}%"


def _overlap(creator_values: Sequence[str], targets: Sequence[str]) -> List[str]:
    """Creator values present in targets, case-insensitive, creator order kept."""
    wanted = {t.lower() for t in targets}
    return [v for v in creator_values if v.lower() in wanted]


def follower_gap(campaign: CampaignCriteria, followers: int) -> Optional[FollowerGap]:
    """None when inside [min, max]; otherwise how far outside."""
    lo, hi = campaign.follower_bounds
    if followers < lo:
        return FollowerGap(kind='below', current=followers, needed=lo)
    if followers > hi:
        return FollowerGap(kind='above', current=followers, max=hi)
    return None


# ── Sub-scores ───────────────────────────────────────────────────────────────

def _niche_score(targets, niches, cfg) -> SubScore:
    if not targets:
        return SubScore('niche', cfg['neutral_score'], required=False)
    matching = _overlap(niches, targets)
    if not matching:
        return SubScore('niche', 0, 'No direct niche overlap')
    score = min(100.0, len(matching) / len(targets) * 100)
    return SubScore('niche', score, f"Niche match: {', '.join(matching)}")


def _platform_score(preferred, platforms, cfg, single_platform=False) -> SubScore:
    if not preferred:
        return SubScore('platform', cfg['neutral_score'], required=False)
    matching = [p for p in platforms if p in preferred]
    if not matching:
        return SubScore('platform', 0, 'Not active on requested platforms')
    if single_platform:
        return SubScore('platform', 100, f"Platform match: {matching[0]}")
    score = min(100.0, len(matching) / len(preferred) * 100)
    if len(matching) >= len(preferred):
        return SubScore('platform', score, 'Active on all requested platforms')
    return SubScore('platform', score, f"Platform match: {', '.join(matching)}")


def _engagement_score(target, rate, close_ratio, cfg) -> SubScore:
    if not target:
        return SubScore('engagement', cfg['neutral_score'], required=False)
    if rate is None:
        return SubScore('engagement', 0, 'Engagement rate unknown')
    if rate >= target:
        verb = 'exceeds' if rate > target else 'meets'
        return SubScore('engagement', 100, f"Engagement {_pct(rate)} {verb} your {_pct(target)} minimum")
    if rate >= target * close_ratio:
        return SubScore('engagement', 50, f"Engagement {_pct(rate)} is close to your {_pct(target)} minimum")
    return SubScore('engagement', 0, f"Engagement {_pct(rate)} is below your {_pct(target)} target")


def _readiness_score(readiness, cfg, note) -> SubScore:
    bands = cfg.get('brand_readiness', {})
    if not readiness:
        return SubScore('brand_readiness', 0, required=False)
    if readiness >= bands.get('ready', 70):
        return SubScore('brand_readiness', 100, note, required=False)
    if readiness >= bands.get('good', 50):
        return SubScore('brand_readiness', 60, required=False)
    if readiness >= bands.get('fair', 30):
        return SubScore('brand_readiness', 30, required=False)
    return SubScore('brand_readiness', 0, required=False)


def _combine(sub_scores: Iterable[SubScore], weights: Dict[str, float]) -> int:
    total = sum(s.score / 100.0 * weights.get(s.name, 0) for s in sub_scores)
    return int(round(min(100.0, max(0.0, total))))


# ── Brand scoring ────────────────────────────────────────────────────────────

def brand_sub_scores(brand: BrandCriteria, creator: CreatorFeatures, cfg: Dict = None) -> List[SubScore]:
    cfg = cfg or load_scoring_config()
    fr = cfg.get('follower_range', {})
    eng = cfg.get('engagement', {})
    kw = cfg.get('keywords', {})

    scores = [_niche_score(brand.target_niches, creator.niches, cfg)]

    lo = brand.min_followers or 0
    hi = brand.max_followers or 10_000_000
    if lo <= creator.followers <= hi:
        scores.append(SubScore('follower_range', 100, 'Follower count in range'))
    elif lo * fr.get('near_range_low', 0.8) <= creator.followers <= hi * fr.get('near_range_high', 1.2):
        scores.append(SubScore('follower_range', 50, 'Follower count close to your range'))
    else:
        scores.append(SubScore('follower_range', 0, 'Follower count outside your range'))

    scores.append(_engagement_score(
        brand.target_engagement_rate, creator.engagement_rate,
        eng.get('brand_close_ratio', 0.7), cfg,
    ))
    scores.append(_platform_score(brand.preferred_platforms, creator.platforms, cfg, single_platform=True))
    scores.append(_readiness_score(creator.brand_readiness_score, cfg, 'Brand ready'))

    keywords = extract_keywords(brand.description, cfg)
    creator_text = creator.text
    matched = [k for k in keywords if k in creator_text] if creator_text else []
    if len(matched) >= kw.get('brand_strong_count', 3):
        scores.append(SubScore('keywords', 100, 'Strong keyword match', required=False))
    elif matched:
        scores.append(SubScore('keywords', 50, 'Keyword match', required=False))
    else:
        scores.append(SubScore('keywords', 0, required=False))

    return scores


def grade_for_score(score: int, cfg: Dict = None) -> str:
    cfg = cfg or load_scoring_config()
    for band in cfg.get('brand_grades', []):
        if score >= band['min_score']:
            return band['grade']
    return 'D'


def score_creator_against_brand(brand: BrandCriteria, creator: CreatorFeatures, cfg: Dict = None) -> BrandMatch:
    """0-100 fit of a creator for a brand's targeting criteria, with grade and reasons."""
    cfg = cfg or load_scoring_config()
    subs = brand_sub_scores(brand, creator, cfg)
    score = _combine(subs, cfg.get('brand_weights', {}))
    reasons = tuple(s.note for s in subs if s.score > 0 and s.note)
    return BrandMatch(score=score, grade=grade_for_score(score, cfg), reasons=reasons, sub_scores=tuple(subs))


# ── Campaign scoring ─────────────────────────────────────────────────────────

def campaign_sub_scores(campaign: CampaignCriteria, creator: CreatorFeatures, cfg: Dict = None) -> List[SubScore]:
    cfg = cfg or load_scoring_config()
    fr = cfg.get('follower_range', {})
    eng = cfg.get('engagement', {})
    kw = cfg.get('keywords', {})

    scores = []

    lo, hi = campaign.follower_bounds
    followers = creator.followers
    if lo <= followers <= hi:
        margin = (hi - lo) * fr.get('sweet_spot_margin', 0.25)
        if lo + margin <= followers <= hi - margin:
            scores.append(SubScore(
                'follower_range', 100,
                f"Follower count ({format_followers(followers)}) is in their sweet spot",
            ))
        else:
            scores.append(SubScore('follower_range', 67, 'Follower count in range'))
    else:
        scores.append(SubScore('follower_range', 0, 'Follower count outside target range'))

    scores.append(_niche_score(campaign.target_niches, creator.niches, cfg))
    scores.append(_platform_score(campaign.preferred_platforms, creator.platforms, cfg))
    scores.append(_engagement_score(
        campaign.target_engagement_rate, creator.engagement_rate,
        eng.get('campaign_close_ratio', 0.8), cfg,
    ))

    creator_text = creator.text
    campaign_text = campaign.description.lower()
    if campaign_text and creator_text:
        keywords = extract_keywords(campaign_text, cfg)
        matched = [k for k in keywords if k in creator_text]
        if len(matched) >= kw.get('strong_count', 5):
            scores.append(SubScore('keywords', 100, 'Strong keyword alignment with campaign needs', required=False))
        elif len(matched) >= kw.get('good_count', 3):
            quoted = '", "'.join(matched[:3])
            scores.append(SubScore('keywords', 80, f'Good keyword match: "{quoted}"', required=False))
        elif matched:
            scores.append(SubScore('keywords', 40, 'Some keyword overlap', required=False))
        else:
            scores.append(SubScore('keywords', 0, required=False))
    else:
        scores.append(SubScore('keywords', 0, required=False))

    if campaign.content_style and creator_text:
        vocab = cfg.get('content_styles', {})
        matched_styles = [
            style for style in campaign.content_style
            if any(k in creator_text for k in vocab.get(style, []))
        ]
        if matched_styles:
            score = len(matched_styles) / len(campaign.content_style) * 100
            note = f"Content style match: {', '.join(matched_styles)}"
            scores.append(SubScore('content_style', score, note, required=False))
        else:
            scores.append(SubScore('content_style', 0, required=False))
    else:
        scores.append(SubScore('content_style', cfg['neutral_score'], required=False))

    scores.append(_readiness_score(creator.brand_readiness_score, cfg, 'Brand ready profile'))

    if creator.past_brands:
        scores.append(SubScore('past_brands', 100, 'Previous brand collaboration experience', required=False))
    else:
        scores.append(SubScore('past_brands', 0, required=False))

    return scores


def tier_for(score: int, highlight_count: int, cfg: Dict = None) -> str:
    cfg = cfg or load_scoring_config()
    tiers = cfg.get('campaign_tiers', {})
    perfect = tiers.get('perfect', {})
    if score >= perfect.get('min_score', 75) and highlight_count >= perfect.get('min_highlights', 2):
        return 'perfect'
    if score >= tiers.get('strong', {}).get('min_score', 50):
        return 'strong'
    return 'potential'


def score_creator_against_campaign(campaign: CampaignCriteria, creator: CreatorFeatures, cfg: Dict = None) -> CampaignMatch:
    """
    Score a creator for a campaign.

    Creators outside [min_followers, max_followers] are never tiered: tier is
    None and follower_gap describes the distance, so the score is only useful
    as "how close are you" advice.
    """
    cfg = cfg or load_scoring_config()
    threshold = cfg.get('strong_signal_threshold', 80)
    highlight_factors = set(cfg.get('highlight_factors', []))

    subs = campaign_sub_scores(campaign, creator, cfg)
    score = _combine(subs, cfg.get('campaign_weights', {}))

    highlights, reasons, misses = [], [], []
    for s in subs:
        if not s.note:
            continue
        if s.score >= threshold and s.name in highlight_factors:
            highlights.append(s.note)
        elif s.score > 0:
            reasons.append(s.note)
        elif s.required:
            misses.append(s.note)

    gap = follower_gap(campaign, creator.followers)
    tier = None if gap else tier_for(score, len(highlights), cfg)

    return CampaignMatch(
        score=score,
        tier=tier,
        reasons=tuple(reasons),
        highlights=tuple(highlights),
        misses=tuple(misses),
        meets_follower_range=gap is None,
        follower_gap=gap,
        sub_scores=tuple(subs),
    )


# ── Rankings ─────────────────────────────────────────────────────────────────

def _sort_entries(entries: List[RankedEntry]) -> List[RankedEntry]:
    return sorted(entries, key=lambda e: (-e.match.score, e.key))


def _bucket(entries: Iterable[RankedEntry], budget_of=None) -> CampaignRanking:
    ranking = CampaignRanking()
    for entry in entries:
        budget = budget_of(entry) if budget_of else 0.0
        if entry.match.tier is None:
            ranking.missed.append(entry)
            ranking.missed_budget += budget
        else:
            getattr(ranking, entry.match.tier).append(entry)
            ranking.total_budget += budget
    ranking.perfect = _sort_entries(ranking.perfect)
    ranking.strong = _sort_entries(ranking.strong)
    ranking.potential = _sort_entries(ranking.potential)
    ranking.missed = _sort_entries(ranking.missed)
    return ranking


def rank_creators_for_campaign(
    campaign: CampaignCriteria,
    creators: Sequence[CreatorFeatures],
    max_workers: Optional[int] = None,
    cfg: Dict = None,
) -> CampaignRanking:
    """
    Score every creator against one campaign and split into tiers + missed.

    With max_workers, scoring is sharded across a thread pool; the merged
    result is identical to the sequential one because ordering comes only
    from the final sort.
    """
    cfg = cfg or load_scoring_config()
    creators = list(creators)

    def _score(creator):
        return RankedEntry(
            key=creator.key,
            match=score_creator_against_campaign(campaign, creator, cfg),
            item=creator,
        )

    if max_workers and len(creators) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            entries = list(pool.map(_score, creators))
    else:
        entries = [_score(c) for c in creators]

    ranking = _bucket(entries)
    logger.debug(
        "%s: %d matching, %d missed", campaign.key, len(ranking.matching), len(ranking.missed),
    )
    return ranking


def rank_campaigns_for_creator(
    creator: CreatorFeatures,
    campaigns: Sequence[CampaignCriteria],
    cfg: Dict = None,
) -> CampaignRanking:
    """Creator-side opportunities: tiered matching campaigns and missed ones with budget totals."""
    cfg = cfg or load_scoring_config()
    entries = [
        RankedEntry(key=c.key, match=score_creator_against_campaign(c, creator, cfg), item=c)
        for c in campaigns
    ]
    return _bucket(entries, budget_of=lambda e: e.item.budget_per_creator or 0.0)


def rank_creators_for_brand(
    brand: BrandCriteria,
    creators: Sequence[CreatorFeatures],
    cfg: Dict = None,
) -> List[RankedEntry]:
    """Brand discovery list, best match first."""
    cfg = cfg or load_scoring_config()
    entries = [
        RankedEntry(key=c.key, match=score_creator_against_brand(brand, c, cfg), item=c)
        for c in creators
    ]
    return _sort_entries(entries)
