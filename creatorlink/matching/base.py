"""
Matching contracts — typed feature records consumed by the scorer.

The scorer never sees ORM rows or raw dicts. Adapters here (from_discovered,
from_profile, from_campaign, ...) normalise whatever the caller has into
these records, so feature extraction is exhaustive and missing values are
explicit Nones.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


DEFAULT_MIN_FOLLOWERS = 0
DEFAULT_MAX_FOLLOWERS = 10_000_000


def _get(obj: Any, name: str, default=None):
    """Read an attribute from an ORM row or a key from a dict."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        value = obj.get(name, default)
    else:
        value = getattr(obj, name, default)
    return default if value is None else value


def _str_list(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = [value]
    return tuple(str(v).strip() for v in value if v is not None and str(v).strip())


@dataclass(frozen=True)
class CreatorFeatures:
    """Normalized creator features — one shape for claimed and discovered creators."""
    key: str
    display_name: str = ''
    bio: str = ''
    niches: Tuple[str, ...] = ()
    followers: int = 0
    engagement_rate: Optional[float] = None
    platforms: Tuple[str, ...] = ()
    brand_readiness_score: Optional[float] = None
    past_brands: Tuple[str, ...] = ()

    @classmethod
    def from_discovered(cls, dc) -> 'CreatorFeatures':
        """DiscoveredCreator row (or dict with the same keys)."""
        niches = _str_list(_get(dc, 'niche'))
        primary = _get(dc, 'primary_niche')
        if primary and primary not in niches:
            niches = niches + (primary,)
        platform = _get(dc, 'platform')
        return cls(
            key=f"discovered:{_get(dc, 'id', '')}",
            display_name=_get(dc, 'name') or _get(dc, 'channel_title', ''),
            bio=_get(dc, 'description', ''),
            niches=niches,
            followers=int(_get(dc, 'subscriber_count', 0) or _get(dc, 'followers', 0) or 0),
            engagement_rate=_get(dc, 'engagement_rate'),
            platforms=(platform,) if platform else (),
            brand_readiness_score=_get(dc, 'brand_readiness_score'),
        )

    @classmethod
    def from_profile(cls, profile) -> 'CreatorFeatures':
        """CreatorProfile row — followers summed across connected platforms."""
        yt = _get(profile, 'youtube_subscribers', 0) or 0
        tt = _get(profile, 'tiktok_followers', 0) or 0
        ig = _get(profile, 'instagram_followers', 0) or 0

        platforms = []
        if _get(profile, 'youtube_channel_id') or yt > 0:
            platforms.append('youtube')
        if _get(profile, 'tiktok_handle') or tt > 0:
            platforms.append('tiktok')
        if _get(profile, 'instagram_handle') or ig > 0:
            platforms.append('instagram')

        return cls(
            key=f"profile:{_get(profile, 'id', '')}",
            display_name=_get(profile, 'display_name', ''),
            bio=_get(profile, 'bio', ''),
            niches=_str_list(_get(profile, 'niche')),
            followers=int(yt + tt + ig),
            engagement_rate=_get(profile, 'engagement_rate'),
            platforms=tuple(platforms),
            brand_readiness_score=_get(profile, 'brand_readiness_score'),
            past_brands=_str_list(_get(profile, 'past_brands')),
        )

    @property
    def text(self) -> str:
        """Lowercased free text used for keyword and style matching."""
        return ' '.join(p for p in (self.bio, self.display_name, ' '.join(self.niches)) if p).lower()


@dataclass(frozen=True)
class BrandCriteria:
    """Targeting criteria a brand applies when browsing creators."""
    key: str = ''
    target_niches: Tuple[str, ...] = ()
    min_followers: Optional[int] = None
    max_followers: Optional[int] = None
    target_engagement_rate: Optional[float] = None
    preferred_platforms: Tuple[str, ...] = ()
    description: str = ''

    @classmethod
    def from_brand_profile(cls, brand) -> 'BrandCriteria':
        keywords = ' '.join(_str_list(_get(brand, 'target_keywords')))
        return cls(
            key=f"brand:{_get(brand, 'id', '')}",
            target_niches=_str_list(_get(brand, 'target_niches')) or _str_list(_get(brand, 'industry')),
            min_followers=_get(brand, 'min_followers'),
            max_followers=_get(brand, 'max_followers'),
            target_engagement_rate=_get(brand, 'target_engagement_rate'),
            preferred_platforms=_str_list(_get(brand, 'preferred_platforms')),
            description=' '.join(p for p in (keywords, _get(brand, 'bio', '')) if p),
        )

    @classmethod
    def from_campaign(cls, campaign) -> 'BrandCriteria':
        """A campaign browsed from the brand side (find-creators page)."""
        c = CampaignCriteria.from_campaign(campaign)
        return cls(
            key=c.key,
            target_niches=c.target_niches,
            min_followers=c.min_followers,
            max_followers=c.max_followers,
            target_engagement_rate=c.target_engagement_rate,
            preferred_platforms=c.preferred_platforms,
            description=c.description,
        )


@dataclass(frozen=True)
class CampaignCriteria:
    """A campaign's creator requirements."""
    key: str = ''
    name: str = ''
    target_niches: Tuple[str, ...] = ()
    min_followers: Optional[int] = None
    max_followers: Optional[int] = None
    target_engagement_rate: Optional[float] = None
    preferred_platforms: Tuple[str, ...] = ()
    content_style: Tuple[str, ...] = ()
    ideal_creator_description: str = ''
    content_requirements: str = ''
    brief: str = ''
    budget_per_creator: Optional[float] = None

    @classmethod
    def from_campaign(cls, campaign) -> 'CampaignCriteria':
        return cls(
            key=f"campaign:{_get(campaign, 'id', '')}",
            name=_get(campaign, 'name', ''),
            target_niches=_str_list(_get(campaign, 'target_niches')),
            min_followers=_get(campaign, 'min_followers'),
            max_followers=_get(campaign, 'max_followers'),
            target_engagement_rate=_get(campaign, 'target_engagement_rate'),
            preferred_platforms=_str_list(_get(campaign, 'preferred_platforms')),
            content_style=_str_list(_get(campaign, 'content_style')),
            ideal_creator_description=_get(campaign, 'ideal_creator_description', ''),
            content_requirements=_get(campaign, 'content_requirements', ''),
            brief=_get(campaign, 'brief', ''),
            budget_per_creator=_get(campaign, 'budget_per_creator'),
        )

    @property
    def description(self) -> str:
        return ' '.join(p for p in (
            self.ideal_creator_description, self.content_requirements, self.brief,
        ) if p)

    @property
    def follower_bounds(self) -> Tuple[int, int]:
        return (
            self.min_followers or DEFAULT_MIN_FOLLOWERS,
            self.max_followers or DEFAULT_MAX_FOLLOWERS,
        )


# ── Results ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SubScore:
    """One independently computed factor, 0..100, plus its explanation."""
    name: str
    score: float
    note: str = ''
    required: bool = True


@dataclass(frozen=True)
class FollowerGap:
    """How far a creator is from a campaign's follower range."""
    kind: str                    # 'below' | 'above'
    current: int
    needed: Optional[int] = None  # min_followers when below
    max: Optional[int] = None     # max_followers when above

    @property
    def shortfall(self) -> Optional[int]:
        if self.kind == 'below' and self.needed is not None:
            return self.needed - self.current
        return None

    def to_dict(self) -> Dict[str, Any]:
        d = {'type': self.kind, 'current': self.current}
        if self.kind == 'below':
            d['needed'] = self.needed
            d['gap'] = self.shortfall
        else:
            d['max'] = self.max
            d['too_large'] = True
        return d


@dataclass(frozen=True)
class BrandMatch:
    score: int
    grade: str
    reasons: Tuple[str, ...] = ()
    sub_scores: Tuple[SubScore, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {'score': self.score, 'grade': self.grade, 'reasons': list(self.reasons)}


@dataclass(frozen=True)
class CampaignMatch:
    score: int
    tier: Optional[str]          # None when the follower gate fails
    reasons: Tuple[str, ...] = ()
    highlights: Tuple[str, ...] = ()
    misses: Tuple[str, ...] = ()
    meets_follower_range: bool = True
    follower_gap: Optional[FollowerGap] = None
    sub_scores: Tuple[SubScore, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'tier': self.tier,
            'reasons': list(self.reasons),
            'highlights': list(self.highlights),
            'misses': list(self.misses),
            'meets_follower_range': self.meets_follower_range,
            'follower_gap': self.follower_gap.to_dict() if self.follower_gap else None,
        }


@dataclass
class RankedEntry:
    """A scored item (creator or campaign) in a ranking."""
    key: str
    match: Any
    item: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {'key': self.key, **self.match.to_dict()}


@dataclass
class CampaignRanking:
    """Follower-gated ranking: tiered matches plus the missed-opportunity bucket."""
    perfect: List[RankedEntry] = field(default_factory=list)
    strong: List[RankedEntry] = field(default_factory=list)
    potential: List[RankedEntry] = field(default_factory=list)
    missed: List[RankedEntry] = field(default_factory=list)
    total_budget: float = 0.0
    missed_budget: float = 0.0

    @property
    def matching(self) -> List[RankedEntry]:
        return sorted(
            self.perfect + self.strong + self.potential,
            key=lambda e: (-e.match.score, e.key),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'perfect': [e.to_dict() for e in self.perfect],
            'strong': [e.to_dict() for e in self.strong],
            'potential': [e.to_dict() for e in self.potential],
            'missed': [e.to_dict() for e in self.missed],
            'total_budget': self.total_budget,
            'missed_budget': self.missed_budget,
        }
