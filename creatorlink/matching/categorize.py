"""
Niche categorization and rising-creator scoring for freshly discovered creators.
"""
from typing import List, Optional


NICHE_KEYWORDS = {
    'Fitness': ['fitness', 'workout', 'gym', 'exercise', 'muscle', 'training', 'crossfit', 'yoga', 'weight loss', 'health'],
    'Tech': ['tech', 'technology', 'gadget', 'software', 'coding', 'programming', 'computer', 'phone', 'app', 'developer', 'ai', 'startup'],
    'Gaming': ['gaming', 'game', 'gamer', 'playstation', 'xbox', 'nintendo', 'esports', 'twitch', 'streamer', 'gameplay'],
    'Beauty': ['beauty', 'makeup', 'skincare', 'cosmetics', 'tutorial', 'hair', 'nails', 'glam'],
    'Fashion': ['fashion', 'style', 'outfit', 'clothing', 'wear', 'trend', 'designer', 'model'],
    'Food': ['food', 'cooking', 'recipe', 'chef', 'kitchen', 'meal', 'restaurant', 'baking', 'cuisine', 'eat'],
    'Travel': ['travel', 'adventure', 'explore', 'destination', 'vacation', 'trip', 'backpack', 'tourist', 'vlog'],
    'Lifestyle': ['lifestyle', 'daily', 'routine', 'life', 'vlog', 'day in the life', 'morning routine'],
    'Finance': ['finance', 'money', 'invest', 'stock', 'crypto', 'trading', 'wealth', 'budget', 'financial', 'entrepreneur'],
    'Education': ['education', 'learn', 'tutorial', 'how to', 'teach', 'course', 'study', 'school', 'university', 'explain'],
    'Entertainment': ['entertainment', 'funny', 'comedy', 'prank', 'challenge', 'react', 'reaction'],
    'Music': ['music', 'song', 'singer', 'artist', 'band', 'cover', 'album', 'producer', 'beat'],
    'Sports': ['sports', 'football', 'basketball', 'soccer', 'baseball', 'golf', 'tennis', 'athlete', 'nfl', 'nba'],
    'Parenting': ['parenting', 'mom', 'dad', 'baby', 'kids', 'family', 'children', 'motherhood', 'fatherhood'],
    'Pets': ['pet', 'dog', 'cat', 'puppy', 'kitten', 'animal', 'rescue'],
}

DEFAULT_NICHE = 'Lifestyle'
MAX_NICHES = 3

# (exclusive lower bound, points); first band that matches wins
GROWTH_7D_BANDS = [(10, 40), (5, 30), (2, 20), (0, 10)]
GROWTH_30D_BANDS = [(30, 25), (20, 20), (10, 15), (0, 5)]
VIEW_RATIO_BANDS = [(1, 20), (0.5, 15), (0.2, 10), (0.1, 5)]
POST_COUNT_BANDS = [(100, 10), (50, 7), (20, 5)]

SWEET_SPOT = (10_000, 100_000)
SWEET_SPOT_BONUS = 5


def categorize_creator(title: str, bio: str) -> List[str]:
    """Top niches by keyword hit count (substring match on title + bio)."""
    text = f"{title or ''} {bio or ''}".lower()
    hits = []
    for niche, keywords in NICHE_KEYWORDS.items():
        score = sum(1 for k in keywords if k in text)
        if score > 0:
            hits.append((niche, score))

    hits.sort(key=lambda h: h[1], reverse=True)
    top = [niche for niche, _ in hits[:MAX_NICHES]]
    return top or [DEFAULT_NICHE]


def _band_points(value, bands):
    if not value:
        return 0
    for floor, points in bands:
        if value > floor:
            return points
    return 0


def calculate_rising_score(
    followers: int,
    growth_7d: Optional[float],
    growth_30d: Optional[float],
    avg_views: float,
    total_posts: int,
) -> int:
    """0-100 "rising" score: growth first, then views per follower and posting consistency."""
    followers = followers or 0
    score = _band_points(growth_7d, GROWTH_7D_BANDS)
    score += _band_points(growth_30d, GROWTH_30D_BANDS)
    score += _band_points((avg_views or 0) / max(followers, 1), VIEW_RATIO_BANDS)
    score += _band_points(total_posts, POST_COUNT_BANDS)

    if SWEET_SPOT[0] <= followers <= SWEET_SPOT[1]:
        score += SWEET_SPOT_BONUS

    return min(score, 100)
