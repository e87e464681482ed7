"""Expression labels and their static cat profiles."""

from dataclasses import dataclass
from enum import Enum


class Expression(str, Enum):
    """Closed set of facial expression labels."""

    HAPPY = "happy"
    SAD = "sad"
    SURPRISED = "surprised"
    ANGRY = "angry"
    NEUTRAL = "neutral"
    FEARFUL = "fearful"
    DISGUSTED = "disgusted"


@dataclass(frozen=True)
class CatProfile:
    """Stock background and fallback caption bound to one expression."""

    background_url: str
    fallback_caption: str


DEFAULT_CAPTION = "I'M A CAT AND I'M JUDGING YOU"

CAT_PROFILES: dict[Expression, CatProfile] = {
    Expression.HAPPY: CatProfile(
        background_url="https://images.unsplash.com/photo-1574158622682-e40e69881006?w=800&q=80",
        fallback_caption="WHEN THE TREAT JAR OPENS",
    ),
    Expression.SAD: CatProfile(
        background_url="https://images.unsplash.com/photo-1577023311546-cdc07a8454d9?w=800&q=80",
        fallback_caption="no one came to my birthday party",
    ),
    Expression.SURPRISED: CatProfile(
        background_url="https://images.unsplash.com/photo-1518791841217-8f162f1e1131?w=800&q=80",
        fallback_caption="DID YOU JUST OPEN A CAN??",
    ),
    Expression.ANGRY: CatProfile(
        background_url="https://images.unsplash.com/photo-1506755855567-92ff770e8d00?w=800&q=80",
        fallback_caption="YOU'RE 5 MINUTES LATE WITH DINNER",
    ),
    Expression.NEUTRAL: CatProfile(
        background_url="https://images.unsplash.com/photo-1514888286974-6c03e2ca1dba?w=800&q=80",
        fallback_caption="i have seen things you wouldn't believe",
    ),
    Expression.FEARFUL: CatProfile(
        background_url="https://images.unsplash.com/photo-1543852786-1cf6624b9987?w=800&q=80",
        fallback_caption="THE VACUUM IS OUT",
    ),
    Expression.DISGUSTED: CatProfile(
        background_url="https://images.unsplash.com/photo-1529778873920-4da4926a72c2?w=800&q=80",
        fallback_caption="you call this... food?",
    ),
}


def parse_expression(value: object) -> Expression | None:
    """Return the matching expression, or None for unknown values."""
    if isinstance(value, Expression):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Expression(value.strip().lower())
    except ValueError:
        return None


def background_for(label: Expression) -> str:
    """Return the stock background image URL for a label."""
    return CAT_PROFILES[label].background_url
