"""
Ranking strategies: mentor match_score and suggestion order. Neither is authoritative;
the score is a display hint and suggestion order carries no guarantee.

RandomRanking is the production default (score 70-100, shuffled suggestions).
ProfileRanking is deterministic: experience, shared major/expertise, graduation-year proximity.
"""
import logging
import random
from typing import Protocol, Sequence

from alumni_connect.config import settings
from alumni_connect.models.mentor import Mentor
from alumni_connect.models.user import User

logger = logging.getLogger(__name__)

MIN_SCORE = 70
MAX_SCORE = 100


class RankingStrategy(Protocol):
    """Pluggable scoring for mentor lists and connection suggestions."""

    def match_score(self, mentee: User, mentor: Mentor) -> int:
        """Score in 0-100 for showing `mentor` to `mentee`."""
        ...

    def order_suggestions(self, actor_user: User, candidates: Sequence[User]) -> list[User]:
        """Return candidates in display order (best first). Must not add or drop users."""
        ...


class RandomRanking:
    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def match_score(self, mentee: User, mentor: Mentor) -> int:
        return self._rng.randint(MIN_SCORE, MAX_SCORE)

    def order_suggestions(self, actor_user: User, candidates: Sequence[User]) -> list[User]:
        out = list(candidates)
        self._rng.shuffle(out)
        return out


def _norm(s: str | None) -> str:
    return (s or "").strip().lower()


class ProfileRanking:
    """
    match_score = 70 + experience bonus (2 per year, max 16) + 14 if the mentee's major
    appears in the mentor's expertise or matches the mentor's own major; capped at 100.
    """

    def match_score(self, mentee: User, mentor: Mentor) -> int:
        score = MIN_SCORE + min(max(mentor.years_experience or 0, 0), 8) * 2
        major = _norm(mentee.major)
        if major:
            tags = {_norm(t) for t in mentor.expertise}
            mentor_major = _norm(mentor.user.major) if mentor.user is not None else ""
            if major in tags or major == mentor_major:
                score += 14
        return min(score, MAX_SCORE)

    def order_suggestions(self, actor_user: User, candidates: Sequence[User]) -> list[User]:
        major = _norm(actor_user.major)
        year = actor_user.graduation_year

        def key(u: User) -> tuple[int, int, str, str]:
            same_major = 0 if major and _norm(u.major) == major else 1
            if year is not None and u.graduation_year is not None:
                distance = abs(year - u.graduation_year)
            else:
                distance = 1_000
            return (same_major, distance, _norm(u.name), str(u.id))

        return sorted(candidates, key=key)


def get_ranking_strategy() -> RankingStrategy:
    """Strategy named by settings.ranking_strategy. Also used as a FastAPI dependency."""
    name = settings.ranking_strategy
    if name == "profile":
        return ProfileRanking()
    return RandomRanking()
