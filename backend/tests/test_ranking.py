"""
Ranking strategies: score bounds, determinism, suggestion ordering keeps the candidate set.
Plain objects stand in for rows; strategies only read attributes.
"""
import random
import uuid
from types import SimpleNamespace

from alumni_connect.services.ranking import MAX_SCORE, MIN_SCORE, ProfileRanking, RandomRanking, get_ranking_strategy


def _user(name, major=None, year=None):
    return SimpleNamespace(id=uuid.uuid4(), name=name, major=major, graduation_year=year)


def _mentor(years=0, expertise=(), major=None):
    return SimpleNamespace(years_experience=years, expertise=list(expertise), user=_user("M", major=major))


def test_random_scores_in_range_and_seedable():
    mentee, mentor = _user("a"), _mentor()
    r1 = RandomRanking(random.Random(7))
    r2 = RandomRanking(random.Random(7))
    s1 = [r1.match_score(mentee, mentor) for _ in range(50)]
    s2 = [r2.match_score(mentee, mentor) for _ in range(50)]
    assert s1 == s2
    assert all(MIN_SCORE <= s <= MAX_SCORE for s in s1)


def test_random_order_keeps_candidates():
    people = [_user(str(i)) for i in range(10)]
    out = RandomRanking(random.Random(1)).order_suggestions(_user("me"), people)
    assert sorted(u.id for u in out) == sorted(u.id for u in people)


def test_profile_score():
    r = ProfileRanking()
    assert r.match_score(_user("a"), _mentor(years=0)) == 70
    assert r.match_score(_user("a"), _mentor(years=20)) == 86
    assert r.match_score(_user("a", major="Law"), _mentor(years=3, expertise=["law"])) == 90
    assert r.match_score(_user("a", major="Law"), _mentor(years=3, major="LAW")) == 90
    assert r.match_score(_user("a", major="Law"), _mentor(years=30, expertise=["Law"])) == MAX_SCORE


def test_profile_order_prefers_major_then_year():
    me = _user("me", major="Physics", year=2015)
    far = _user("far", major="Physics", year=2000)
    near = _user("near", major="Physics", year=2016)
    other = _user("other", major="Art", year=2015)
    out = ProfileRanking().order_suggestions(me, [other, far, near])
    assert [u.name for u in out] == ["near", "far", "other"]


def test_factory_follows_settings(monkeypatch):
    from alumni_connect.services import ranking

    monkeypatch.setattr(ranking.settings, "ranking_strategy", "profile")
    assert isinstance(get_ranking_strategy(), ProfileRanking)
    monkeypatch.setattr(ranking.settings, "ranking_strategy", "random")
    assert isinstance(get_ranking_strategy(), RandomRanking)
