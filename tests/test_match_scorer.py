from __future__ import annotations

import pytest

from roommatch.schemas.profile import UserProfile
from roommatch.services.match_scorer import score, score_breakdown


def _profile(user_id: int = 1, **fields) -> UserProfile:
    return UserProfile(user_id=user_id, **fields)


def _category(breakdown, name: str):
    return next(c for c in breakdown.categories if c.category == name)


def test_empty_profiles_score_zero() -> None:
    assert score(_profile(1), _profile(2)) == 0
    assert score_breakdown(_profile(1), _profile(2)).categories == []


def test_no_overlapping_categories_score_zero() -> None:
    me = _profile(1, lifestyle="early-bird", hobbies=["Hiking"], location="Austin")
    other = _profile(2, cleanliness="clean", interests=["Jazz"], ideal_location="Austin")
    result = score_breakdown(me, other)
    assert result.percentage == 0
    assert result.total_max_score == 0


def test_identical_profiles_score_hundred() -> None:
    fields = dict(
        full_name="Sam",
        lifestyle="quiet",
        cleanliness="very-clean",
        smoking_preference="non-smoker",
        pet_preference="pet-friendly",
        hobbies=["Reading", "Cooking"],
        interests=["Film", "Music"],
        roommate_qualities=["tidy"],
        additional_info="I am tidy and respectful.",
        location="Austin",
    )
    result = score_breakdown(_profile(1, **fields), _profile(2, **fields))
    assert result.percentage == 100
    assert result.total_max_score == 20 + 15 + 15 + 10 + 20 + 20 + 10 + 15
    assert len(result.categories) == 8


def test_hobby_ratio_uses_current_users_list_so_score_is_asymmetric() -> None:
    a = _profile(1, hobbies=["Reading", "Gaming"])
    b = _profile(2, hobbies=["Reading"])

    a_vs_b = score_breakdown(a, b)
    b_vs_a = score_breakdown(b, a)

    assert _category(a_vs_b, "hobbies").score == pytest.approx(10.0)
    assert _category(a_vs_b, "hobbies").max_score == 20
    assert _category(b_vs_a, "hobbies").score == pytest.approx(20.0)
    assert score(a, b) == 50
    assert score(b, a) == 100


def test_mixed_scenario_rounds_to_86() -> None:
    a = _profile(
        1,
        lifestyle="early-bird",
        cleanliness="clean",
        hobbies=["Hiking", "Cooking"],
        location="Austin",
    )
    b = _profile(
        2,
        lifestyle="early-bird",
        cleanliness="clean",
        hobbies=["Cooking", "Yoga"],
        location="Austin",
    )
    result = score_breakdown(a, b)
    assert result.total_score == pytest.approx(60.0)
    assert result.total_max_score == 70
    assert result.percentage == 86
    assert [c.category for c in result.categories] == ["lifestyle", "cleanliness", "hobbies", "location"]


def test_half_percent_rounds_up() -> None:
    # lifestyle 20/20 + hobbies 5/20 -> 25/40 = 62.5%
    a = _profile(1, lifestyle="social", hobbies=["Chess", "Golf", "Surf", "Yoga"])
    b = _profile(2, lifestyle="social", hobbies=["yoga"])
    assert score(a, b) == 63


def test_list_matching_is_case_insensitive() -> None:
    a = _profile(1, hobbies=["HIKING"], interests=["Jazz", "film"])
    b = _profile(2, hobbies=["hiking"], interests=["FILM", "jazz"])
    assert score(a, b) == 100


def test_exact_match_categories_are_all_or_nothing() -> None:
    a = _profile(1, lifestyle="early-bird", pet_preference="no-pets")
    b = _profile(2, lifestyle="night-owl", pet_preference="no-pets")
    result = score_breakdown(a, b)
    assert _category(result, "lifestyle").score == 0
    assert _category(result, "pets").score == 10
    assert result.percentage == round(100 * 10 / 30)


def test_list_category_needs_both_sides() -> None:
    a = _profile(1, hobbies=["Reading"], interests=["Art"])
    b = _profile(2, hobbies=[], interests=["Art"])
    result = score_breakdown(a, b)
    assert [c.category for c in result.categories] == ["interests"]
    assert result.percentage == 100


def test_qualities_found_in_candidate_free_text() -> None:
    a = _profile(1, roommate_qualities=["tidy", "quiet"])
    b = _profile(2, additional_info="Very TIDY person, loves parties")
    result = score_breakdown(a, b)
    qualities = _category(result, "qualities")
    assert qualities.score == pytest.approx(5.0)
    assert qualities.max_score == 10
    assert result.percentage == 50


def test_qualities_count_even_when_candidate_text_is_empty() -> None:
    a = _profile(1, roommate_qualities=["tidy"])
    b = _profile(2)
    result = score_breakdown(a, b)
    assert _category(result, "qualities").score == 0
    assert result.total_max_score == 10
    assert result.percentage == 0


def test_candidate_qualities_are_ignored() -> None:
    a = _profile(1, additional_info="tidy")
    b = _profile(2, roommate_qualities=["tidy"])
    assert score_breakdown(a, b).categories == []


@pytest.mark.parametrize(
    ("mine", "theirs", "expected"),
    [
        ({"location": "Austin"}, {"location": "austin"}, 15),
        ({"location": "Dallas", "ideal_location": "Austin"}, {"location": "Austin"}, 10),
        ({"location": "Austin"}, {"location": "Dallas", "ideal_location": "AUSTIN"}, 10),
        ({"location": "Austin", "ideal_location": "Denver"}, {"location": "Dallas", "ideal_location": "Boston"}, 0),
    ],
)
def test_location_points(mine: dict, theirs: dict, expected: int) -> None:
    result = score_breakdown(_profile(1, **mine), _profile(2, **theirs))
    location = _category(result, "location")
    assert location.score == expected
    assert location.max_score == 15


def test_location_needs_both_current_locations() -> None:
    a = _profile(1, ideal_location="Austin")
    b = _profile(2, location="Austin")
    assert score_breakdown(a, b).categories == []


def test_score_does_not_mutate_inputs() -> None:
    a = _profile(1, hobbies=["Reading", "Gaming"], location="Austin")
    b = _profile(2, hobbies=["Reading"], location="Austin")
    before = (a.model_dump(), b.model_dump())
    score(a, b)
    score(b, a)
    assert (a.model_dump(), b.model_dump()) == before
