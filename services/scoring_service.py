import math
from dataclasses import dataclass, field

from services.career_data import ASSESSMENT_QUESTIONS, CAREER_PATHS, CATEGORIES, MAX_OPTION_VALUE


# Maximum points a full skill overlap adds on top of the assessment score.
SKILL_BONUS_POINTS = 20


@dataclass
class CareerMatch:
    career: object
    score: int
    skill_match: int
    skill_gap: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "career": self.career.title,
            "icon": self.career.icon,
            "description": self.career.description,
            "score": self.score,
            "skillMatch": self.skill_match,
            "skillGap": list(self.skill_gap),
            "requiredSkills": list(self.career.required_skills),
        }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def _clamp_percent(value: float) -> int:
    # Large finite inputs can still sum past the float range.
    if not math.isfinite(value):
        return 100 if value > 0 else 0
    return max(0, min(100, _round_half_up(value)))


def _normalize_skills(skills) -> list[str]:
    # Lower-case and trim; blank entries would match every required skill.
    normalized = []
    for skill in skills or []:
        if not isinstance(skill, str):
            continue
        value = skill.lower().strip()
        if value:
            normalized.append(value)
    return normalized


def _skill_matched(required: str, resume_skills: list[str]) -> bool:
    # Bidirectional substring match. Short names like "r" also match "react".
    needle = required.lower()
    return any(skill in needle or needle in skill for skill in resume_skills)


def score_answers(answers, questions=ASSESSMENT_QUESTIONS) -> dict:
    """Normalize raw quiz answers into a 0-100 score per category.

    Answers that are not finite numbers are ignored.
    """
    totals = {category: 0 for category in CATEGORIES}
    counts = {category: 0 for category in CATEGORIES}

    for question in questions:
        value = (answers or {}).get(question.id)
        if _is_number(value):
            totals[question.category] += value
            counts[question.category] += 1

    scores = {}
    for category in CATEGORIES:
        if counts[category]:
            scores[category] = _clamp_percent(totals[category] / (counts[category] * MAX_OPTION_VALUE) * 100)
        else:
            scores[category] = 0
    return scores


def match_career_paths(category_scores, resume_skills=None, careers=CAREER_PATHS) -> list[CareerMatch]:
    """
    Rank career paths by weighted assessment score plus a resume-skill bonus.

    The ranking is deterministic; ties keep catalog order. Skill matching is a
    loose substring test in both directions, so a short resume skill such as
    "r" also matches "React". Blank resume skills are dropped before matching
    instead of matching every required skill. Non-numeric or non-finite
    category scores count as 0.
    """
    resume = _normalize_skills(resume_skills)
    category_scores = category_scores or {}
    matches = []

    for career in careers:
        assessment_score = 0.0
        for category, weight in career.weights.items():
            value = category_scores.get(category, 0)
            assessment_score += (value if _is_number(value) else 0) * weight

        required = list(career.required_skills)
        matched = [skill for skill in required if _skill_matched(skill, resume)]
        skill_gap = [skill for skill in required if skill not in matched]

        ratio = len(matched) / len(required) if required else 0.0
        skill_match = _round_half_up(ratio * 100)
        skill_bonus = ratio * SKILL_BONUS_POINTS
        final_score = _clamp_percent(assessment_score + skill_bonus)

        matches.append(
            CareerMatch(
                career=career,
                score=final_score,
                skill_match=skill_match,
                skill_gap=skill_gap,
            )
        )

    # sorted() is stable, so equal scores stay in catalog order.
    return sorted(matches, key=lambda match: match.score, reverse=True)
