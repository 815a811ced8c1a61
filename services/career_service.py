from flask import current_app

from services.ai_service import AIServiceError, as_str_list, generate_json
from services.scoring_service import match_career_paths, score_answers


TOP_MATCHES = 3


def fallback_roadmap(match) -> dict:
    title = match.career.title
    first_tasks = [f"Learn basics of {skill}" for skill in match.skill_gap[:2]]
    if not first_tasks:
        first_tasks = [f"Review core {title} concepts", "Refresh your strongest skills"]
    return {
        "recommendedPath": f"Based on your assessment, {title} is your best career match.",
        "roadmap": (
            f"Focus on building core {title} skills over the next 3 months. "
            "Start with fundamentals, build projects, and grow your portfolio."
        ),
        "weeklyPlan": [
            {"week": "Week 1-2", "focus": "Fundamentals", "tasks": first_tasks},
            {"week": "Week 3-4", "focus": "Practice", "tasks": ["Build a small project", "Complete online exercises"]},
            {"week": "Month 2", "focus": "Portfolio", "tasks": ["Build a portfolio project", "Document your work"]},
            {"week": "Month 3", "focus": "Job Ready", "tasks": ["Update resume", "Apply for roles", "Practice interviews"]},
        ],
    }


def _normalize_weekly_plan(plan) -> list[dict]:
    if not isinstance(plan, list):
        raise AIServiceError("weeklyPlan is not a list.")
    weeks = []
    for item in plan:
        if not isinstance(item, dict):
            continue
        weeks.append(
            {
                "week": str(item.get("week", "")).strip(),
                "focus": str(item.get("focus", "")).strip(),
                "tasks": as_str_list(item.get("tasks")),
            }
        )
    if not weeks:
        raise AIServiceError("weeklyPlan is empty.")
    return weeks


def generate_roadmap(generator, match, resume_skills) -> dict:
    """Three-month roadmap for the top match, templated if the model fails."""
    title = match.career.title
    prompt = f"""
The user's top career match is "{title}" with these skill gaps: {', '.join(match.skill_gap) or 'none'}.
Their resume skills include: {', '.join(resume_skills) or 'not specified'}.

Return a JSON object with:
{{
  "recommendedPath": "<one-sentence summary of why this career matches>",
  "roadmap": "<2-3 paragraph overview of the 3-month plan>",
  "weeklyPlan": [
    {{ "week": "Week 1-2", "focus": "<topic>", "tasks": ["<task1>", "<task2>", "<task3>"] }},
    {{ "week": "Week 3-4", "focus": "<topic>", "tasks": ["<task1>", "<task2>"] }},
    {{ "week": "Month 2", "focus": "<topic>", "tasks": ["<task1>", "<task2>"] }},
    {{ "week": "Month 3", "focus": "<topic>", "tasks": ["<task1>", "<task2>"] }}
  ]
}}
""".strip()
    try:
        payload = generate_json(
            generator,
            [
                {
                    "role": "system",
                    "content": "You are a career counselor. Provide a 3-month learning roadmap as valid JSON only.",
                },
                {"role": "user", "content": prompt},
            ],
            required_fields=("recommendedPath", "roadmap", "weeklyPlan"),
        )
        return {
            "recommendedPath": str(payload["recommendedPath"]).strip(),
            "roadmap": str(payload["roadmap"]).strip(),
            "weeklyPlan": _normalize_weekly_plan(payload["weeklyPlan"]),
        }
    except AIServiceError as exc:
        current_app.logger.warning("Roadmap generation failed for %s, using fallback: %s", title, exc)
        return fallback_roadmap(match)


def run_assessment(generator, answers, resume_skills) -> dict:
    resume_skills = [skill.strip() for skill in resume_skills or [] if isinstance(skill, str) and skill.strip()]
    category_scores = score_answers(answers)
    matches = match_career_paths(category_scores, resume_skills)
    top = matches[:TOP_MATCHES]
    roadmap = generate_roadmap(generator, top[0], resume_skills)

    return {
        "success": True,
        "categoryScores": category_scores,
        "matches": [match.to_dict() for match in top],
        "recommendedPath": roadmap["recommendedPath"],
        "roadmap": roadmap["roadmap"],
        "weeklyPlan": roadmap["weeklyPlan"],
    }
