import logging
import re

from services.ai_service import AIServiceError, TextGenerationError, as_score, as_str_list, generate_json


logger = logging.getLogger(__name__)

TOTAL_QUESTIONS = 8
TECHNICAL_QUESTIONS = 5
EVALUATION_RESUME_CHARS = 2000
FALLBACK_QUESTION = "Tell me about yourself and your experience relevant to this role."

_QUESTION_PREFIX = re.compile(r"^\s*(?:Q\d+|Question\s*\d+)\s*[.:]\s*", re.IGNORECASE)


def is_evaluation_turn(question_number: int) -> bool:
    # Question numbers past the last one mean every answer is in.
    return question_number > TOTAL_QUESTIONS


def strip_question_prefix(text: str) -> str:
    return _QUESTION_PREFIX.sub("", text or "", count=1).strip()


def fallback_evaluation(role: str) -> dict:
    return {
        "score": 70,
        "strengths": ["Completed the full interview", "Good communication"],
        "weaknesses": ["Could improve technical depth"],
        "improvements": ["Practice more coding problems", "Study system design"],
        "recommended_topics": ["Data Structures", "System Design", f"Core {role} concepts"],
    }


def _format_history(history, answer_label: str = "Candidate Answer") -> str:
    return "\n\n".join(
        f"Q{index}: {entry.get('question', '')}\n{answer_label}: {entry.get('answer', '')}"
        for index, entry in enumerate(history, start=1)
    )


def build_question_prompt(resume_text: str, role: str, history, question_number: int) -> str:
    history_text = _format_history(history)
    history_block = f"Previous Interview History:\n{history_text}\n\n" if history_text else ""
    if question_number <= TECHNICAL_QUESTIONS:
        kind = "This should be a technical question."
    else:
        kind = "This should be an HR question."

    return f"""
You are a senior interviewer from top IT companies like TCS, Google India, Amazon India.

You are interviewing a candidate for the role of: {role}

Candidate Resume:
{resume_text}

Interview Rules:
- Ask ONE question at a time
- Ask total {TOTAL_QUESTIONS} questions: questions 1-{TECHNICAL_QUESTIONS} are technical, questions {TECHNICAL_QUESTIONS + 1}-{TOTAL_QUESTIONS} are HR
- Questions should be relevant to the resume and the {role} role

{history_block}Now ask question number {question_number} of {TOTAL_QUESTIONS}. {kind} Ask ONLY the question, nothing else.
""".strip()


def build_evaluation_messages(resume_text: str, role: str, history) -> list[dict]:
    transcript = _format_history(history, answer_label="A")
    prompt = f"""
You interviewed a candidate for "{role}".

Resume:
{resume_text[:EVALUATION_RESUME_CHARS]}

Interview Q&A:
{transcript}

Return a JSON evaluation with:
{{
  "score": <integer 0-100>,
  "strengths": ["<strength1>", "<strength2>", "<strength3>"],
  "weaknesses": ["<weakness1>", "<weakness2>"],
  "improvements": ["<improvement1>", "<improvement2>", "<improvement3>"],
  "recommended_topics": ["<topic1>", "<topic2>", "<topic3>"]
}}
""".strip()
    return [
        {
            "role": "system",
            "content": "You are an expert interviewer. Evaluate the candidate and respond with valid JSON only.",
        },
        {"role": "user", "content": prompt},
    ]


def generate_question(generator, resume_text: str, role: str, history, question_number: int) -> str:
    prompt = build_question_prompt(resume_text, role, history, question_number)
    raw = generator.generate([{"role": "user", "content": prompt}])
    return strip_question_prefix(raw)


def generate_evaluation(generator, resume_text: str, role: str, history) -> dict:
    """Final interview evaluation; degrades to a canned one on any AI failure."""
    try:
        payload = generate_json(
            generator,
            build_evaluation_messages(resume_text, role, history),
            required_fields=("score",),
        )
    except AIServiceError as exc:
        logger.warning("Interview evaluation failed, using fallback: %s", exc)
        return fallback_evaluation(role)

    return {
        "score": as_score(payload.get("score"), default=70),
        "strengths": as_str_list(payload.get("strengths")),
        "weaknesses": as_str_list(payload.get("weaknesses")),
        "improvements": as_str_list(payload.get("improvements")),
        "recommended_topics": as_str_list(payload.get("recommended_topics")),
    }


def next_turn(generator, resume_text: str, role: str, history, question_number: int) -> dict:
    """
    Produce the next interview turn.

    Returns ``{"type": "question", "question": ...}`` while questions remain, or
    ``{"type": "evaluation", "evaluation": ...}`` once all answers are in.
    Question failures raise ``AIServiceError`` so the caller can retry.
    """
    history = list(history or [])
    if is_evaluation_turn(question_number):
        return {"type": "evaluation", "evaluation": generate_evaluation(generator, resume_text, role, history)}

    question = generate_question(generator, resume_text, role, history, question_number)
    if not question:
        raise TextGenerationError("Model returned an empty question.")
    return {"type": "question", "question": question}
