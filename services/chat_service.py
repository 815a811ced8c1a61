SYSTEM_PROMPT = """
You are CareerGuide AI, an expert career counselor specializing in tech careers.
You help users with:
- Career path selection (Data Analytics, Web Dev, AI/ML, UI/UX, DevOps, etc.)
- Resume improvement advice
- Skill gap analysis
- Learning roadmaps and resource recommendations
- Interview preparation tips
- Job search strategies

Rules:
- Stay focused on career guidance topics only
- Be encouraging, specific, and actionable
- If the user asks about non-career topics, gently redirect them
- Keep responses concise but helpful (2-4 paragraphs max)
- Use bullet points for lists
- Reference the user's context (skills/career) when provided
""".strip()

HISTORY_TURNS = 6
EMPTY_REPLY = "I apologize, I could not generate a response. Please try again."
UNAVAILABLE_REPLY = (
    "I'm having trouble connecting to the AI service right now. "
    "Please check your API key configuration and try again in a moment."
)


def _context_note(context) -> str:
    if not isinstance(context, dict):
        return ""
    note = ""
    skills = [s for s in context.get("resumeSkills") or [] if isinstance(s, str) and s.strip()]
    if skills:
        note += f"\n\nUser's known skills: {', '.join(skills)}"
    target = context.get("targetCareer")
    if isinstance(target, str) and target.strip():
        note += f"\nUser's target career: {target.strip()}"
    return note


def build_chat_messages(message: str, history=None, context=None) -> list[dict]:
    messages = [{"role": "system", "content": SYSTEM_PROMPT + _context_note(context)}]
    for item in (history or [])[-HISTORY_TURNS:]:
        if not isinstance(item, dict):
            continue
        role = "assistant" if item.get("role") == "assistant" else "user"
        messages.append({"role": role, "content": str(item.get("content", ""))})
    messages.append({"role": "user", "content": message.strip()})
    return messages


def chat_reply(generator, message: str, history=None, context=None) -> str:
    reply = generator.generate(build_chat_messages(message, history, context))
    return (reply or "").strip() or EMPTY_REPLY
