from .constants import DEFAULT_ROLE_TYPE, MAX_HISTORY_MESSAGES
from .models import HistoryMessage, RetrievedContext

DEFAULT_PERSONA = """You are an experienced professional being interviewed for a position.

Your role:
- You ARE the candidate with 8+ years of experience in your field
- Answer interview questions directly and professionally
- Provide detailed, specific examples from "your experience"
- Demonstrate deep knowledge and expertise
- Be confident and articulate
- Use first person ("I", "my", "I've worked on")

Response format:
{
  "answer": "Your complete, detailed answer (4-6 sentences with specific examples)",
  "experience_mentioned": ["specific example 1", "specific example 2"],
  "key_technologies": ["tech1", "tech2", "tech3"],
  "follow_up_topics": ["topic the interviewer might ask about next"]
}"""

ANSWER_INSTRUCTIONS = (
    "Provide your complete answer in the specified JSON format. Use first person and specific examples."
)

VALIDATION_PROMPT = "Hello"


def build_system_prompt(role_type: str = DEFAULT_ROLE_TYPE, persona: str | None = None) -> str:
    """System instruction for the candidate voice.

    A custom persona replaces the default framing entirely, including the role line.
    """
    if persona:
        return persona
    role = role_type or DEFAULT_ROLE_TYPE
    return (
        f"{DEFAULT_PERSONA}\n\n[YOUR ROLE]\n"
        f"You are an experienced {role} professional with 8+ years of industry experience."
    )


def format_context(context: RetrievedContext | None) -> str:
    if context is None:
        return ""
    sections: list[str] = []
    if context.resume:
        sections.append(f"[CANDIDATE RESUME CONTEXT]\n{context.resume}")
    if context.previous_answers:
        sections.append("[PREVIOUS ANSWERS SUMMARY]\n" + "\n".join(context.previous_answers))
    return "\n\n".join(sections)


def format_history(history: list[HistoryMessage] | None) -> str:
    if not history:
        return ""
    recent = history[-MAX_HISTORY_MESSAGES:]
    lines = [f"{message.role}: {message.content}" for message in recent]
    return "[CONVERSATION HISTORY]\n" + "\n".join(lines)


def build_user_prompt(
    question: str,
    history: list[HistoryMessage] | None = None,
    context: RetrievedContext | None = None,
) -> str:
    """The interviewer turn: context, recent history, the question and the reply format."""
    sections = [format_context(context), format_history(history), f"[INTERVIEWER'S QUESTION]\n{question}"]
    sections.append(ANSWER_INSTRUCTIONS)
    return "\n\n".join(section for section in sections if section)
