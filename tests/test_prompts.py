from interview_copilot.core.models import HistoryMessage, RetrievedContext
from interview_copilot.core.prompts import (
    ANSWER_INSTRUCTIONS,
    DEFAULT_PERSONA,
    build_system_prompt,
    build_user_prompt,
    format_context,
    format_history,
)


class TestSystemPrompt:
    def test_default_persona_with_role(self):
        prompt = build_system_prompt("frontend developer")

        assert prompt.startswith(DEFAULT_PERSONA)
        assert "[YOUR ROLE]" in prompt
        assert "experienced frontend developer professional" in prompt

    def test_blank_role_falls_back_to_general(self):
        assert "experienced general professional" in build_system_prompt("")

    def test_persona_replaces_everything(self):
        prompt = build_system_prompt("frontend developer", persona="Answer like a pirate.")

        assert prompt == "Answer like a pirate."


class TestUserPrompt:
    def test_question_and_instructions(self):
        prompt = build_user_prompt("What is your biggest weakness?")

        assert "[INTERVIEWER'S QUESTION]\nWhat is your biggest weakness?" in prompt
        assert prompt.endswith(ANSWER_INSTRUCTIONS)
        assert "[CONVERSATION HISTORY]" not in prompt
        assert "[CANDIDATE RESUME CONTEXT]" not in prompt

    def test_sections_in_order(self):
        prompt = build_user_prompt(
            "Why this company?",
            history=[HistoryMessage(role="interviewer", content="Hi there")],
            context=RetrievedContext(resume="Staff engineer at Initech"),
        )

        resume_at = prompt.index("[CANDIDATE RESUME CONTEXT]")
        history_at = prompt.index("[CONVERSATION HISTORY]")
        question_at = prompt.index("[INTERVIEWER'S QUESTION]")
        assert resume_at < history_at < question_at

    def test_history_keeps_last_ten_messages(self):
        history = [HistoryMessage(role="interviewer", content=f"message {i}") for i in range(15)]

        text = format_history(history)

        assert "message 4\n" not in text
        assert "interviewer: message 5" in text
        assert text.endswith("interviewer: message 14")
        assert text.count("interviewer:") == 10

    def test_empty_history(self):
        assert format_history([]) == ""
        assert format_history(None) == ""

    def test_context_sections(self):
        context = RetrievedContext(previousAnswers=["Talked about Kafka", "Talked about hiring"])

        text = format_context(context)

        assert "[CANDIDATE RESUME CONTEXT]" not in text
        assert text == "[PREVIOUS ANSWERS SUMMARY]\nTalked about Kafka\nTalked about hiring"

    def test_empty_context(self):
        assert format_context(None) == ""
        assert format_context(RetrievedContext()) == ""
