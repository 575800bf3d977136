from study_buddy.services import chat_service, prompt_registry
from study_buddy.services.ai_service import AIAuthError, AIProviderError
from tests.fakes import ScriptedAI


def test_build_chat_messages_keeps_last_ten_history_entries():
    history = [{"role": "user" if i % 2 == 0 else "ai", "content": f"turn {i}"} for i in range(14)]

    messages = chat_service.build_chat_messages(history, "next question")

    assert messages[0] == {"role": "system", "content": prompt_registry.PROMPT_DEFAULT_SYSTEM}
    assert len(messages) == 1 + chat_service.HISTORY_CONTEXT_SIZE + 1
    assert messages[1] == {"role": "user", "content": "turn 4"}
    assert messages[2] == {"role": "assistant", "content": "turn 5"}
    assert messages[-1] == {"role": "user", "content": [{"type": "text", "text": "next question"}]}


def test_build_chat_messages_drops_history_echo_of_new_message():
    history = [{"role": "user", "content": "What is DNA?"}, {"role": "ai", "content": "A molecule."}]

    messages = chat_service.build_chat_messages(history, "What is DNA?")

    assert [m["content"] for m in messages[1:-1]] == ["A molecule."]


def test_text_attachments_are_inlined_and_images_appended():
    attachments = [
        {"name": "notes.pdf", "type": "application/pdf", "content": "[Page 1]\nPhotosynthesis"},
        {"name": "diagram.png", "type": "image/png", "content": "data:image/png;base64,AAAA"},
        {"name": "readme.md", "type": "", "content": "# Heading"},
    ]

    content = chat_service.build_user_content("Explain this", attachments)

    text = content[0]["text"]
    assert "--- Context from file: notes.pdf ---" in text
    assert "--- Context from file: readme.md ---" in text
    assert text.endswith("User Question: Explain this")
    assert content[1] == {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}}
    assert len(content) == 2


def test_warm_persona_suffix_applies_to_custom_prompt():
    prompt = chat_service.resolve_system_prompt("Can you be my friend?", "Custom tutor")

    assert prompt == "Custom tutor" + prompt_registry.PROMPT_WARM_PERSONA_SUFFIX
    assert chat_service.resolve_system_prompt("Explain calculus") == prompt_registry.PROMPT_DEFAULT_SYSTEM


def test_get_chat_response_success():
    ai = ScriptedAI("Sure! Here's how.")

    assert chat_service.get_chat_response(ai, [], "help") == ("Sure! Here's how.", None)


def test_get_chat_response_renders_service_error_for_config_problems():
    ai = ScriptedAI(AIAuthError("AI Config Error: invalid key. Please verify OPENROUTER_API_KEY in your environment."))

    reply, error_kind = chat_service.get_chat_response(ai, [], "help")

    assert error_kind == "service_error"
    assert reply.startswith("### ⚠️ AI Service Error")
    assert "Please check your Gemini/OpenRouter API keys and quotas." in reply


def test_get_chat_response_renders_unresponsive_for_unknown_errors():
    ai = ScriptedAI(AIProviderError("connection reset", provider="openrouter"))

    reply, error_kind = chat_service.get_chat_response(ai, [], "help")

    assert error_kind == "unresponsive"
    assert reply == chat_service.UNRESPONSIVE_REPLY
