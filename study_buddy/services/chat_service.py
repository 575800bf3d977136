"""Chat payload assembly and user-facing error rendering."""

import logging

from study_buddy.services import prompt_registry
from study_buddy.services.ai_service import AIError


logger = logging.getLogger('study_buddy.chat')

GLOBAL_PROJECT_ID = 'global'
HISTORY_CONTEXT_SIZE = 10
WARM_PERSONA_TRIGGERS = ('friendly', 'girlfriend', 'friend', 'relationship')
KNOWN_ERROR_MARKERS = ('ai config', 'ai auth', 'gemini', 'permission', 'quota', 'limit', 'key')
WELCOME_MESSAGE = "Hi! I'm your AI Study Buddy 📚 How can I help you today?"
UNRESPONSIVE_REPLY = (
    "### ⚠️ AI Unresponsive\n"
    "The AI service is currently unavailable or timed out. Please check your connection and try again."
)


def is_text_attachment(attachment):
    mime_type = str(attachment.get('type') or '')
    name = str(attachment.get('name') or '')
    return mime_type == 'application/pdf' or mime_type.startswith('text/') or name.endswith('.md')


def is_image_attachment(attachment):
    return str(attachment.get('type') or '').startswith('image/')


def build_user_content(message, attachments):
    context_from_files = ''
    for attachment in attachments:
        if is_text_attachment(attachment):
            context_from_files += (
                f"\n\n--- Context from file: {attachment.get('name', '')} ---\n"
                f"{attachment.get('content', '')}\n--- End of file ---\n"
            )
    user_text = f"{context_from_files}\nUser Question: {message}" if context_from_files else message
    content = [{'type': 'text', 'text': user_text}]
    for attachment in attachments:
        if is_image_attachment(attachment):
            content.append({'type': 'image_url', 'image_url': {'url': attachment.get('content', '')}})
    return content


def resolve_system_prompt(message, custom_system_prompt=None):
    system_prompt = custom_system_prompt or prompt_registry.PROMPT_DEFAULT_SYSTEM
    lowered = message.lower()
    if any(trigger in lowered for trigger in WARM_PERSONA_TRIGGERS):
        system_prompt += prompt_registry.PROMPT_WARM_PERSONA_SUFFIX
    return system_prompt


def build_chat_messages(history, message, attachments=None, custom_system_prompt=None):
    """Assemble the provider payload: system prompt, recent history, new turn.

    History entries repeating the new message are dropped because the
    client may already have synced it into the stored conversation.
    """
    attachments = [item for item in (attachments or []) if isinstance(item, dict)]
    sanitized_history = [
        entry for entry in (history or [])
        if isinstance(entry, dict) and entry.get('content') != message
    ]
    messages = [{'role': 'system', 'content': resolve_system_prompt(message, custom_system_prompt)}]
    for entry in sanitized_history[-HISTORY_CONTEXT_SIZE:]:
        messages.append({
            'role': 'assistant' if entry.get('role') == 'ai' else 'user',
            'content': entry.get('content', ''),
        })
    messages.append({'role': 'user', 'content': build_user_content(message, attachments)})
    return messages


def render_error_reply(exc):
    lowered = str(exc).lower()
    if any(marker in lowered for marker in KNOWN_ERROR_MARKERS):
        return (
            f"### ⚠️ AI Service Error\n{exc}\n\n"
            "Please check your Gemini/OpenRouter API keys and quotas."
        ), 'service_error'
    return UNRESPONSIVE_REPLY, 'unresponsive'


def get_chat_response(orchestrator, history, message, attachments=None, custom_system_prompt=None):
    """Return (reply_markdown, error_kind). error_kind is None on success."""
    messages = build_chat_messages(history, message, attachments, custom_system_prompt)
    try:
        return orchestrator.complete(messages), None
    except AIError as exc:
        logger.error(f"AI fatal error: {exc}")
        return render_error_reply(exc)
