"""Flashcard, quiz and summary generation on top of the completion orchestrator."""

import logging

from study_buddy.services import prompt_registry
from study_buddy.services.ai_service import AIError, AIResponseParseError, extract_json_array


logger = logging.getLogger('study_buddy.study_materials')

MAX_TEXT_LEN = 2000
MAX_SUMMARY_SOURCE_LEN = 120000
DEFAULT_FLASHCARD_COUNT = 10
MAX_FLASHCARD_COUNT = 50
DEFAULT_QUIZ_QUESTION_COUNT = 5
MAX_QUIZ_QUESTION_COUNT = 20
SUMMARY_FAILURE_MESSAGE = (
    "I'm sorry, I couldn't generate a summary right now due to server load. "
    "Please try again or provide a shorter text."
)


def clamp_count(raw_value, default, maximum):
    try:
        value = int(raw_value)
    except (TypeError, ValueError):
        return default
    return max(1, min(maximum, value))


def clamp_flashcard_count(raw_value):
    return clamp_count(raw_value, DEFAULT_FLASHCARD_COUNT, MAX_FLASHCARD_COUNT)


def clamp_quiz_question_count(raw_value):
    return clamp_count(raw_value, DEFAULT_QUIZ_QUESTION_COUNT, MAX_QUIZ_QUESTION_COUNT)


def sanitize_flashcards(items, max_items):
    if not isinstance(items, list):
        return []
    cleaned = []
    seen = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        front = str(item.get('front', '')).strip()[:MAX_TEXT_LEN]
        back = str(item.get('back', '')).strip()[:MAX_TEXT_LEN]
        if not front or not back:
            continue
        key = (front.lower(), back.lower())
        if key in seen:
            continue
        seen.add(key)
        cleaned.append({'front': front, 'back': back})
        if len(cleaned) >= max_items:
            break
    return cleaned


def sanitize_quiz_questions(items, max_items):
    if not isinstance(items, list):
        return []
    cleaned = []
    seen = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        text = str(item.get('text', '')).strip()[:MAX_TEXT_LEN]
        options = item.get('options', [])
        correct = item.get('correct')
        if not text or not isinstance(options, list) or len(options) != 4:
            continue
        option_strings = [str(option).strip()[:MAX_TEXT_LEN] for option in options]
        if any(not option for option in option_strings) or len(set(option_strings)) != 4:
            continue
        if isinstance(correct, bool) or not isinstance(correct, int) or not 0 <= correct <= 3:
            continue
        if text.lower() in seen:
            continue
        seen.add(text.lower())
        cleaned.append({
            'id': len(cleaned) + 1,
            'text': text,
            'options': option_strings,
            'correct': correct,
        })
        if len(cleaned) >= max_items:
            break
    return cleaned


def generate_flashcards(orchestrator, topic, count, description=''):
    count = clamp_flashcard_count(count)
    focus = f"Focus on: {description.strip()}\n" if description and description.strip() else ''
    prompt = prompt_registry.PROMPT_FLASHCARDS.format(count=count, topic=topic, focus=focus)
    response = orchestrator.complete([
        {'role': 'system', 'content': prompt_registry.PROMPT_FLASHCARDS_SYSTEM},
        {'role': 'user', 'content': prompt},
    ])
    cards = sanitize_flashcards(extract_json_array(response), count)
    if not cards:
        raise AIResponseParseError('Flashcards were empty after validation.')
    return cards


def generate_quiz_questions(orchestrator, topic, count=DEFAULT_QUIZ_QUESTION_COUNT):
    count = clamp_quiz_question_count(count)
    prompt = prompt_registry.PROMPT_QUIZ.format(count=count, topic=topic)
    response = orchestrator.complete([
        {'role': 'system', 'content': prompt_registry.PROMPT_QUIZ_SYSTEM},
        {'role': 'user', 'content': prompt},
    ])
    questions = sanitize_quiz_questions(extract_json_array(response), count)
    if not questions:
        raise AIResponseParseError('Quiz questions were empty after validation.')
    return questions


def summarize_text(orchestrator, text):
    """Return (summary_markdown, error). On failure the summary is a fixed apology."""
    prompt = prompt_registry.PROMPT_SUMMARY.format(text=text[:MAX_SUMMARY_SOURCE_LEN])
    try:
        summary = orchestrator.complete([
            {'role': 'system', 'content': prompt_registry.PROMPT_DEFAULT_SYSTEM},
            {'role': 'user', 'content': prompt},
        ])
    except AIError as exc:
        logger.error(f"AI summary failed: {exc}")
        return SUMMARY_FAILURE_MESSAGE, str(exc)
    return summary, None
