"""Business logic handlers for flashcard, quiz and summarizer APIs."""

import csv
import io

from docx import Document
from docx.shared import Pt

from study_buddy.services import activity_service, analytics_service, study_materials_service
from study_buddy.services.ai_service import AIAuthError, AIConfigError, AIError, AIResponseParseError

MAX_TOPIC_LEN = 200
MAX_DESCRIPTION_LEN = 1000
MAX_SUMMARY_INPUT_LEN = 200000
QUIZ_STUDY_HOURS = 0.25
FLASHCARD_SET_STUDY_HOURS = 0.1
SUMMARY_STUDY_HOURS = 0.1


def ai_error_response(app_ctx, error, feature):
    if isinstance(error, (AIConfigError, AIAuthError)):
        return app_ctx.jsonify({'error': str(error), 'error_kind': 'config'}), 503
    if isinstance(error, AIResponseParseError):
        return app_ctx.jsonify({'error': f'Could not generate {feature}. Please try again.', 'error_kind': 'parse'}), 502
    return app_ctx.jsonify({'error': f'Could not generate {feature}: the AI service is unavailable.', 'error_kind': 'provider'}), 502


def _flashcard_set_payload(doc):
    data = doc.to_dict() or {}
    return {
        'id': doc.id,
        'title': data.get('title', ''),
        'description': data.get('description', ''),
        'cards': data.get('cards', []),
        'mastery': data.get('mastery', 0),
        'lastStudied': data.get('lastStudied', 'Never'),
        'createdAt': data.get('createdAt', 0),
    }


def _load_owned_set(app_ctx, uid, set_id):
    snapshot = app_ctx.flashcards_repo.doc_ref(app_ctx.db, uid, set_id).get()
    return snapshot if snapshot.exists else None


def generate_flashcard_set(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return app_ctx.jsonify({'error': 'Invalid payload'}), 400
    topic = str(payload.get('topic', '')).strip()[:MAX_TOPIC_LEN]
    if not topic:
        return app_ctx.jsonify({'error': 'topic is required'}), 400
    description = str(payload.get('description', '') or '').strip()[:MAX_DESCRIPTION_LEN]
    count = study_materials_service.clamp_flashcard_count(payload.get('count'))
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503

    try:
        cards = study_materials_service.generate_flashcards(app_ctx.ai, topic, count, description)
    except AIError as e:
        app_ctx.logger.error(f"AI flashcard generation failed for {uid}: {e}")
        return ai_error_response(app_ctx, e, 'flashcards')

    flashcard_set = {
        'title': str(payload.get('title', '') or '').strip()[:MAX_TOPIC_LEN] or topic,
        'description': description,
        'cards': cards,
        'mastery': 0,
        'lastStudied': 'Never',
        'createdAt': app_ctx.time.time(),
    }
    try:
        _, set_ref = app_ctx.flashcards_repo.add_set(app_ctx.db, uid, flashcard_set)
    except Exception as e:
        app_ctx.logger.error(f"Error saving flashcard set for {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not save flashcard set'}), 500
    activity_service.apply_analytics_update(uid, analytics_service.log_flashcards, len(cards), db=app_ctx.db, logger=app_ctx.logger)
    activity_service.record_history(
        uid, 'flashcards', f"Generated {flashcard_set['title']} set",
        db=app_ctx.db, logger=app_ctx.logger, time_module=app_ctx.time,
    )
    weekday = analytics_service.weekday_name(app_ctx.utc_now())
    activity_service.apply_analytics_update(
        uid, analytics_service.add_study_time, FLASHCARD_SET_STUDY_HOURS, weekday, db=app_ctx.db, logger=app_ctx.logger,
    )
    return app_ctx.jsonify({'set': {'id': set_ref.id, **flashcard_set}}), 201


def list_flashcard_sets(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        docs = app_ctx.flashcards_repo.list_sets(app_ctx.db, uid, app_ctx.MAX_LIST_DOCS)
        sets = [_flashcard_set_payload(doc) for doc in docs]
        sets.sort(key=lambda item: item.get('createdAt', 0) or 0, reverse=True)
        return app_ctx.jsonify({'sets': sets})
    except Exception as e:
        app_ctx.logger.error(f"Error fetching flashcard sets for {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not load flashcard sets'}), 500


def delete_flashcard_set(app_ctx, request, set_id):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        if _load_owned_set(app_ctx, uid, set_id) is None:
            return app_ctx.jsonify({'error': 'Flashcard set not found'}), 404
        app_ctx.flashcards_repo.doc_ref(app_ctx.db, uid, set_id).delete()
    except Exception as e:
        app_ctx.logger.error(f"Error deleting flashcard set {uid}/{set_id}: {e}")
        return app_ctx.jsonify({'error': 'Could not delete flashcard set'}), 500
    return app_ctx.jsonify({'ok': True})


def record_flashcard_progress(app_ctx, request, set_id):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    payload = request.get_json(silent=True) or {}
    try:
        mastered = int(payload.get('mastered', 0))
        total = int(payload.get('total', 0))
    except (TypeError, ValueError, AttributeError):
        return app_ctx.jsonify({'error': 'mastered and total must be integers'}), 400
    if total <= 0 or not 0 <= mastered <= total:
        return app_ctx.jsonify({'error': 'mastered must be between 0 and total, and total must be positive'}), 400
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503

    mastery = round((mastered / total) * 100)
    try:
        snapshot = _load_owned_set(app_ctx, uid, set_id)
        if snapshot is None:
            return app_ctx.jsonify({'error': 'Flashcard set not found'}), 404
        title = (snapshot.to_dict() or {}).get('title', '')
        app_ctx.flashcards_repo.doc_ref(app_ctx.db, uid, set_id).update({
            'mastery': mastery,
            'lastStudied': app_ctx.utc_now().date().isoformat(),
        })
    except Exception as e:
        app_ctx.logger.error(f"Error updating flashcard mastery {uid}/{set_id}: {e}")
        return app_ctx.jsonify({'error': 'Could not save progress'}), 500

    activity_service.record_history(
        uid, 'flashcards', f"Studied {title}", {'score': f"{mastery}% Mastery"},
        db=app_ctx.db, logger=app_ctx.logger, time_module=app_ctx.time,
    )
    return app_ctx.jsonify({'ok': True, 'mastery': mastery})


def export_flashcard_set_csv(app_ctx, request, set_id):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        snapshot = _load_owned_set(app_ctx, uid, set_id)
    except Exception as e:
        app_ctx.logger.error(f"Error loading flashcard set {uid}/{set_id} for export: {e}")
        return app_ctx.jsonify({'error': 'Could not export flashcard set'}), 500
    if snapshot is None:
        return app_ctx.jsonify({'error': 'Flashcard set not found'}), 404

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(['front', 'back'])
    for card in (snapshot.to_dict() or {}).get('cards', []):
        writer.writerow([card.get('front', ''), card.get('back', '')])
    return app_ctx.Response(
        output.getvalue(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename=flashcards-{set_id}.csv'},
    )


def generate_quiz(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return app_ctx.jsonify({'error': 'Invalid payload'}), 400
    topic = str(payload.get('topic', '')).strip()[:MAX_TOPIC_LEN]
    if not topic:
        return app_ctx.jsonify({'error': 'topic is required'}), 400
    count = study_materials_service.clamp_quiz_question_count(payload.get('count'))
    try:
        questions = study_materials_service.generate_quiz_questions(app_ctx.ai, topic, count)
    except AIError as e:
        app_ctx.logger.error(f"AI quiz generation failed for {uid}: {e}")
        return ai_error_response(app_ctx, e, 'quiz questions')
    return app_ctx.jsonify({'topic': topic, 'questions': questions})


def submit_quiz_result(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    payload = request.get_json(silent=True) or {}
    topic = str(payload.get('topic', '') if isinstance(payload, dict) else '').strip()[:MAX_TOPIC_LEN]
    try:
        score = int(payload.get('score'))
        total = int(payload.get('total'))
    except (TypeError, ValueError, AttributeError):
        return app_ctx.jsonify({'error': 'score and total must be integers'}), 400
    if not topic:
        return app_ctx.jsonify({'error': 'topic is required'}), 400
    if total <= 0 or not 0 <= score <= total:
        return app_ctx.jsonify({'error': 'score must be between 0 and total, and total must be positive'}), 400
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503

    stats = activity_service.apply_analytics_update(uid, analytics_service.log_quiz, score, total, db=app_ctx.db, logger=app_ctx.logger)
    activity_service.record_history(
        uid, 'quiz', f"Completed {topic} Quiz", {'score': f"{score}/{total}"},
        db=app_ctx.db, logger=app_ctx.logger, time_module=app_ctx.time,
    )
    weekday = analytics_service.weekday_name(app_ctx.utc_now())
    stats = activity_service.apply_analytics_update(
        uid, analytics_service.add_study_time, QUIZ_STUDY_HOURS, weekday, db=app_ctx.db, logger=app_ctx.logger,
    ) or stats
    return app_ctx.jsonify({'ok': True, 'score': score, 'total': total, 'analytics': stats})


def summarize(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return app_ctx.jsonify({'error': 'Invalid payload'}), 400
    text = str(payload.get('text', '') or '').strip()[:MAX_SUMMARY_INPUT_LEN]
    url = str(payload.get('url', '') or '').strip()[:2048]
    if not text and not url:
        return app_ctx.jsonify({'error': 'text or url is required'}), 400
    text_to_process = text or f"Please summarize this URL: {url}"

    summary, error = study_materials_service.summarize_text(app_ctx.ai, text_to_process)
    if error is None and app_ctx.db is not None:
        activity_service.record_history(
            uid, 'summarizer', f"Summarized {text_to_process[:30]}...",
            db=app_ctx.db, logger=app_ctx.logger, time_module=app_ctx.time,
        )
        weekday = analytics_service.weekday_name(app_ctx.utc_now())
        activity_service.apply_analytics_update(
            uid, analytics_service.add_study_time, SUMMARY_STUDY_HOURS, weekday, db=app_ctx.db, logger=app_ctx.logger,
        )
    return app_ctx.jsonify({'summary': summary, 'ok': error is None})


def build_summary_docx(title, summary_markdown):
    document = Document()
    document.add_heading(title, level=1)
    for raw_line in summary_markdown.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith('#'):
            level = min(len(line) - len(line.lstrip('#')) + 1, 4)
            document.add_heading(line.lstrip('#').strip(), level=level)
        elif line.startswith(('- ', '* ')):
            document.add_paragraph(line[2:].replace('**', ''), style='List Bullet')
        elif line.replace('**', '').strip():
            run = document.add_paragraph().add_run(line.replace('**', ''))
            run.font.size = Pt(11)
    buffer = io.BytesIO()
    document.save(buffer)
    buffer.seek(0)
    return buffer


def export_summary_docx(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    payload = request.get_json(silent=True) or {}
    summary = str(payload.get('summary', '') if isinstance(payload, dict) else '').strip()
    if not summary:
        return app_ctx.jsonify({'error': 'summary is required'}), 400
    title = str(payload.get('title', '') or 'Summary').strip()[:MAX_TOPIC_LEN] or 'Summary'
    return app_ctx.send_file(
        build_summary_docx(title, summary),
        mimetype='application/vnd.openxmlformats-officedocument.wordprocessingml.document',
        as_attachment=True,
        download_name='summary.docx',
    )
