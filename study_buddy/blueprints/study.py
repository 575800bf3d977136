from flask import Blueprint, request

from study_buddy import runtime
from study_buddy.services import study_api_service

study_bp = Blueprint('study_api', __name__)


@study_bp.route('/api/flashcards', methods=['GET'])
def list_flashcard_sets():
    return study_api_service.list_flashcard_sets(runtime, request)


@study_bp.route('/api/flashcards/generate', methods=['POST'])
def generate_flashcard_set():
    return study_api_service.generate_flashcard_set(runtime, request)


@study_bp.route('/api/flashcards/<set_id>', methods=['DELETE'])
def delete_flashcard_set(set_id):
    return study_api_service.delete_flashcard_set(runtime, request, set_id)


@study_bp.route('/api/flashcards/<set_id>/progress', methods=['POST'])
def record_flashcard_progress(set_id):
    return study_api_service.record_flashcard_progress(runtime, request, set_id)


@study_bp.route('/api/flashcards/<set_id>/export-csv', methods=['GET'])
def export_flashcard_set_csv(set_id):
    return study_api_service.export_flashcard_set_csv(runtime, request, set_id)


@study_bp.route('/api/quiz/generate', methods=['POST'])
def generate_quiz():
    return study_api_service.generate_quiz(runtime, request)


@study_bp.route('/api/quiz/results', methods=['POST'])
def submit_quiz_result():
    return study_api_service.submit_quiz_result(runtime, request)


@study_bp.route('/api/summarize', methods=['POST'])
def summarize():
    return study_api_service.summarize(runtime, request)


@study_bp.route('/api/summarize/export-docx', methods=['POST'])
def export_summary_docx():
    return study_api_service.export_summary_docx(runtime, request)
