from flask import Blueprint, request

from study_buddy import runtime
from study_buddy.services import chat_api_service

chat_bp = Blueprint('chat_api', __name__)


@chat_bp.route('/api/chats/<project_id>/messages', methods=['GET'])
def get_messages(project_id):
    return chat_api_service.get_messages(runtime, request, project_id)


@chat_bp.route('/api/chats/<project_id>/messages', methods=['POST'])
def send_message(project_id):
    return chat_api_service.send_message(runtime, request, project_id)


@chat_bp.route('/api/chats/<project_id>/messages', methods=['DELETE'])
def clear_messages(project_id):
    return chat_api_service.clear_messages(runtime, request, project_id)


@chat_bp.route('/api/attachments', methods=['POST'])
def parse_attachment():
    return chat_api_service.parse_attachment(runtime, request)
