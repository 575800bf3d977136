from flask import Blueprint, request

from study_buddy import runtime
from study_buddy.services import workspace_api_service

workspace_bp = Blueprint('workspace_api', __name__)


@workspace_bp.route('/api/projects', methods=['GET'])
def list_projects():
    return workspace_api_service.list_projects(runtime, request)


@workspace_bp.route('/api/projects', methods=['POST'])
def create_project():
    return workspace_api_service.create_project(runtime, request)


@workspace_bp.route('/api/projects/<project_id>', methods=['DELETE'])
def delete_project(project_id):
    return workspace_api_service.delete_project(runtime, request, project_id)


@workspace_bp.route('/api/study-sessions', methods=['GET'])
def list_study_sessions():
    return workspace_api_service.list_study_sessions(runtime, request)


@workspace_bp.route('/api/study-sessions', methods=['POST'])
def create_study_session():
    return workspace_api_service.create_study_session(runtime, request)


@workspace_bp.route('/api/study-sessions/<session_id>', methods=['DELETE'])
def delete_study_session(session_id):
    return workspace_api_service.delete_study_session(runtime, request, session_id)


@workspace_bp.route('/api/history', methods=['GET'])
def list_history():
    return workspace_api_service.list_history(runtime, request)


@workspace_bp.route('/api/analytics', methods=['GET'])
def get_analytics():
    return workspace_api_service.get_analytics(runtime, request)


@workspace_bp.route('/api/analytics/study-time', methods=['POST'])
def log_study_time():
    return workspace_api_service.log_study_time(runtime, request)
