from flask import Blueprint, request

from study_buddy import runtime
from study_buddy.services import account_api_service

account_bp = Blueprint('account_api', __name__)


@account_bp.route('/api/health', methods=['GET'])
def get_health():
    return account_api_service.get_health(runtime, request)


@account_bp.route('/api/auth/register', methods=['POST'])
def register_user():
    return account_api_service.register_user(runtime, request)


@account_bp.route('/api/auth/user', methods=['GET'])
def get_user():
    return account_api_service.get_user(runtime, request)


@account_bp.route('/api/user/profile', methods=['PUT'])
def update_profile():
    return account_api_service.update_profile(runtime, request)
