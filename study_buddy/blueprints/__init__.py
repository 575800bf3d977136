from .account import account_bp
from .chat import chat_bp
from .study import study_bp
from .workspace import workspace_bp

ALL_BLUEPRINTS = [account_bp, chat_bp, study_bp, workspace_bp]

__all__ = ['account_bp', 'chat_bp', 'study_bp', 'workspace_bp', 'ALL_BLUEPRINTS']
