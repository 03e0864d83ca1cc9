from .admin import admin_bp
from .announcements import announcements_bp
from .auth import auth_bp
from .coordinator import coordinator_bp
from .dashboard import dashboard_bp
from .event_head import event_head_bp
from .participant import participant_bp
from .public import public_bp
from .uploads import uploads_bp

__all__ = [
    'admin_bp',
    'announcements_bp',
    'auth_bp',
    'coordinator_bp',
    'dashboard_bp',
    'event_head_bp',
    'participant_bp',
    'public_bp',
    'uploads_bp',
]
