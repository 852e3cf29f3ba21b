import logging
from prometheus_client import Counter, start_http_server

logger = logging.getLogger(__name__)

HTTP_REQUESTS = Counter('socialapp_http_requests_total', 'HTTP requests handled', ['method', 'status'])
MESSAGES_SENT = Counter('socialapp_messages_sent_total', 'Direct messages sent', ['type'])
MESSAGES_DELETED = Counter('socialapp_messages_deleted_total', 'Direct messages soft deleted')
PICTURE_CHANGES = Counter('socialapp_profile_picture_changes_total', 'Profile picture uploads and resets', ['action'])
FRIEND_REQUESTS = Counter('socialapp_friend_requests_total', 'Friend requests sent or accepted', ['outcome'])


def init_metrics(port: int = 8001):
    """Initialize Prometheus metrics server"""
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except Exception as e:
        logger.warning(f'Prometheus start failed: {e}')
