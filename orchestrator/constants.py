"""
Application constants.

These values are intentionally not configurable via environment variables.
"""

# Session token
TOKEN_SUBJECT = "admin"
TOKEN_ROLE = "admin"
TOKEN_ALGORITHM = "HS256"
TOKEN_TTL_SECONDS = 8 * 60 * 60  # 28800

# Rate limiting
RATE_LIMIT_MAX_REQUESTS = 30
RATE_LIMIT_WINDOW_SECONDS = 60
LOGIN_RATE_LIMIT_MAX_REQUESTS = 5
RATE_LIMIT_CLEANUP_INTERVAL_SECONDS = 300

# Request limits
MAX_REQUEST_BODY_SIZE = 1024 * 1024  # 1 MB

# Headers
API_KEY_HEADER = "X-API-Key"
WEBHOOK_SECRET_HEADER = "X-N8N-SECRET"

# Email logs pagination
EMAIL_LOGS_DEFAULT_LIMIT = 20
EMAIL_LOGS_MAX_LIMIT = 100

SERVICE_NAME = "Holiday Email Orchestrator API"
SERVICE_VERSION = "1.0.0"
