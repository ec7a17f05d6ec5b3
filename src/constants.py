"""Application constants - centralized configuration values."""

# =============================================================================
# Pagination
# =============================================================================
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# =============================================================================
# Cache TTLs (in seconds)
# =============================================================================
CACHE_TTL_DASHBOARD = 300  # 5 minutes

# =============================================================================
# API Timeouts (in seconds)
# =============================================================================
HTTPX_TIMEOUT = 10.0

# =============================================================================
# Background Task Intervals (in seconds)
# =============================================================================
OAUTH_STATE_PURGE_INTERVAL = 5 * 60  # 5 minutes
MAX_CONSECUTIVE_FAILURES = 5  # For background tasks

# =============================================================================
# OAuth & Session Tokens
# =============================================================================
OAUTH_STATE_TTL_SECONDS = 10 * 60  # 10 minutes
TOKEN_TYPE_ACCESS = "access"

# Lark open platform endpoints (relative to LARK_BASE_URL)
LARK_AUTHORIZE_PATH = "/open-apis/authen/v1/authorize"
LARK_ACCESS_TOKEN_PATH = "/open-apis/authen/v1/access_token"
LARK_USER_INFO_PATH = "/open-apis/authen/v1/user_info"

# Error codes appended to {CLIENT_URL}/auth/error?error=...
AUTH_ERROR_INVALID_STATE = "invalid_state"
AUTH_ERROR_INVALID_CODE = "invalid_code"
AUTH_ERROR_TOKEN_EXCHANGE = "token_exchange_failed"
AUTH_ERROR_USER_INFO = "user_info_failed"
AUTH_ERROR_GENERIC = "auth_failed"

# =============================================================================
# Scoring
# =============================================================================
SCORE_MIN = 1
SCORE_MAX = 5
CRITICALITY_MULTIPLIER_HIGH = 1.2
CRITICALITY_MULTIPLIER_MEDIUM = 1.0
CRITICALITY_MULTIPLIER_LOW = 0.8

# =============================================================================
# Dashboard
# =============================================================================
DEFAULT_DASHBOARD_LIMIT = 5
TREND_PERIOD_MONTHS = {"3m": 3, "6m": 6, "12m": 12}
BUBBLE_SIZE_TIER_1 = 25
BUBBLE_SIZE_TIER_2 = 18
BUBBLE_SIZE_DEFAULT = 12
BUBBLE_COLOR_LOW = "#ea384c"  # Red, score < 2.5
BUBBLE_COLOR_MEDIUM = "#FEF7CD"  # Soft yellow, score < 4
BUBBLE_COLOR_HIGH = "#F2FCE2"  # Soft green
BUBBLE_LOW_THRESHOLD = 2.5
BUBBLE_HIGH_THRESHOLD = 4.0
UNASSESSED_LABEL = "Never"
UNSPECIFIED_TIER = "Unspecified"
