# Short code TTL (data retention period) in seconds
DEFAULT_CODE_TTL_SECONDS = 300  # 5 minutes

# Fixed-window rate limiting defaults
DEFAULT_RATE_WINDOW_SECONDS = 60
DEFAULT_RATE_MAX_REQUESTS = 10
DEFAULT_RATE_TTL_FLOOR_SECONDS = 60  # never write a rate record with a smaller TTL

# Upper bound on generated-code collision retries
DEFAULT_MAX_ALLOCATION_ATTEMPTS = 100

# Max-age (seconds) advertised on successful resolutions
DEFAULT_RESOLVE_CACHE_SECONDS = 300

# CORS origins allowed to call the API (glob patterns)
DEFAULT_ALLOWED_ORIGINS = ('http://localhost:*', 'https://timed.cc')

# Rate limiting identity: client address header and fallback when absent
DEFAULT_IDENTITY_HEADER = 'cf-connecting-ip'
DEFAULT_IDENTITY_FALLBACK = 'global'

# Key read by the warmup endpoint
DEFAULT_WARMUP_KEY = 'warmcheck'

# Welcome endpoint metadata
API_NAME = 'timed.cc'
API_VERSION = '1.0.0'

# Admin shared secret request header
ADMIN_KEY_HEADER = 'x-admin-key'

# Application environment
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# AppConfig: identifiers of the deployed configuration document
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
APPCONFIG_AGENT_URL_ENV = 'APPCONFIG_AGENT_URL'
APPCONFIG_PROFILE_NAME_ENV = 'APPCONFIG_PROFILE_NAME'

# Secrets Manager name holding the admin credential JSON: {"api_key": "..."}
ADMIN_SECRET_ENV = 'ADMIN_SECRET'  # noqa: S105
# Plain admin key accepted instead of Secrets Manager when running locally
ADMIN_API_KEY_ENV = 'ADMIN_API_KEY'

# LocalStack: endpoint URL environment variable for local development
LOCALSTACK_ENDPOINT_ENV = 'LOCALSTACK_ENDPOINT'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
