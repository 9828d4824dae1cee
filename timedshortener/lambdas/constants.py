# Structured log / response event codes
CODE_CREATED = 'CODE_CREATED'
CODE_RESOLVED = 'CODE_RESOLVED'
CODE_NOT_FOUND = 'CODE_NOT_FOUND'
INVALID_PAYLOAD = 'INVALID_PAYLOAD'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
CORS_PREFLIGHT = 'CORS_PREFLIGHT'
RESERVED_CODE = 'RESERVED_CODE'
RATE_LIMITED = 'RATE_LIMITED'
UNAUTHORIZED = 'UNAUTHORIZED'
KEYS_LISTED = 'KEYS_LISTED'
STORAGE_ERROR = 'STORAGE_ERROR'
CODE_SPACE_EXHAUSTED = 'CODE_SPACE_EXHAUSTED'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
WARMUP_READ_FAILED = 'WARMUP_READ_FAILED'
