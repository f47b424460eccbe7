# Provider identifiers
PROVIDER_GROQ = "groq"
PROVIDER_GEMINI = "gemini"
PROVIDER_OPENAI = "openai"
PROVIDER_ANTHROPIC = "anthropic"
DEFAULT_PROVIDER = PROVIDER_GROQ

# Rate limit ceilings (requests per fixed minute / hour window).
# Providers without an entry are not rate limited.
DEFAULT_RATE_LIMITS: dict[str, tuple[int, int]] = {
    PROVIDER_GROQ: (30, 500),
    PROVIDER_GEMINI: (15, 300),
}
MINUTE_SECONDS = 60
HOUR_SECONDS = 3600
RATE_LIMIT_REASON = "Rate limit exceeded"

# Response cache
CACHE_TTL_SECONDS = 3600
MIN_CACHEABLE_LENGTH = 10
MAX_CACHEABLE_LENGTH = 1000

# Answers to these go stale well within the cache TTL
TIME_SENSITIVE_TERMS = (
    "today",
    "tonight",
    "yesterday",
    "tomorrow",
    "current",
    "currently",
    "latest",
    "recent",
    "recently",
    "right now",
    "this week",
    "this month",
    "this year",
    "news",
)

# Retry Configuration
DEFAULT_MAX_RETRIES = 3
RETRY_INITIAL_DELAY = 1.0  # seconds
RETRY_MAX_DELAY = 10.0  # seconds
RETRY_BACKOFF_MULTIPLIER = 2.0
DEFAULT_ATTEMPT_TIMEOUT = 30.0  # seconds per backend call

# Prompt construction
MAX_HISTORY_MESSAGES = 10
RAW_ANSWER_PREVIEW_CHARS = 500
DEFAULT_ROLE_TYPE = "general"

# Generation settings shared by all backends
GENERATION_TEMPERATURE = 0.8
GENERATION_MAX_TOKENS = 2048

# Scores reported in the legacy compatibility fields
SUCCESS_SCORE = 85
FAILURE_SCORE = 0

UNKNOWN_MODEL = "unknown"
