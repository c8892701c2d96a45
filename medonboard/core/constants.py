"""Core constants: cache key prefixes and shared literal values."""

CACHE_PREFIX_PERMISSION = "permission"
CACHE_KEY_SEP = ":"

# Path appended to settings.app_url for links in outgoing email.
LOGIN_PATH = "/login"
