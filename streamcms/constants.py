from streamcms.config import settings

# JWT configuration
SECRET_KEY = settings.secret_key
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes

# Pagination defaults
DEFAULT_MOVIES_PER_PAGE = 12
DEFAULT_COMMENTS_PER_PAGE = 10
MAX_PAGE_SIZE = 100
