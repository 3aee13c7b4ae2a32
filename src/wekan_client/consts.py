"""High-value constants for the wekan-client package."""

# Package metadata
PACKAGE_VERSION = "0.3.0"
CLIENT_NAME = "wekan-client"
USER_AGENT = f"{CLIENT_NAME}/{PACKAGE_VERSION}"

# External API contract consts
LOGIN_URL_PATH = "/users/login"
REGISTER_URL_PATH = "/users/register"
API_URL_PATH = "/api"

MIME_JSON = "application/json"

# Business logic consts
TOKEN_RENEWAL_MARGIN_SECONDS = 5  # renew 5s before the token expires
MIN_LOGIN_RETRY_SECONDS = 1.0
