from wekan_client import __version__
from wekan_client.consts import (
    API_URL_PATH,
    CLIENT_NAME,
    LOGIN_URL_PATH,
    MIN_LOGIN_RETRY_SECONDS,
    PACKAGE_VERSION,
    REGISTER_URL_PATH,
    TOKEN_RENEWAL_MARGIN_SECONDS,
    USER_AGENT,
)


class TestPackageConstants:
    """Test package constants are properly defined"""

    def test_package_version_defined(self):
        """Test that package version is defined"""
        assert isinstance(PACKAGE_VERSION, str)
        assert "." in PACKAGE_VERSION  # Should be semantic version
        assert __version__ == PACKAGE_VERSION

    def test_user_agent_format(self):
        """Test that user agent follows expected format"""
        assert USER_AGENT == f"{CLIENT_NAME}/{PACKAGE_VERSION}"

    def test_url_path_constants(self):
        """Test that URL path constants match the Wekan API"""
        assert LOGIN_URL_PATH == "/users/login"
        assert REGISTER_URL_PATH == "/users/register"
        assert API_URL_PATH == "/api"

    def test_timing_constants(self):
        """Test that renewal happens early and retries are not too eager"""
        assert TOKEN_RENEWAL_MARGIN_SECONDS == 5
        assert MIN_LOGIN_RETRY_SECONDS == 1.0
