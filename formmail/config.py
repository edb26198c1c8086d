import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration."""
    # Posted cross-origin from a static site, no session
    WTF_CSRF_ENABLED = False

    # Prefix of the /send-email endpoint
    FORMMAIL_URL_PREFIX = os.environ.get('FORMMAIL_URL_PREFIX', '')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.environ.get('LOG_FORMAT', 'json')

    # Trust X-Forwarded-* headers from one proxy hop
    BEHIND_PROXY = os.environ.get('BEHIND_PROXY', 'False').lower() == 'true'

    MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # 1MB, forms only


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = 'DEBUG'
    LOG_FORMAT = 'console'


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    LOG_FORMAT = 'console'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': ProductionConfig
}
