"""Service settings: credentials, addresses, redirect pages and templates.

Settings are read once per process either from environment variables
(optionally seeded from a ``.env`` file) or, for local development, from a
flat YAML file using the same keys.
"""

import os
from dataclasses import dataclass, fields
from typing import Callable, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

RECAPTCHA_V2 = 'v2'
RECAPTCHA_V3 = 'v3'
DEFAULT_V3_THRESHOLD = 0.5

REQUIRED_KEYS = (
    'NOREPLY_EMAIL',
    'NOREPLY_NAME',
    'RECIPIENT_EMAIL',
    'RECIPIENT_NAME',
    'THANK_YOU_PAGE',
    'ERROR_PAGE',
)


@dataclass(frozen=True)
class Environ:
    """Validated service settings."""
    noreply_email: str
    noreply_name: str
    recipient_email: str
    recipient_name: str
    thank_you_page: str
    error_page: str
    email_template: str = 'email.txt'
    confirmation_template: str = 'confirmation.html'
    templates_dir: Optional[str] = None
    honeypot_field: str = ''
    recaptcha_version: str = ''
    recaptcha_secret_key: str = ''
    recaptcha_v3_threshold: float = 0.0
    aws_region: str = 'us-east-1'
    ses_configuration_set: Optional[str] = None

    def recaptcha_enabled(self) -> bool:
        return self.recaptcha_version != ''

    def honeypot_check_enabled(self) -> bool:
        return self.honeypot_field != ''

    @property
    def threshold(self) -> float:
        """Minimal v3 score; zero means the service default."""
        return self.recaptcha_v3_threshold or DEFAULT_V3_THRESHOLD

    @classmethod
    def from_mapping(cls, values: Dict[str, object]) -> 'Environ':
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = key.lower()
            if name not in known or value is None:
                continue
            if name == 'recaptcha_v3_threshold':
                value = parse_threshold(value)
            else:
                # YAML scalars such as `HONEYPOT_FIELD: 123` arrive as ints
                value = str(value).strip()
                if value == '' and name in ('templates_dir', 'ses_configuration_set'):
                    continue
            kwargs[name] = value
        for key in REQUIRED_KEYS:
            kwargs.setdefault(key.lower(), '')
        for name in ('email_template', 'confirmation_template', 'aws_region'):
            if kwargs.get(name) == '':
                del kwargs[name]
        return cls(**kwargs)


def parse_threshold(value) -> float:
    # YAML files for some hosts can only carry strings, so accept "0.25" and 0.25
    if value in ('', None):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"invalid 'RECAPTCHA_V3_THRESHOLD' value '{value}'")


def validate(env: Environ) -> None:
    for key in REQUIRED_KEYS:
        if not getattr(env, key.lower()):
            raise ConfigError(f"environment variable '{key}' should not be empty")

    if env.recaptcha_enabled():
        if not env.recaptcha_secret_key:
            raise ConfigError("environment variable 'RECAPTCHA_SECRET_KEY' should not be empty")
        if env.recaptcha_version not in (RECAPTCHA_V2, RECAPTCHA_V3):
            raise ConfigError(
                f"invalid recaptcha version '{env.recaptcha_version}', "
                "use 'v2', 'v3', or '' to turn it off"
            )


def from_os_env() -> Dict[str, str]:
    """Read settings from environment variables, loading ``.env`` first."""
    load_dotenv()
    keys = [f.name.upper() for f in fields(Environ)]
    return {key: os.environ[key] for key in keys if key in os.environ}


def yaml_loader(file_path: str) -> Callable[[], Dict[str, object]]:
    """Return a loader reading settings from a YAML file. Meant for local development."""
    def load():
        try:
            with open(file_path, encoding='utf-8') as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"reading '{file_path}' failed: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"'{file_path}' should contain a mapping of settings")
        return data
    return load


def parse_env(loader: Callable[[], Dict[str, object]] = from_os_env) -> Environ:
    """Load settings with the given loader and validate them."""
    env = Environ.from_mapping(loader())
    validate(env)
    return env
