"""
Deployment configuration read from environment variables.

Database credentials, the listen port and the token signing key are required.
A missing or malformed value stops startup with ImproperlyConfigured.
"""
from typing import List, Optional

from django.core.exceptions import ImproperlyConfigured
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShopEnvironment(BaseSettings):
    """
    Example:
        >>> env = ShopEnvironment()          # from os.environ
        >>> env = ShopEnvironment(port=8080, jwt_key='...', db_host='db', ...)
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_ignore_empty=True,
        extra='ignore',
    )

    # Required
    db_host: str
    db_username: str
    db_password: str
    db_database: str
    port: int
    jwt_key: str

    # Optional
    db_port: int = 5432
    db_timeout_seconds: int = 10
    db_conn_max_age: int = 0
    jwt_expiration_seconds: int = 86400
    django_secret_key: Optional[str] = None
    django_debug: bool = False
    django_allowed_hosts: str = '*'
    redis_url: str = 'redis://localhost:6379/0'
    rate_limit_enabled: bool = True
    log_level: str = 'INFO'

    @property
    def allowed_hosts(self) -> List[str]:
        return [h.strip() for h in self.django_allowed_hosts.split(',') if h.strip()]


def load_environment() -> ShopEnvironment:
    try:
        return ShopEnvironment()
    except ValidationError as e:
        problems = ', '.join(
            f"{'.'.join(str(part) for part in error['loc']).upper()} ({error['msg']})"
            for error in e.errors()
        )
        raise ImproperlyConfigured(f"Invalid environment configuration: {problems}") from e
