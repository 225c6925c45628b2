"""Pydantic configuration models for scrapekit."""

import base64
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional, get_args

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LOG_LEVELS: tuple[str, ...] = get_args(LogLevel)


class AuthType(str, Enum):
    """Authentication types for protected sites."""

    NONE = "none"
    BEARER = "bearer"
    BASIC = "basic"
    COOKIE = "cookie"
    HEADER = "header"


class ByteSize(int):
    """
    Custom type that parses human-readable byte sizes.

    Accepts:
        - Integers (bytes)
        - Strings like '200kb', '1mb', '5gb'

    Examples:
        >>> ByteSize._parse('200kb')
        204800
        >>> ByteSize._parse('1mb')
        1048576
        >>> ByteSize._parse(1024)
        1024
    """

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> Any:
        from pydantic_core import core_schema

        return core_schema.no_info_plain_validator_function(cls._parse)

    @classmethod
    def _parse(cls, v: Any) -> int:
        if isinstance(v, bool):
            raise ValueError(f"Invalid byte size: {v}")
        if isinstance(v, int):
            if v < 0:
                raise ValueError(f"Byte size must not be negative: {v}")
            return v
        if isinstance(v, str):
            v = v.lower().strip()
            # Longer suffixes first
            units = [("gb", 1024**3), ("mb", 1024**2), ("kb", 1024), ("b", 1)]
            for unit, mult in units:
                if v.endswith(unit):
                    num_str = v[: -len(unit)].strip()
                    try:
                        return int(float(num_str) * mult)
                    except ValueError as err:
                        raise ValueError(f"Invalid number in byte size: {v}") from err
            try:
                return int(v)
            except ValueError:
                pass
        raise ValueError(f"Invalid byte size: {v}. Use format like '200kb', '1mb', or integer bytes.")


_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Unset variables are left as written.
    """
    if value is None:
        return None

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, match.group(0))

    return _ENV_VAR_PATTERN.sub(replace, value)


class AuthConfig(BaseModel):
    """Configuration for authenticated requests.

    Supports environment variable expansion in sensitive fields using
    $VAR or ${VAR} syntax. For example:
        auth:
          type: bearer
          token: $API_TOKEN
    """

    type: AuthType = Field(AuthType.NONE, description="Authentication type")
    token: Optional[str] = Field(None, description="Bearer token or API key")
    username: Optional[str] = Field(None, description="Username for basic auth")
    password: Optional[str] = Field(None, description="Password for basic auth")
    cookie: Optional[str] = Field(None, description="Cookie string for cookie auth")
    header_name: Optional[str] = Field(None, description="Custom header name for header auth")
    header_value: Optional[str] = Field(None, description="Custom header value for header auth")

    model_config = {"extra": "forbid"}

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in sensitive fields after init."""
        for name in ("token", "password", "cookie", "header_value"):
            value = getattr(self, name)
            if value:
                object.__setattr__(self, name, _expand_env_var(value))

    def to_headers(self) -> dict[str, str]:
        """Build the request headers for this authentication scheme."""
        headers: dict[str, str] = {}

        if self.type == AuthType.BEARER:
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"

        elif self.type == AuthType.BASIC:
            if self.username and self.password:
                credentials = f"{self.username}:{self.password}"
                encoded = base64.b64encode(credentials.encode()).decode()
                headers["Authorization"] = f"Basic {encoded}"

        elif self.type == AuthType.COOKIE:
            if self.cookie:
                headers["Cookie"] = self.cookie

        elif self.type == AuthType.HEADER and self.header_name and self.header_value:
            headers[self.header_name] = self.header_value

        return headers


class ClientConfig(BaseModel):
    """Configuration for the HTTP client."""

    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")
    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")
    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds")
    max_content_size: ByteSize = Field(
        ByteSize(50 * 1024 * 1024),
        description="Maximum response size (e.g., '200kb', '1mb')",
    )
    headers: dict[str, str] = Field(default_factory=dict, description="Headers sent with every request")
    auth: AuthConfig = Field(default_factory=AuthConfig)

    model_config = {"extra": "forbid"}

    def request_headers(self) -> dict[str, str]:
        """Default headers merged with authentication headers."""
        return {**self.headers, **self.auth.to_headers()}


class ScrapeConfig(BaseModel):
    """
    Root configuration model for scrapekit.

    Example:
        config = ScrapeConfig(
            client=ClientConfig(timeout=10, user_agent="my-bot/1.0"),
            log_level="DEBUG",
        )

    YAML format:
        client:
          timeout: 10
          max_content_size: 5mb
          auth:
            type: bearer
            token: $API_TOKEN
        log_level: DEBUG
    """

    client: ClientConfig = Field(default_factory=ClientConfig)

    # Logging
    log_level: LogLevel = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ScrapeConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ScrapeConfig":
        """Load config from YAML file."""
        return cls.from_yaml(Path(path).read_text())
