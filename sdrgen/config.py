"""Generator options.

Built by the CLI from command line flags and SDRGEN_* environment
variables, then passed explicitly to every stage.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError

AUTH_METHODS = ("NONE", "COOKIE", "OAUTH2")
OAUTH_FLOWS = ("PASSWORD",)

DEFAULT_TIMEOUT = 10.0


@dataclass
class GeneratorOptions:
    base_url: str
    output_dir: Path = Path("src/app")
    model_dir: str = "model"
    service_dir: str = "service"
    auth_method: str = "NONE"
    auth_endpoint: str | None = None
    username: str | None = None
    password: str | None = None
    oauth_flow: str = "PASSWORD"
    client_id: str | None = None
    client_password: str | None = None
    no_additional_properties: bool = False
    no_trivial_types: bool = False
    timeout: float = DEFAULT_TIMEOUT

    def validate(self) -> None:
        """Raise ConfigurationError if the options cannot drive a run."""
        if not self.base_url:
            raise ConfigurationError("A base URL is required.")

        for name in ("model_dir", "service_dir"):
            value = getattr(self, name)
            if not value.isidentifier():
                raise ConfigurationError(f"{name} must be a valid package name, got {value!r}.")

        self.auth_method = self.auth_method.upper()
        if self.auth_method not in AUTH_METHODS:
            raise ConfigurationError(
                f"Unknown authentication method {self.auth_method!r}."
                f" Valid: {', '.join(AUTH_METHODS)}"
            )
        if self.auth_method == "NONE":
            return

        missing = [
            name
            for name in ("auth_endpoint", "username", "password")
            if not getattr(self, name)
        ]
        if self.auth_method == "OAUTH2":
            self.oauth_flow = self.oauth_flow.upper()
            if self.oauth_flow not in OAUTH_FLOWS:
                raise ConfigurationError(f"Unsupported OAuth2 flow {self.oauth_flow!r}.")
            missing += [
                name for name in ("client_id", "client_password") if not getattr(self, name)
            ]
        if missing:
            raise ConfigurationError(
                f"Authentication method {self.auth_method} requires: {', '.join(missing)}"
            )
