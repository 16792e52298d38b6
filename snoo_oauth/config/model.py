from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import OAUTH_HOST, WILDCARD_SCOPE, WWW_HOST


class AuthMode(str, Enum):
    """Application type registered with the authorization server.

    Attributes:
        SCRIPT: Trusted first-party script; password grant.
        EXPLICIT: Web app; authorization-code grant with user redirect.
        IMPLICIT: Installed/browser app; token returned in the redirect.
        APP_ONLY: No user context; client-credentials style grant.
    """

    SCRIPT = "script"
    EXPLICIT = "explicit"
    IMPLICIT = "implicit"
    APP_ONLY = "app_only"


class Duration(str, Enum):
    """Whether an explicit authorization also yields a refresh token."""

    TEMPORARY = "temporary"
    PERMANENT = "permanent"


def _normalize_scope(scope: Any) -> tuple[str, ...]:
    """Normalize a scope list or a comma/space separated string.

    Strips whitespace, drops empty entries and de-duplicates while keeping
    the caller's order (the authorize URL lists scopes as given).
    """
    if scope is None:
        return ()
    if isinstance(scope, str):
        scope = scope.replace(",", " ").split()
    if not isinstance(scope, list | tuple):
        raise ValueError("scope must be an ordered list of strings or a string")
    items = []
    for s in scope:
        if not isinstance(s, str):
            raise ValueError("scope entries must be strings")
        stripped = s.strip()
        if stripped:
            items.append(stripped)
    return tuple(dict.fromkeys(items))


class Credentials(BaseModel):
    """Immutable per-engine application credentials.

    Attributes:
        mode: Application type / grant flow.
        client_id: Application key issued by the authorization server.
        client_secret: Application secret (empty for installed apps).
        redirect_uri: Redirect target for explicit and implicit flows.
        scope: Ordered permission names.
        username: Account name (script mode only).
        password: Account password (script mode only).
        duration: Explicit flow only; permanent yields a refresh token.
        mobile_friendly: Use the compact authorize page.
    """

    model_config = ConfigDict(frozen=True)

    mode: AuthMode
    client_id: str = Field(min_length=1)
    client_secret: str = ""
    redirect_uri: str | None = None
    scope: tuple[str, ...] = ()
    username: str | None = None
    password: str | None = Field(default=None, repr=False)
    duration: Duration = Duration.TEMPORARY
    mobile_friendly: bool = False

    @field_validator("scope", mode="before")
    @classmethod
    def validate_scope(cls, v: Any) -> tuple[str, ...]:
        return _normalize_scope(v)

    @field_validator("client_secret", mode="before")
    @classmethod
    def validate_secret(cls, v: Any) -> str:
        return "" if v is None else v

    @model_validator(mode="after")
    def validate_mode_requirements(self) -> Credentials:
        """Check that the fields each flow depends on are present."""
        if self.mode is AuthMode.SCRIPT:
            if not (self.username and self.password):
                raise ValueError("script mode requires username and password")
            if not self.client_secret:
                raise ValueError("script mode requires client_secret")
        if self.mode in (AuthMode.EXPLICIT, AuthMode.IMPLICIT) and not self.redirect_uri:
            raise ValueError(f"{self.mode.value} mode requires redirect_uri")
        return self

    @property
    def url_scope(self) -> str:
        """Comma-joined scope for the authorize URL."""
        return ",".join(self.scope) if self.scope else WILDCARD_SCOPE

    @property
    def token_scope(self) -> str:
        """Space-joined scope for token-exchange form bodies."""
        return " ".join(self.scope) if self.scope else WILDCARD_SCOPE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Credentials:
        """Create Credentials from a plain mapping.

        Accepts the camelCase keys used by JavaScript-era configs
        (``clientId``, ``redirectUri``, ...) alongside snake_case ones.

        Args:
            data: Mapping of credential fields.

        Returns:
            Credentials instance.
        """
        aliases = {
            "type": "mode",
            "key": "client_id",
            "clientId": "client_id",
            "secret": "client_secret",
            "clientSecret": "client_secret",
            "redirectUri": "redirect_uri",
            "mobile": "mobile_friendly",
            "mobileFriendly": "mobile_friendly",
        }
        norm_data = {aliases.get(k, k): v for k, v in data.items()}
        mode = norm_data.get("mode")
        if isinstance(mode, str):
            norm_data["mode"] = mode.strip().lower().replace("-", "_")
        return cls.model_validate(norm_data)


class ServerConfig(BaseModel):
    """Hosts the engine and the call layer talk to.

    Attributes:
        www: Host serving authorize, access_token and revoke_token.
        oauth: Host serving authenticated API calls.
        scheme: URL scheme; only tests point this at plain http.
    """

    model_config = ConfigDict(frozen=True)

    www: str = WWW_HOST
    oauth: str = OAUTH_HOST
    scheme: str = "https"

    def www_url(self, path: str) -> str:
        return f"{self.scheme}://{self.www}{path}"

    def oauth_url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.scheme}://{self.oauth}{path}"
