"""
SQL Target domain model.

This module defines the SqlTarget domain entity representing
a SQL Server instance whose tempdb is checked.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import AuthType


class SqlTarget(BaseModel):
    """
    Domain model for a SQL Server target.

    Connection details only; the password is never logged or serialized
    into reports.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Unique identifier/alias for this target")
    name: Optional[str] = Field(None, description="Human-readable display name")
    server: str = Field(..., description="SQL Server host name or IP")
    instance: Optional[str] = Field(None, description="Named instance (null for default)")
    port: Optional[int] = Field(None, description="TCP port (overrides instance)")
    auth_type: AuthType = Field(AuthType.WINDOWS, description="Authentication method", alias="auth")
    username: Optional[str] = Field(None, description="SQL login (auth=sql)")
    password: Optional[str] = Field(None, description="SQL password (auth=sql)", repr=False)
    connect_timeout: int = Field(30, description="Seconds to wait for SQL connection")
    enabled: bool = Field(True, description="Whether this target is checked")

    @field_validator("auth_type", mode="before")
    @classmethod
    def normalize_auth(cls, v):
        """Map legacy auth strings to enum."""
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "integrated":
                return AuthType.WINDOWS
        return v

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        """Validate server name format."""
        if not v or not v.strip():
            raise ValueError("Server name cannot be empty")
        return v.strip()

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: Optional[int]) -> Optional[int]:
        """Validate port number."""
        if v is not None and (v < 1 or v > 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("connect_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v < 1:
            raise ValueError("connect_timeout must be at least 1 second")
        return v

    @model_validator(mode="after")
    def check_sql_login(self) -> "SqlTarget":
        if self.auth_type is AuthType.SQL and not self.username:
            raise ValueError("username is required when auth is 'sql'")
        return self

    @property
    def display_name(self) -> str:
        """Human-readable server name for reports."""
        if self.name:
            return self.name
        if self.port:
            return f"{self.server}:{self.port}"
        if self.instance:
            return f"{self.server}\\{self.instance}"
        return self.server

    @property
    def server_instance(self) -> str:
        """Server instance string for the ODBC connection."""
        if self.port:
            return f"{self.server},{self.port}"
        if self.instance:
            return f"{self.server}\\{self.instance}"
        return self.server
