import os

from pydantic import BaseModel, Field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class ParserConfig(BaseModel):
    """Identifiers and switches used while recognizing a Meteor bundle."""

    installer_identifier: str = Field(
        default_factory=lambda: os.getenv("METEOR_PARSER_INSTALLER", "meteorInstall"),
        description="Function called with the package's module tree",
    )
    registry_identifier: str = Field(
        default_factory=lambda: os.getenv("METEOR_PARSER_REGISTRY", "Package"),
        description="Global object whose _define() registers package-scope exports",
    )
    module_binding_pattern: str = Field(
        default=r"module\d*",
        description="Pattern matching the per-module aliases of Meteor's module API",
    )
    allow_syntax_errors: bool = Field(
        default_factory=lambda: _env_flag("METEOR_PARSER_ALLOW_SYNTAX_ERRORS"),
        description="Extract from trees containing syntax errors instead of failing",
    )
