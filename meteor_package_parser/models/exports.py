from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ExportType(StrEnum):
    """Ways a Meteor module can expose a symbol."""

    EXPORT = "export"
    EXPORT_DEFAULT = "export-default"
    RE_EXPORT = "re-export"
    GLOBAL_BINDING = "global-binding"


class BaseExport(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Name of the exported symbol")


class NamedExport(BaseExport):
    """A symbol declared and exported by the module itself.

    Example:
        ``export const name = '...'``
    """

    type: Literal["export"] = ExportType.EXPORT.value


class DefaultExport(BaseExport):
    """The module's default export, referencing a local binding.

    Example:
        ``export default name``
    """

    type: Literal["export-default"] = ExportType.EXPORT_DEFAULT.value


class ReExport(BaseExport):
    """A symbol exported from another module.

    Example:
        ``export { name as alias } from 'from'``
    """

    type: Literal["re-export"] = ExportType.RE_EXPORT.value
    from_: str = Field(..., alias="from", description="Module the symbol comes from")
    as_: str | None = Field(
        default=None,
        alias="as",
        description="Exported name when it differs from the imported one",
    )
    link_id: int | None = Field(
        default=None,
        alias="id",
        description="Meteor's internal id for the module link, informational only",
    )


class GlobalBinding(BaseExport):
    """A live binding imported through a setter, e.g. ``Meteor`` or ``DDP``.

    These are updated by Meteor after import time and should be excluded from
    any further bundling.
    """

    type: Literal["global-binding"] = ExportType.GLOBAL_BINDING.value
    from_: str = Field(..., alias="from", description="Module the binding comes from")
    link_id: int | None = Field(
        default=None,
        alias="id",
        description="Meteor's internal id for the module link, informational only",
    )


ModuleExport = Annotated[
    NamedExport | DefaultExport | ReExport | GlobalBinding,
    Field(discriminator="type"),
]
