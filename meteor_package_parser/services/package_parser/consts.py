from typing import Final

NODE_MODULES_KEY: Final[str] = "node_modules"
METEOR_KEY: Final[str] = "meteor"
METEOR_MODULE_ROOT: Final[str] = f"/{NODE_MODULES_KEY}/{METEOR_KEY}/"

PACKAGE_DEFINE_METHOD: Final[str] = "_define"
MAIN_MODULE_BINDING: Final[str] = "exports"
REQUIRE_FUNCTION: Final[str] = "require"
MAIN_MODULE_OPERATOR: Final[str] = "!"

EXPORT_METHOD: Final[str] = "export"
EXPORT_DEFAULT_METHOD: Final[str] = "exportDefault"
LINK_METHOD: Final[str] = "link"
