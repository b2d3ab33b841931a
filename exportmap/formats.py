"""Module format detection for resolved files."""

from pathlib import PurePath

MODULE = "module"
COMMONJS = "commonjs"
JSON = "json"
WASM = "wasm"
BUILTIN = "builtin"

_EXTENSION_FORMATS = {
    ".mjs": MODULE,
    ".cjs": COMMONJS,
    ".json": JSON,
    ".wasm": WASM,
}


def detect_format(path: PurePath, package_type: str | None) -> str | None:
    """Decide the module format of a resolved file.

    ``.js`` files take the ``type`` field of the nearest package ("module"
    means ESM, anything else CommonJS). Unknown extensions have no format.
    """
    suffix = path.suffix.lower()
    if suffix in _EXTENSION_FORMATS:
        return _EXTENSION_FORMATS[suffix]
    if suffix == ".js":
        return MODULE if package_type == MODULE else COMMONJS
    return None
