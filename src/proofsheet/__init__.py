"""Top-level package for proofsheet.

Provides subpackages:
- proofsheet.core – entry and raster handle models
- proofsheet.builder – orientation, rotation, layout and PDF assembly
- proofsheet.session – entry store and crop state machine
- proofsheet.upload – conversion service and its client
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version, PackageNotFoundError
    except ImportError:
        return "0.0.0"
    try:
        return pkg_version("proofsheet")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 the proofsheet authors"
__all__: list[str] = ["__version__"]
