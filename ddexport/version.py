"""Version of the installed distribution, kept out of the package ``__init__`` to avoid circular imports."""
from importlib import metadata


__all__ = ["__version__", "get_version"]

DISTRIBUTION = "ddexport"


def get_version(distribution=DISTRIBUTION):
    # type: (str) -> str
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        # source tree that was never installed
        return "0.0.0"


__version__ = get_version()
