"""harbinger: autonomous thinking engine for operator-managed agents."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("harbinger")
except PackageNotFoundError:
    __version__ = "0.1.0"  # fallback for development
