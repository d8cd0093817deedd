"""Overleaf Git Setup.

One-time local setup for cloning a private Overleaf project over HTTPS:
- installs git if it is missing
- configures the global git identity
- stores the Overleaf token with git's `store` credential helper
- clones the project
"""

__version__ = "0.1.0"

from overleaf_git_setup.config import SetupSettings

__all__ = ["__version__", "SetupSettings"]
