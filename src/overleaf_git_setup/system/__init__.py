"""Host system integration."""

from overleaf_git_setup.system.packages import PackageInstaller

__all__ = ["PackageInstaller"]
