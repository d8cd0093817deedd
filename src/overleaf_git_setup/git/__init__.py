"""Git CLI integration: command execution and credential handling."""

from overleaf_git_setup.git.client import GitClient, check_result
from overleaf_git_setup.git.credentials import CredentialRecord, redact_token, restrict_to_owner

__all__ = ["CredentialRecord", "GitClient", "check_result", "redact_token", "restrict_to_owner"]
