"""
Import plan models.

An ImportPlan is everything the orchestrator needs to act on a parsed key:
which keygrips to preset a passphrase for, which fingerprint to trust and how
git should be configured. Building a plan never touches the system.
"""

from dataclasses import dataclass
from enum import StrEnum

from gpg_import.models.bundle import KeyBundle, SelectedKey


class GitScope(StrEnum):
    """Where git signing configuration is written."""

    LOCAL = "local"
    GLOBAL = "global"


@dataclass(frozen=True, kw_only=True)
class SigningConfig:
    """
    Git signing configuration derived from the selected key.

    Attributes:
        user_name: Maps to user.name.
        user_email: Maps to user.email.
        signing_key: Maps to user.signingKey.
        commit_sign: Maps to commit.gpgsign.
        tag_sign: Maps to tag.gpgsign.
        push_sign: Sets push.gpgsign to if-asked when enabled.
        scope: Local repository or global configuration.
    """

    user_name: str
    user_email: str
    signing_key: str
    commit_sign: bool = True
    tag_sign: bool = True
    push_sign: bool = True
    scope: GitScope = GitScope.LOCAL

    def as_git_config(self) -> dict[str, str]:
        """Return git configuration entries in the order they are written."""
        entries = {
            "user.name": self.user_name,
            "user.email": self.user_email,
            "user.signingKey": self.signing_key,
            "commit.gpgsign": _git_bool(self.commit_sign),
            "tag.gpgsign": _git_bool(self.tag_sign),
        }
        if self.push_sign:
            entries["push.gpgsign"] = "if-asked"
        return entries


@dataclass(frozen=True, kw_only=True)
class TrustAssignment:
    """Ownertrust to assign to the imported key."""

    fingerprint: str
    level: int


@dataclass(frozen=True, kw_only=True)
class ImportPlan:
    """
    Attributes:
        bundle: The parsed key.
        selected: The key chosen for signing.
        passphrase_keygrips: Keygrips to preset the passphrase for.
        trust: Ownertrust to assign, None to leave it unchanged.
        git: Git signing configuration, None when git is skipped.
        dry_run: When set, the orchestrator must not make any changes.
    """

    bundle: KeyBundle
    selected: SelectedKey
    passphrase_keygrips: tuple[str, ...]
    trust: TrustAssignment | None = None
    git: SigningConfig | None = None
    dry_run: bool = False


def _git_bool(value: bool) -> str:
    return "true" if value else "false"
