"""
Key import configuration.
"""

from dataclasses import dataclass

from gpg_import.models.plan import GitScope

MIN_TRUST_LEVEL = 1
MAX_TRUST_LEVEL = 5


@dataclass(frozen=True, kw_only=True)
class ImportConfig:
    """
    Attributes:
        key_filter: Fingerprint, key id or fingerprint suffix of the key to sign with.
            The primary key is used when not set.
        trust_level: Ownertrust to assign (1-5), or None to leave it unchanged.
        git_scope: Write git configuration to the local repository or globally.
        skip_git: Do not produce any git configuration.
        dry_run: Derive everything but make no changes.
        sign_commits: Enable commit.gpgsign.
        sign_tags: Enable tag.gpgsign.
        sign_pushes: Set push.gpgsign to if-asked.
        check_expiry: Reject keys whose primary key or subkeys have expired.
    """

    key_filter: str | None = None
    trust_level: int | None = None
    git_scope: GitScope = GitScope.LOCAL
    skip_git: bool = False
    dry_run: bool = False
    sign_commits: bool = True
    sign_tags: bool = True
    sign_pushes: bool = True
    check_expiry: bool = True

    def __post_init__(self) -> None:
        if self.trust_level is not None and not (
            MIN_TRUST_LEVEL <= self.trust_level <= MAX_TRUST_LEVEL
        ):
            msg = f"trust_level must be between {MIN_TRUST_LEVEL} and {MAX_TRUST_LEVEL}"
            raise ValueError(msg)
        if not isinstance(self.git_scope, GitScope):
            msg = "git_scope must be a GitScope"
            raise ValueError(msg)
        if self.key_filter is not None and not self.key_filter.strip():
            msg = "key_filter must not be blank"
            raise ValueError(msg)
