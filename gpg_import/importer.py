"""
Import planning.

Turns the key block handed to a CI job into an ImportPlan: the resolved key,
the key chosen for signing, and the keyring and git settings to apply. No
step here touches the keyring, the agent or git.
"""

from datetime import datetime, timezone
from email.utils import format_datetime

import structlog

from gpg_import.config import ImportConfig
from gpg_import.exceptions import KeyExpiredError
from gpg_import.models.bundle import KeyBundle
from gpg_import.models.plan import ImportPlan, SigningConfig, TrustAssignment
from gpg_import.openpgp.armor import decode_armor
from gpg_import.openpgp.bundle import build_key_bundle
from gpg_import.openpgp.decoder import decode_packets
from gpg_import.openpgp.packets import iter_packets
from gpg_import.openpgp.selector import select_key

logger = structlog.get_logger(__name__)


def read_key_bundle(data: bytes | str) -> KeyBundle:
    """
    Parse an armored key block into a KeyBundle.

    Args:
        data: Armored key block, optionally base64 encoded once more.

    Returns:
        The resolved key bundle.

    Raises:
        GpgImportError: Any armor, packet, decode or structure error.
    """
    bundle = build_key_bundle(decode_packets(iter_packets(decode_armor(data))))
    logger.debug(
        "Read key bundle",
        fingerprint=bundle.fingerprint,
        key_id=bundle.key_id,
        subkeys=len(bundle.subkeys),
    )
    return bundle


def ensure_not_expired(bundle: KeyBundle, now: datetime | None = None) -> None:
    """
    Reject a bundle whose primary key or any subkey has expired.

    Raises:
        KeyExpiredError: If a key expired at or before ``now``.
    """
    now = now or datetime.now(tz=timezone.utc)

    if bundle.is_expired(now):
        msg = f"GPG secret key has expired on {format_datetime(bundle.expires_on)}"
        raise KeyExpiredError(msg, fingerprint=bundle.fingerprint)

    for subkey in bundle.subkeys:
        if subkey.is_expired(now):
            msg = f"GPG secret subkey has expired on {format_datetime(subkey.expires_on)}"
            raise KeyExpiredError(msg, fingerprint=subkey.fingerprint)


def prepare_import(data: bytes | str, config: ImportConfig | None = None) -> ImportPlan:
    """
    Work out everything needed to import a signing key.

    Args:
        data: Armored key block, optionally base64 encoded once more.
        config: Import options. Defaults are used when not provided.

    Returns:
        The import plan.

    Raises:
        GpgImportError: If the key cannot be read, has expired or the filter
            does not resolve to a single key.
    """
    config = config or ImportConfig()

    bundle = read_key_bundle(data)
    if config.check_expiry:
        ensure_not_expired(bundle)

    selected = select_key(bundle, config.key_filter)

    trust = None
    if config.trust_level is not None:
        trust = TrustAssignment(fingerprint=bundle.fingerprint, level=config.trust_level)

    git = None
    if not config.skip_git:
        git = SigningConfig(
            user_name=bundle.user_name,
            user_email=bundle.user_email,
            signing_key=selected.fingerprint if config.key_filter else bundle.key_id,
            commit_sign=config.sign_commits,
            tag_sign=config.sign_tags,
            push_sign=config.sign_pushes,
            scope=config.git_scope,
        )

    plan = ImportPlan(
        bundle=bundle,
        selected=selected,
        passphrase_keygrips=_passphrase_keygrips(bundle),
        trust=trust,
        git=git,
        dry_run=config.dry_run,
    )
    logger.info(
        "Prepared import",
        fingerprint=bundle.fingerprint,
        selected=selected.fingerprint,
        dry_run=plan.dry_run,
    )
    return plan


def _passphrase_keygrips(bundle: KeyBundle) -> tuple[str, ...]:
    keygrips = [bundle.keygrip]
    for subkey in bundle.subkeys:
        if subkey.keygrip not in keygrips:
            keygrips.append(subkey.keygrip)
    return tuple(keygrips)
