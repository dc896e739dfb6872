"""
Allow-list Commands

After a registration is accepted the operator tooling adds the player's
handles to the game server allow-list. Commands are rendered from the
configured templates and handed to an external hook program; without a
hook they are returned for the operator to run by hand.
"""
import logging
import shlex
import subprocess
from typing import List, Optional

from webgate.configuration import Settings, get_settings
from webgate.services.registration_workflow import AcceptedRegistration

logger = logging.getLogger(__name__)


def render_commands(accepted: AcceptedRegistration, settings: Optional[Settings] = None) -> List[str]:
    """One command per platform handle present; "none" and empty handles are skipped."""
    settings = settings or get_settings()
    commands = []
    if accepted.java_handle:
        commands.append(settings.WHITELIST_JAVA_COMMAND.replace("{ign}", accepted.java_handle))
    if accepted.bedrock_handle:
        commands.append(
            settings.WHITELIST_BEDROCK_COMMAND.replace("{ign}", accepted.bedrock_handle)
        )
    return commands


def dispatch(command: str, settings: Optional[Settings] = None) -> bool:
    """
    Pass one command to the configured hook.

    Returns:
        True when the hook exited with status 0; False when no hook is
        configured or the hook failed
    """
    settings = settings or get_settings()
    if not settings.WHITELIST_HOOK:
        return False

    argv = shlex.split(settings.WHITELIST_HOOK) + [command]
    try:
        result = subprocess.run(argv, capture_output=True, text=True, timeout=30)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.error(f"[Allowlist] Hook failed for '{command}': {e}")
        return False

    if result.returncode != 0:
        logger.error(
            f"[Allowlist] Hook exited {result.returncode} for '{command}': {result.stderr.strip()}"
        )
        return False

    logger.info(f"[Allowlist] Dispatched '{command}'")
    return True
