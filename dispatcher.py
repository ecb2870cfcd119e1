# dispatcher.py

import logging
import os
from typing import Iterable, Mapping, Optional

from config import Configuration, RepositoryRule
from models.dispatch_result import DispatchResult
from models.push_event import PushEvent
from utils import run_command

logger = logging.getLogger(__name__)


def match_repository(event: PushEvent, repositories: Iterable[RepositoryRule]) -> Optional[RepositoryRule]:
    """
    First rule whose name equals the repository's full name or HTML URL, exactly.
    """
    for rule in repositories:
        if rule.name == event.repo_full_name or rule.name == event.repo_html_url:
            return rule
    return None


def build_environment(event: PushEvent, base: Optional[Mapping[str, str]] = None) -> dict:
    env = dict(os.environ if base is None else base)
    env.update({
        "REPO_NAME": event.repo_full_name,
        "REPO_OWNER": event.repo_owner_email,
        "REPO_REF": event.ref,
        "REPO_HEAD_COMMIT": event.head_commit_id,
        "REPO_HEAD_AUTHOR": event.head_commit_author_email,
    })
    return env


def dispatch(event: PushEvent, config: Configuration) -> DispatchResult:
    """
    Run the commands of the matching repository rule, in order.

    A failing command does not stop the ones after it; every outcome is
    collected in the returned DispatchResult.
    """
    rule = match_repository(event, config.repositories)
    if rule is None:
        logger.info(f"No repository rule matches '{event.repo_full_name}' ({event.repo_html_url}); nothing to run.")
        return DispatchResult()

    logger.info(f"Repository '{event.repo_full_name}' matched rule '{rule.name}' ({len(rule.commands)} commands).")
    env = build_environment(event)
    results = [run_command(command, env, timeout=config.command_timeout) for command in rule.commands]

    failures = sum(1 for result in results if not result.ok)
    if failures:
        logger.warning(f"{failures} of {len(results)} commands failed for '{rule.name}'.")
    return DispatchResult(matched=rule.name, results=tuple(results))
