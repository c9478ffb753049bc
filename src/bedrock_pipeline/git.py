"""Git helpers for discovering the repository a service lives in."""

import logging
import re
import subprocess
from urllib.parse import urlparse

from .config.exceptions import GitLookupError

logger = logging.getLogger(__name__)

_AZURE_SSH = re.compile(r"^git@ssh\.dev\.azure\.com:v3/(?P<org>[^/]+)/(?P<project>[^/]+)/(?P<repo>[^/]+?)(\.git)?/?$")
_GITHUB_SSH = re.compile(r"^git@github\.com:(?P<owner>[^/]+)/(?P<repo>[^/]+?)(\.git)?/?$")


def run_command(cmd, cwd=None, check=True, capture_output=False):
    """Run a command and return the result."""
    return subprocess.run(
        cmd,
        cwd=cwd,
        check=check,
        capture_output=capture_output,
        text=True
    )


def get_origin_url(cwd=None) -> str:
    """Return the URL of the 'origin' remote of the repository at cwd."""
    try:
        result = run_command(["git", "config", "--get", "remote.origin.url"],
                             cwd=cwd, capture_output=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise GitLookupError(f"Unable to get git origin URL: {e}") from e

    origin_url = result.stdout.strip()
    if not origin_url:
        raise GitLookupError("No 'origin' remote is configured")
    logger.debug(f"Got git origin URL {origin_url}")
    return origin_url


def _split_https(url: str):
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None, []
    segments = [s for s in parsed.path.split("/") if s]
    return parsed.hostname.lower(), segments


def _strip_git_suffix(name: str) -> str:
    return name[:-4] if name.endswith(".git") else name


def get_repository_url(origin_url: str) -> str:
    """
    Normalize a git remote URL to the HTTPS URL used to browse the repository.

    Handles Azure DevOps (SSH and HTTPS, with or without user info) and GitHub
    (SSH and HTTPS) remotes.
    """
    url = origin_url.strip()

    match = _AZURE_SSH.match(url)
    if match:
        return f"https://dev.azure.com/{match['org']}/{match['project']}/_git/{match['repo']}"

    match = _GITHUB_SSH.match(url)
    if match:
        return f"https://github.com/{match['owner']}/{match['repo']}"

    host, segments = _split_https(url)
    if host == "dev.azure.com" and len(segments) == 4 and segments[2] == "_git":
        org, project, _, repo = segments
        return f"https://dev.azure.com/{org}/{project}/_git/{_strip_git_suffix(repo)}"
    if host == "github.com" and len(segments) == 2:
        owner, repo = segments
        return f"https://github.com/{owner}/{_strip_git_suffix(repo)}"

    raise GitLookupError(f"Could not determine repository URL from '{origin_url}'")


def get_repository_name(origin_url: str) -> str:
    """Return the repository name for a git remote URL."""
    repository_url = get_repository_url(origin_url)
    return repository_url.rstrip("/").split("/")[-1]
