# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Main entry point for the release-candidate bump action.

Each step of the release pipeline is available as its own command so that a
workflow can run them as separate steps, passing values through step
outputs. The 'release' command runs the whole pipeline in one process.

References:
    - GitHub Actions Environment Variables:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/store-information-in-variables#default-environment-variables
    - GitHub Actions Outputs:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/passing-information-between-jobs#setting-an-output-parameter
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass, fields

from github.GithubException import GithubException

from release_bump.bump import BumpInfo, BumpType, merge_bump_info
from release_bump.commits import CommitLogError, classify_commits, read_recent_commits
from release_bump.github_api import GitHubAPI
from release_bump.releases import LatestRelease, get_latest_release, sync_rc_release, validate_prefix
from release_bump.version import bump_version

logger = logging.getLogger(__name__)

COMMANDS = ("release", "latest-release", "determine-bump", "update-version", "update-rc-release")

# Commands that talk to the GitHub API
API_COMMANDS = ("release", "latest-release", "update-rc-release")


@dataclass
class ActionInputs:
    """Parsed action inputs from environment variables."""

    token: str
    debug: bool
    dry_run: bool
    command: str = "release"
    tag_prefix: str = "v"


@dataclass
class GitHubContext:
    """GitHub run context from environment variables."""

    sha: str
    repository: str


@dataclass
class StepInputs:
    """Values handed over from earlier workflow steps."""

    latest_release: str = ""
    bump_type: str = ""
    new_version: str = ""
    bump_info: str = ""


@dataclass
class ActionOutputs:
    """Action outputs to be written to GITHUB_OUTPUT."""

    latest_release: str = ""
    bump_type: str = ""
    new_bump_info: str = ""
    new_version: str = ""
    bump_info: str = ""
    tag: str = ""
    release_action: str = ""
    release_id: str = ""


def _env(*names: str, default: str = "") -> str:
    """Return the first non-empty environment variable among names."""
    for name in names:
        value = os.environ.get(name, "")
        if value:
            return value
    return default


def parse_inputs(args: list[str] | None = None) -> ActionInputs:
    """Parse action inputs from CLI arguments or environment variables.

    CLI arguments take precedence over environment variables.
    When run as a GitHub Action, environment variables are used.
    When run from CLI, arguments can be provided directly.

    Args:
        args: Optional list of CLI arguments. If None, uses environment
              variables only (GitHub Actions mode). Pass sys.argv[1:] for
              CLI mode.

    Returns:
        ActionInputs with parsed values.
    """
    parser = argparse.ArgumentParser(
        description="Release-candidate bump action - compute the next RC version and sync the RC release",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  latest-release     Read version and bump info of the latest release
  determine-bump     Classify the last commits as major, minor or patch
  update-version     Compute the next RC version from LATEST_RELEASE and BUMP_TYPE
  update-rc-release  Create or update the RC release and tag for NEW_VERSION
  release            Run all of the above (default)

Environment Variables (used as defaults when CLI args not provided):
  INPUT_COMMAND                Command to run
  INPUT_TOKEN, GITHUB_TOKEN    GitHub token for authentication
  INPUT_DEBUG                  Enable debug logging (true/false)
  INPUT_DRY_RUN                Dry-run mode, don't write releases or tags (true/false)
  INPUT_TAG_PREFIX             Prefix for version tags (default: v)

Examples:
  # Run with environment variables (GitHub Actions mode)
  python -m release_bump.main

  # Run a single step
  LATEST_RELEASE='{"version":"1.2.3","bumpInfo":{}}' BUMP_TYPE=minor \\
      python -m release_bump.main update-version
        """,
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        default=_env("INPUT_COMMAND", default="release"),
        help="Pipeline step to run (default: from INPUT_COMMAND env or 'release')",
    )
    parser.add_argument(
        "--token",
        default=_env("INPUT_TOKEN", "GITHUB_TOKEN"),
        help="GitHub token for authentication (default: from INPUT_TOKEN or GITHUB_TOKEN env)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=os.environ.get("INPUT_DEBUG", "false").lower() == "true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=os.environ.get("INPUT_DRY_RUN", "false").lower() == "true",
        help="Dry-run mode - don't actually write releases or tags",
    )
    parser.add_argument(
        "--tag-prefix",
        default=os.environ.get("INPUT_TAG_PREFIX", "v"),
        help="Prefix for version tags (default: v)",
    )

    # Use empty list for GitHub Actions mode (env vars only), or provided args for CLI
    parsed = parser.parse_args(args if args is not None else [])

    if not validate_prefix(parsed.tag_prefix):
        logger.error(
            "Invalid tag-prefix '%s': must be non-empty and not contain "
            "invalid git ref characters (.. ~ ^ : \\ space tab newline * ? [)",
            parsed.tag_prefix,
        )
        sys.exit(1)

    return ActionInputs(
        token=parsed.token,
        debug=parsed.debug,
        dry_run=parsed.dry_run,
        command=parsed.command,
        tag_prefix=parsed.tag_prefix,
    )


def parse_context() -> GitHubContext:
    """Parse GitHub context from environment variables.

    References:
        - https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/store-information-in-variables#default-environment-variables
    """
    return GitHubContext(
        sha=os.environ.get("GITHUB_SHA", ""),
        repository=os.environ.get("GITHUB_REPOSITORY", ""),
    )


def parse_step_inputs() -> StepInputs:
    """Parse values passed in from earlier steps.

    Both the upper-case names and the lower-case names used by older
    workflows are accepted.
    """
    return StepInputs(
        latest_release=_env("LATEST_RELEASE", "latest_release"),
        bump_type=_env("BUMP_TYPE", "bump_type"),
        new_version=_env("NEW_VERSION", "new_version"),
        bump_info=_env("BUMP_INFO", "bump_info"),
    )


def set_outputs(outputs: ActionOutputs) -> None:
    """Write non-empty action outputs to the GITHUB_OUTPUT file.

    Args:
        outputs: ActionOutputs to write.

    References:
        - https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/passing-information-between-jobs#setting-an-output-parameter
    """
    output_file = os.environ.get("GITHUB_OUTPUT", "")
    if not output_file:
        logger.warning("GITHUB_OUTPUT not set, outputs will not be written")
        return

    written = []
    with open(output_file, "a") as f:
        for item in fields(outputs):
            value = getattr(outputs, item.name)
            if value:
                f.write(f"{item.name}={value}\n")
                written.append(item.name)

    logger.info("Set outputs: %s", ", ".join(written) or "none")


def configure_logging(debug: bool) -> None:
    """Configure logging based on debug flag.

    Args:
        debug: If True, enable DEBUG level logging.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def _require(value: str, name: str) -> str:
    if not value:
        raise ValueError(f"Input '{name}' is required")
    return value


def handle_latest_release(api: GitHubAPI, inputs: ActionInputs) -> ActionOutputs:
    """Read the latest release and expose it as the latest_release output."""
    latest = get_latest_release(api, inputs.tag_prefix)
    return ActionOutputs(latest_release=latest.to_json())


def handle_determine_bump(step: StepInputs, commits: str | None = None) -> ActionOutputs:
    """Classify the recent commits and merge the result into the bump info.

    Args:
        step: Step inputs carrying the latest release payload.
        commits: Commit text to classify. Read from git log when None.

    Returns:
        ActionOutputs with bump_type and new_bump_info.
    """
    latest = LatestRelease.from_json(_require(step.latest_release, "latest_release"))
    logger.info("Latest version: %s", latest.version)
    logger.info("Current bump info: %s", latest.bump_info.to_json())

    if commits is None:
        commits = read_recent_commits()
    logger.debug("Commits to analyze:\n%s\n---End of commits---", commits)

    bump_type = classify_commits(commits)
    new_bump_info = merge_bump_info(latest.bump_info, bump_type)
    logger.info("Determined bump type: %s", bump_type)

    return ActionOutputs(bump_type=bump_type.value, new_bump_info=new_bump_info.to_json())


def handle_update_version(step: StepInputs) -> ActionOutputs:
    """Compute the next RC version from the latest release and bump type.

    Raises:
        ValueError: If an input is missing or malformed.
        VersionFormatError: If the latest version is not X.Y.Z[-rc.N].
    """
    logger.debug("Raw latest release: %s", step.latest_release)
    latest = LatestRelease.from_json(_require(step.latest_release, "latest_release"))
    bump_type = BumpType.parse(_require(step.bump_type, "bump_type"))

    new_version, new_bump_info = bump_version(latest.version, bump_type, latest.bump_info)
    return ActionOutputs(new_version=str(new_version), bump_info=new_bump_info.to_json())


def handle_update_rc_release(
    api: GitHubAPI,
    context: GitHubContext,
    step: StepInputs,
    inputs: ActionInputs,
) -> ActionOutputs:
    """Create or update the RC release for the computed version."""
    new_version = _require(step.new_version, "new_version")
    bump_info = BumpInfo.from_json(_require(step.bump_info, "bump_info"))
    commit_sha = _require(context.sha, "GITHUB_SHA")

    result = sync_rc_release(
        api,
        new_version,
        bump_info,
        commit_sha,
        tag_prefix=inputs.tag_prefix,
        dry_run=inputs.dry_run,
    )
    release_id = str(result.release_id) if result.release_id is not None else ""
    return ActionOutputs(tag=result.tag, release_action=result.action, release_id=release_id)


def handle_release(
    api: GitHubAPI,
    context: GitHubContext,
    inputs: ActionInputs,
    commits: str | None = None,
) -> ActionOutputs:
    """Run the full pipeline: read, classify, bump and sync.

    Args:
        api: GitHubAPI instance.
        context: GitHub run context.
        inputs: Action inputs.
        commits: Commit text to classify. Read from git log when None.

    Returns:
        ActionOutputs with every value the individual steps produce.
    """
    outputs = handle_latest_release(api, inputs)
    step = StepInputs(latest_release=outputs.latest_release)

    determined = handle_determine_bump(step, commits)
    outputs.bump_type = determined.bump_type
    outputs.new_bump_info = determined.new_bump_info

    step.bump_type = determined.bump_type
    updated = handle_update_version(step)
    outputs.new_version = updated.new_version
    outputs.bump_info = updated.bump_info

    step.new_version = updated.new_version
    step.bump_info = updated.bump_info
    synced = handle_update_rc_release(api, context, step, inputs)
    outputs.tag = synced.tag
    outputs.release_action = synced.release_action
    outputs.release_id = synced.release_id

    return outputs


def run(inputs: ActionInputs, context: GitHubContext, step: StepInputs) -> ActionOutputs:
    """Dispatch a command to its handler.

    Raises:
        ValueError: If inputs are missing or malformed.
        CommitLogError: If the commit log cannot be read.
        GithubException: If a GitHub API call fails.
    """
    if inputs.command == "determine-bump":
        return handle_determine_bump(step)
    if inputs.command == "update-version":
        return handle_update_version(step)

    api = GitHubAPI(token=inputs.token, repository=context.repository)

    if inputs.command == "latest-release":
        return handle_latest_release(api, inputs)
    if inputs.command == "update-rc-release":
        return handle_update_rc_release(api, context, step, inputs)
    return handle_release(api, context, inputs)


def main(args: list[str] | None = None) -> None:
    """Main entry point for the action."""
    inputs = parse_inputs(sys.argv[1:] if args is None else args)
    configure_logging(inputs.debug)

    context = parse_context()
    step = parse_step_inputs()
    logger.debug("Command: %s, Repository: %s, SHA: %s", inputs.command, context.repository, context.sha[:7])

    if inputs.command in API_COMMANDS and not inputs.token:
        logger.error("GitHub token is required. Set INPUT_TOKEN or GITHUB_TOKEN.")
        sys.exit(1)

    try:
        outputs = run(inputs, context, step)
    except GithubException as e:
        logger.error("GitHub API request failed: %s", e)
        sys.exit(1)
    except CommitLogError as e:
        logger.error("Failed to read commits: %s", e)
        sys.exit(1)
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)

    set_outputs(outputs)


if __name__ == "__main__":  # pragma: no cover
    main()
