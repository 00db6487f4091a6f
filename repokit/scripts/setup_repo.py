import argparse

from repokit.core.app import AppContext
from repokit.github.repository import (
    RepositorySetup,
    RepositorySetupOptions,
    resolve_origin,
)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.description = (
        "Configure branch protection, CODEOWNERS and repository settings on GitHub."
    )
    parser.add_argument(
        "--main-only",
        action="store_true",
        help="Only protect main (skip develop and release branches).",
    )
    parser.add_argument(
        "--no-codeowners", action="store_true", help="Skip creating the CODEOWNERS file."
    )
    parser.add_argument(
        "--no-repo-settings",
        action="store_true",
        help="Skip merge and security repository settings.",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be done without changing anything."
    )


def main(app: AppContext, args: argparse.Namespace) -> int:
    console = app.console
    console.header("🔧 GitHub Repository Setup")
    app.gh.ensure_ready()
    owner, repo = resolve_origin(app.git, app.gh)
    console.info(f"Repository: {owner}/{repo}")

    options = RepositorySetupOptions.from_flags(
        main_only=args.main_only,
        no_codeowners=args.no_codeowners,
        no_repo_settings=args.no_repo_settings,
        dry_run=args.dry_run,
    )
    setup = RepositorySetup(
        app.gh,
        console,
        owner,
        repo,
        app.settings.paths.codeowners_file,
        options,
    )
    setup.print_configuration()
    result = setup.run()
    setup.print_summary()

    if not options.dry_run and console.confirm(
        "Open GitHub repository settings in browser?", default=False
    ):
        app.gh.open_repo_in_browser(setup.full_name, app.settings.release.main_branch)
    return 0 if result.ok else 1
