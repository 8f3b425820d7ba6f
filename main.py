"""
Main entry point for the SharePoint Online default sensitivity label tool.
Enables the tenant label features, lets the operator pick a label and sets it
as the default label of a site's document library.
"""

import argparse
import logging
import sys
from typing import List, Optional

from spo_labeler.environment import prepare_environment
from spo_labeler.errors import FeatureFlagError, LabelAdminError
from spo_labeler.logging_setup import configure_console_logging, default_log_path, transcript
from spo_labeler.models import SiteTarget, WorkflowOutcome, WorkflowResult
from spo_labeler.prompts import ConsolePrompter, Prompter

logger = logging.getLogger("spo_default_label")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Enable sensitivity label support and set a document library's default label"
    )
    parser.add_argument("--user-principal-name", required=True,
                        help="Operator account used to sign in (e.g. admin@contoso.com)")
    parser.add_argument("--tenant-name", required=True,
                        help="Tenant short name, the 'contoso' in contoso.sharepoint.com")
    parser.add_argument("--spo-site-name", required=True,
                        help="Site name, the 'Finance' in /sites/Finance")
    parser.add_argument("--log-file", default=None,
                        help="Transcript file; its directory is created when missing")
    parser.add_argument("--disable-name-checking", action=argparse.BooleanOptionalAction, default=True,
                        help="Suppress warnings while importing client modules (default: on)")
    parser.add_argument("--library", default=None,
                        help="Document library title (default: Documents or config.json 'library')")
    parser.add_argument("--verify", action="store_true", default=None,
                        help="Read the library's default label back after setting it")
    return parser


def run(args: argparse.Namespace, prompter: Optional[Prompter] = None) -> WorkflowResult:
    prompter = prompter or ConsolePrompter()
    with transcript(args.log_file or default_log_path()):
        if not prepare_environment(disable_name_checking=args.disable_name_checking):
            message = "Required modules could not be loaded. Exiting."
            prompter.show(message)
            logger.error(message)
            return WorkflowResult(WorkflowOutcome.ENVIRONMENT_UNAVAILABLE, message)

        # These pull in msal/requests/dotenv, which only now are known to import.
        from spo_labeler.auth import AuthManager
        from spo_labeler.config import AppConfig
        from spo_labeler.sessions import open_sessions
        from spo_labeler.workflow import LabelWorkflow

        try:
            config = AppConfig.load()
        except ValueError as exc:
            # missing CLIENT_ID, malformed config.json or a non-numeric HTTP_TIMEOUT
            message = f"Configuration is not usable: {exc}"
            prompter.show(message)
            logger.error(message)
            return WorkflowResult(WorkflowOutcome.CONFIGURATION_INVALID, message)

        target = SiteTarget(args.tenant_name, args.spo_site_name)
        workflow = LabelWorkflow(
            prompter,
            library=args.library or config.library,
            verify=config.verify_assignment if args.verify is None else args.verify,
        )
        logger.info("Target site: %s", target.url)
        try:
            result = workflow.run(
                lambda: open_sessions(AuthManager(config), args.user_principal_name, target, config),
                target,
            )
        except LabelAdminError as exc:
            outcome = (WorkflowOutcome.FEATURE_FLAG_FAILED if isinstance(exc, FeatureFlagError)
                       else WorkflowOutcome.CONNECTION_FAILED)
            message = f"Stopped: {exc}"
            prompter.show(message)
            logger.error(message)
            result = WorkflowResult(outcome, message)
        logger.info("Run finished: %s", result.outcome.value)
        return result


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_console_logging()
    run(args)
    # Aborts are reported on the console and in the transcript, not via the exit status.
    return 0


if __name__ == '__main__':
    sys.exit(main())
