#!/usr/bin/env python3
"""
Command-line interface for Rule Harvester.

Usage:
    rule-harvester settings --prompt
    rule-harvester run --document policy.txt
    rule-harvester run --document policy.txt --all --output-dir ./outputs
"""

import argparse
import asyncio
import getpass
import logging
import sys
import textwrap
from pathlib import Path
from typing import Callable, List, Optional

from .config import Settings, configure_logging
from .exceptions import RuleHarvesterError, WorkflowNotice
from .llm_extraction import ExtractionWorkflow, RuleExtractor
from .llm_extraction.utils import APIManager
from .models import RuleFound
from .output_generation import RuleFileWriter
from .storage import CredentialStore, masked

logger = logging.getLogger(__name__)

PROGRESS_BAR_WIDTH = 30
EXPORT_FORMATS = ("json", "csv")

HELP_TEXT = """\
Commands:
  load FILE       Load a document from a file (resets progress)
  paste           Paste a document, end with a line containing only '.'
  next            Extract the next rule
  all             Extract rules until the document is done or a call fails
  rules           List extracted rules
  show N          Show the full description of rule N
  delete ID|N     Delete a rule by id or list number
  export [FORMAT] Export all rules as json (default) or csv
  progress        Show extraction progress
  key             Enter or replace the API key
  help            Show this help
  quit            Leave the session"""


def render_progress(workflow: ExtractionWorkflow) -> str:
    """Render a text progress bar with its status label."""
    progress = max(0.0, min(100.0, workflow.progress))
    filled = int(PROGRESS_BAR_WIDTH * progress / 100)
    bar = '#' * filled + '-' * (PROGRESS_BAR_WIDTH - filled)
    return f"[{bar}] {workflow.progress_label()}"


def render_rules(workflow: ExtractionWorkflow) -> str:
    """Render the rule list, one numbered line per rule."""
    if not workflow.rules:
        return 'No rules extracted yet. Use "next" to begin.'

    lines = [f"Extracted Rules ({len(workflow.rules)})"]
    for number, rule in enumerate(workflow.rules, start=1):
        lines.append(f"{number:>3}. {rule.title}  [{rule.id[:8]}]")
    return '\n'.join(lines)


def print_notice(error: RuleHarvesterError) -> None:
    """Show a workflow notice or error to the user."""
    label = error.title if isinstance(error, WorkflowNotice) else "Error"
    print(f"{label}: {error}")


class HarvestSession:
    """Interactive session driving one ExtractionWorkflow."""

    def __init__(
        self,
        workflow: ExtractionWorkflow,
        writer: RuleFileWriter,
        credential_store: CredentialStore,
        read_line: Callable[[str], str] = input
    ):
        self.workflow = workflow
        self.writer = writer
        self.credential_store = credential_store
        self.read_line = read_line

    async def prompt(self, text: str) -> str:
        return await asyncio.to_thread(self.read_line, text)

    def load_file(self, path: str) -> None:
        document = Path(path).read_text(encoding='utf-8')
        if not self.workflow.set_document(document):
            print("Wait for the current extraction to finish before changing the document.")
            return
        print(f"Loaded {path} ({len(document)} characters).")

    async def paste(self) -> None:
        print("Paste your policy document here, then enter '.' on its own line:")
        lines: List[str] = []
        while True:
            line = await self.prompt('')
            if line.strip() == '.':
                break
            lines.append(line)
        if not self.workflow.set_document('\n'.join(lines)):
            print("Wait for the current extraction to finish before changing the document.")

    async def extract_next(self) -> bool:
        """Run one extraction step; return False when no further step makes sense."""
        if not self.workflow.can_extract:
            print("Load or paste a document first.")
            return False

        try:
            outcome = await self.workflow.extract_next()
        except RuleHarvesterError as e:
            print_notice(e)
            return False

        if outcome is None:
            return True
        if isinstance(outcome, RuleFound):
            print(f"+ {outcome.rule.title}")
        else:
            print("- No rule found in this paragraph.")
        print(render_progress(self.workflow))
        return True

    async def extract_all(self) -> None:
        """Extract until the document is done; stops at the first failure."""
        while await self.extract_next():
            if self.workflow.state.is_complete:
                break

    def show(self, argument: str) -> None:
        if not argument.isdigit() or not 0 < int(argument) <= len(self.workflow.rules):
            print(f"No rule number {argument}.")
            return
        rule = self.workflow.rules[int(argument) - 1]
        print(rule.title)
        print(textwrap.fill(rule.description, width=80, initial_indent='  ', subsequent_indent='  '))

    def delete(self, argument: str) -> None:
        rule_id = argument
        if argument.isdigit() and 0 < int(argument) <= len(self.workflow.rules):
            rule_id = self.workflow.rules[int(argument) - 1].id
        else:
            matches = [rule.id for rule in self.workflow.rules if rule.id.startswith(argument)]
            if len(matches) == 1:
                rule_id = matches[0]

        if self.workflow.delete_rule(rule_id):
            print("Rule deleted.")
        else:
            print(f"No rule matches {argument}.")

    def export(self, extension: str = "json") -> Optional[Path]:
        try:
            path = self.workflow.export_rules(self.writer, extension=extension)
        except WorkflowNotice as e:
            print_notice(e)
            return None
        except OSError:
            print("Export failed: Failed to export rules.")
            return None
        print(f"Export successful: {len(self.workflow.rules)} rules exported to {path}")
        return path

    async def enter_key(self) -> None:
        api_key = await asyncio.to_thread(getpass.getpass, "API key: ")
        if api_key and self.credential_store.save(api_key.strip()):
            print("API key saved.")
        else:
            print("API key not saved.")

    async def handle(self, line: str) -> bool:
        """Dispatch one command; return False to end the session."""
        command, _, argument = line.strip().partition(' ')
        command = command.lower()
        argument = argument.strip()

        if command in ('quit', 'exit', 'q'):
            return False
        if command == 'load' and argument:
            try:
                self.load_file(argument)
            except OSError as e:
                print(f"Error: could not read {argument}: {e}")
        elif command == 'paste':
            await self.paste()
        elif command == 'next':
            await self.extract_next()
        elif command == 'all':
            await self.extract_all()
        elif command == 'rules':
            print(render_rules(self.workflow))
        elif command == 'show' and argument:
            self.show(argument)
        elif command == 'delete' and argument:
            self.delete(argument)
        elif command == 'export':
            export_format = (argument or 'json').lower()
            if export_format in EXPORT_FORMATS:
                self.export(export_format)
            else:
                print("Usage: export [json|csv]")
        elif command == 'progress':
            print(render_progress(self.workflow))
        elif command == 'key':
            await self.enter_key()
        elif command == 'help':
            print(HELP_TEXT)
        elif command:
            print(f"Unknown command: {command}. Type 'help' for a list of commands.")
        return True

    async def close(self) -> None:
        await self.workflow.extractor.api_manager.close()

    async def run(self) -> None:
        print("Rule Harvester - Policy Rule Extraction Tool")
        print("Type 'help' for a list of commands.")
        if not self.credential_store.get():
            print("No API key configured. Use 'key' to set one.")

        while True:
            try:
                line = await self.prompt('> ')
            except EOFError:
                break
            if not await self.handle(line):
                break


def build_session(settings: Settings, output_dir: Optional[str] = None) -> HarvestSession:
    """Wire the workflow and its collaborators from settings."""
    credential_store = CredentialStore(settings.credentials_path)
    api_manager = APIManager(base_url=settings.endpoint, model=settings.model, timeout=settings.timeout)
    workflow = ExtractionWorkflow(RuleExtractor(api_manager), credential_store)
    writer = RuleFileWriter(output_dir or settings.output_dir)
    return HarvestSession(workflow, writer, credential_store)


async def run_session(session: HarvestSession, document: Optional[str], run_all: bool) -> int:
    try:
        if document:
            session.load_file(document)

        if run_all:
            await session.extract_all()
            if not session.workflow.state.is_complete:
                return 1
            if session.export() is None:
                return 1
        else:
            await session.run()
        return 0
    finally:
        await session.close()


def command_settings(args: argparse.Namespace, settings: Settings) -> int:
    store = CredentialStore(settings.credentials_path)

    if args.clear:
        ok = store.clear()
        print("API key cleared." if ok else "Could not clear API key.")
        return 0 if ok else 1

    api_key = args.set_key
    if args.prompt:
        api_key = getpass.getpass("API key: ")
    if api_key:
        ok = store.save(api_key.strip())
        print("API key saved." if ok else "Could not save API key.")
        return 0 if ok else 1

    current = store.get()
    if not current:
        print("No API key configured.")
    else:
        print(f"API key: {current if args.reveal else masked(current)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rule-harvester',
        description='Extract policy rules from a document one paragraph at a time'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    run_parser = subparsers.add_parser('run', help='Start an extraction session')
    run_parser.add_argument('--document', type=str, help='Path to a policy document text file')
    run_parser.add_argument('--output-dir', type=str, help='Directory to save exported rules')
    run_parser.add_argument(
        '--all',
        action='store_true',
        help='Extract every paragraph without prompting, then export the rules as JSON'
    )

    settings_parser = subparsers.add_parser('settings', help='Manage the stored API key')
    key_group = settings_parser.add_mutually_exclusive_group()
    key_group.add_argument('--set-key', type=str, help='Store the given API key')
    key_group.add_argument('--prompt', action='store_true', help='Prompt for the API key without echo')
    key_group.add_argument('--clear', action='store_true', help='Remove the stored API key')
    settings_parser.add_argument('--reveal', action='store_true', help='Show the stored key unmasked')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the rule harvester."""
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings)

    try:
        if args.command == 'settings':
            return command_settings(args, settings)

        if args.all and not args.document:
            print("--all requires --document")
            return 2

        session = build_session(settings, args.output_dir)
        return asyncio.run(run_session(session, args.document, args.all))

    except KeyboardInterrupt:
        return 130
    except Exception as e:
        logger.error(f"Failed to run rule harvester: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
