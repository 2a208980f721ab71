# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from caseflow.adapters.catalog import load_configured_catalog
from caseflow.app import (
    build_document_service,
    case_history,
    case_progress,
    catalog_overview,
    list_case_documents,
    preview_case_reconciliation,
    reconcile_case_documents,
)
from caseflow.config import ConfigurationError, configure_logging, get_actor_config
from caseflow.domain.documents import DocumentChanges
from caseflow.domain.errors import CaseflowError, ValidationError
from caseflow.domain.model import (
    CATEGORY_LABELS,
    Actor,
    Assignee,
    CaseDocumentInput,
    DocumentCategory,
    DocumentSource,
    DocumentStatus,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from caseflow.domain.model import CaseDocument
    from caseflow.domain.reconciliation import ReconciliationPlan

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the documents required for a case")
    parser.add_argument("--actor-id", type=str, help="Who performs the change (default: env)")
    parser.add_argument("--actor-name", type=str, help="Display name recorded with changes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    catalog = subparsers.add_parser("catalog", help="Show the document catalog by category")
    catalog.add_argument("--case", type=str, help="Mark templates this case already has")
    subparsers.add_parser("presets", help="List catalog presets")

    documents = subparsers.add_parser("documents", help="List a case's documents")
    documents.add_argument("case_id", type=str)

    add = subparsers.add_parser("add", help="Add an ad-hoc document to a case")
    add.add_argument("case_id", type=str)
    add.add_argument("--name", type=str, required=True)
    add.add_argument(
        "--category",
        choices=[item.value for item in DocumentCategory],
        default=DocumentCategory.OTHER.value,
    )
    add.add_argument(
        "--source",
        choices=[item.value for item in DocumentSource],
        default=DocumentSource.APPLICANT.value,
    )
    add.add_argument(
        "--assignee",
        choices=[item.value for item in Assignee],
        default=Assignee.APPLICANT.value,
    )
    add.add_argument("--description", type=str)
    add.add_argument("--original-required", action="store_true")

    status = subparsers.add_parser("status", help="Change a document's status")
    status.add_argument("case_id", type=str)
    status.add_argument("document_id", type=str)
    status.add_argument("status", choices=[item.value for item in DocumentStatus])

    attach = subparsers.add_parser("attach", help="Attach an uploaded file to a document")
    attach.add_argument("case_id", type=str)
    attach.add_argument("document_id", type=str)
    attach.add_argument("file_ref", type=str, help="Reference of the stored file")
    attach.add_argument("--file-name", type=str, help="Original file name for the history")

    delete = subparsers.add_parser("delete", help="Delete a document")
    delete.add_argument("case_id", type=str)
    delete.add_argument("document_id", type=str)

    reconcile = subparsers.add_parser(
        "reconcile",
        help="Make a case's catalog documents match a selection",
    )
    reconcile.add_argument("case_id", type=str)
    selection = reconcile.add_mutually_exclusive_group(required=True)
    selection.add_argument(
        "--select",
        nargs="*",
        metavar="TEMPLATE_ID",
        help="Template ids that should be present (none clears every catalog document)",
    )
    selection.add_argument("--preset", type=str, help="Use a catalog preset as the selection")
    reconcile.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without writing anything",
    )

    progress = subparsers.add_parser("progress", help="Show completion per category")
    progress.add_argument("case_id", type=str)

    history = subparsers.add_parser("history", help="Show a case's activity log")
    history.add_argument("case_id", type=str)

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid document id: {value}") from exc


def _actor(args: argparse.Namespace) -> Actor:
    if args.actor_id:
        return Actor(id=args.actor_id, display_name=args.actor_name)
    config = get_actor_config()
    return Actor(id=config.actor_id, display_name=args.actor_name or config.display_name)


def _format_document(document: CaseDocument) -> str:
    origin = document.template_id or "ad-hoc"
    file_marker = " [file]" if document.file_ref else ""
    return f"{document.id}  {document.status:<12} {document.name} ({origin}){file_marker}"


def _print_plan(plan: ReconciliationPlan) -> None:
    if plan.is_empty:
        print("Nothing to change.")
        return
    for template in plan.to_add:
        print(f"+ {template.name} ({template.template_id})")
    for document in plan.to_remove:
        print(f"- {document.name} ({document.template_id})")


def _cmd_catalog(args: argparse.Namespace) -> None:
    for group in catalog_overview(args.case):
        counts = f"{group.selected}/{group.total}" if args.case else str(group.total)
        print(f"{CATEGORY_LABELS[group.category]} ({counts})")
        for template in group.templates:
            print(f"  {template.template_id:<24} {template.name}")


def _cmd_presets(_args: argparse.Namespace) -> None:
    for preset in load_configured_catalog().presets:
        print(f"{preset.key:<24} {preset.label} ({len(preset.template_ids)} templates)")


def _cmd_documents(args: argparse.Namespace) -> None:
    documents = list_case_documents(args.case_id)
    if not documents:
        print(f"Case {args.case_id} has no documents.")
    for document in documents:
        print(_format_document(document))


def _cmd_add(args: argparse.Namespace) -> None:
    data = CaseDocumentInput(
        name=args.name,
        category=DocumentCategory(args.category),
        source=DocumentSource(args.source),
        assigned_to=Assignee(args.assignee),
        description=args.description,
        is_original_required=args.original_required,
    )
    document = build_document_service().create_document(args.case_id, data, _actor(args))
    print(_format_document(document))


def _cmd_status(args: argparse.Namespace) -> None:
    document_id = _parse_uuid(args.document_id)
    document = build_document_service().update_document(
        args.case_id,
        document_id,
        DocumentChanges(status=DocumentStatus(args.status)),
        _actor(args),
    )
    print(_format_document(document))


def _cmd_attach(args: argparse.Namespace) -> None:
    document_id = _parse_uuid(args.document_id)
    document = build_document_service().attach_file(
        args.case_id,
        document_id,
        args.file_ref,
        _actor(args),
        file_name=args.file_name,
    )
    print(_format_document(document))


def _cmd_delete(args: argparse.Namespace) -> None:
    document_id = _parse_uuid(args.document_id)
    build_document_service().delete_document(args.case_id, document_id, _actor(args))
    print(f"Deleted {document_id}")


def _cmd_reconcile(args: argparse.Namespace) -> None:
    if args.dry_run:
        plan = preview_case_reconciliation(
            args.case_id,
            selected_template_ids=args.select,
            preset=args.preset,
        )
        _print_plan(plan)
        return

    outcome = reconcile_case_documents(
        args.case_id,
        _actor(args),
        selected_template_ids=args.select,
        preset=args.preset,
    )
    _print_plan(outcome.plan)
    print(f"Added {outcome.added}, removed {outcome.removed}.")
    if outcome.result.orphaned_files:
        print(f"Files not released: {', '.join(outcome.result.orphaned_files)}")


def _cmd_progress(args: argparse.Namespace) -> None:
    report = case_progress(args.case_id)
    print(f"{report.completed}/{report.total} completed ({report.percentage:.0f}%)")
    for category, documents in report.by_category.items():
        if not documents:
            continue
        category_progress = report.for_category(category)
        print(
            f"  {CATEGORY_LABELS[category]}: "
            f"{category_progress.completed}/{category_progress.total}"
        )


def _cmd_history(args: argparse.Namespace) -> None:
    for entry in case_history(args.case_id):
        who = entry.performed_by_name or entry.performed_by
        print(f"{entry.created_at:%Y-%m-%d %H:%M}  {who}: {entry.description}")


COMMANDS: dict[str, Callable[[argparse.Namespace], None]] = {
    "catalog": _cmd_catalog,
    "presets": _cmd_presets,
    "documents": _cmd_documents,
    "add": _cmd_add,
    "status": _cmd_status,
    "attach": _cmd_attach,
    "delete": _cmd_delete,
    "reconcile": _cmd_reconcile,
    "progress": _cmd_progress,
    "history": _cmd_history,
}


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.WARNING)

    try:
        COMMANDS[parsed_args.command](parsed_args)
    except (ValidationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except (CaseflowError, ConfigurationError) as exc:
        log.debug("Command %s failed", parsed_args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load ``.env``, trap Ctrl+C and run."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
