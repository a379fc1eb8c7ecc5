"""CLI commands for Istio revision tags.

Adds the ``tag`` command group:

    meshops tag set <tag> --revision <rev> [--overwrite]
    meshops tag list [--output table|json|yaml]        (alias: show)
    meshops tag remove <tag> [--skip-confirmation]     (alias: delete)
    meshops tag generate <tag> --revision <rev> [--output yaml|json] [--values]
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated, NoReturn

import typer
from rich.markup import escape

from mesh_operations_manager.integrations.istio.constants import REVISION_LABEL
from mesh_operations_manager.integrations.istio.exceptions import RevisionTagError
from mesh_operations_manager.integrations.kubernetes.exceptions import KubernetesError
from mesh_operations_manager.plugins.istio.commands.base import (
    OutputOption,
    OverwriteOption,
    RevisionOption,
    SkipConfirmationOption,
    console,
    handle_k8s_error,
    handle_tag_error,
)
from mesh_operations_manager.plugins.istio.formatters import OutputFormat, get_formatter
from mesh_operations_manager.services.istio.tag_builder import webhook_to_dict

if TYPE_CHECKING:
    from mesh_operations_manager.services.istio.tag_manager import RevisionTagManager

NO_TAGS_MESSAGE = "No Istio revision tag MutatingWebhookConfigurations to list"

TAG_COLUMNS = [
    ("tag", "TAG"),
    ("revision", "REVISION"),
    ("namespaces", "NAMESPACES"),
]

TagArgument = Annotated[str, typer.Argument(help="Revision tag name")]


def set_message(tag: str, revision: str, created: bool) -> str:
    """Operator guidance printed after a successful ``tag set``."""
    action = "created" if created else "updated"
    return (
        f'Revision tag "{tag}" {action}, referencing control plane revision "{revision}". '
        "To enable injection using this revision tag, use "
        f"'kubectl label namespace <NAMESPACE> {REVISION_LABEL}={tag}'"
    )


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    raise typer.Exit(1)


def register_tag_commands(
    app: typer.Typer,
    get_manager: Callable[[], RevisionTagManager],
    default_output: OutputFormat = OutputFormat.TABLE,
) -> None:
    """Register the ``tag`` command group on ``app``.

    Args:
        app: Typer app to attach the group to.
        get_manager: Factory returning the manager commands operate on.
            Called when a command runs, so cluster connection errors are
            reported by that command.
        default_output: Output format of ``tag list`` when --output is not given.
    """
    tag_app = typer.Typer(
        name="tag",
        help="Manage Istio control plane revision tags",
        no_args_is_help=True,
    )

    # =========================================================================
    # Set
    # =========================================================================

    @tag_app.command("set")
    def set_tag(
        tag: TagArgument,
        revision: RevisionOption,
        overwrite: OverwriteOption = False,
    ) -> None:
        """Create a revision tag, or repoint one with --overwrite.

        Examples:
            meshops tag set prod --revision 1-8-1
            meshops tag set prod --revision 1-9-0 --overwrite
        """
        try:
            result = get_manager().set_tag(tag, revision, overwrite=overwrite)
        except KubernetesError as e:
            handle_k8s_error(e)
        except RevisionTagError as e:
            handle_tag_error(e)
        except ValueError as e:
            _fail(str(e))

        console.print(
            set_message(result.tag, result.revision, result.created),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

    # =========================================================================
    # List
    # =========================================================================

    def list_tags(output: OutputOption = default_output) -> None:
        """List revision tags with their revisions and dependent namespaces.

        Examples:
            meshops tag list
            meshops tag list --output json
        """
        try:
            summaries = get_manager().list_tags()
        except KubernetesError as e:
            handle_k8s_error(e)

        if not summaries:
            console.print(NO_TAGS_MESSAGE)
            return

        get_formatter(output, console).format_list(summaries, TAG_COLUMNS)

        failed = [s for s in summaries if s.error]
        for summary in failed:
            console.print(f"[red]Error:[/red] {escape(summary.error or '')}", soft_wrap=True)
        if failed:
            raise typer.Exit(1)

    tag_app.command("list")(list_tags)
    tag_app.command("show", hidden=True)(list_tags)

    # =========================================================================
    # Remove
    # =========================================================================

    def remove_tag(
        tag: TagArgument,
        skip_confirmation: SkipConfirmationOption = False,
    ) -> None:
        """Remove a revision tag.

        Asks before removing a tag that namespaces still reference, unless
        --skip-confirmation is given.

        Examples:
            meshops tag remove prod
            meshops tag remove prod -y
        """
        try:
            result = get_manager().remove_tag(tag, skip_confirmation=skip_confirmation)
        except KubernetesError as e:
            handle_k8s_error(e)
        except RevisionTagError as e:
            handle_tag_error(e)
        except ValueError as e:
            _fail(str(e))

        if not result.removed:
            console.print("Aborting operation.")
            return
        console.print(f"Revision tag {result.tag} removed", markup=False, highlight=False)

    tag_app.command("remove")(remove_tag)
    tag_app.command("delete", hidden=True)(remove_tag)

    # =========================================================================
    # Generate
    # =========================================================================

    @tag_app.command("generate")
    def generate_tag(
        tag: TagArgument,
        revision: RevisionOption,
        output: OutputOption = OutputFormat.YAML,
        values: Annotated[
            bool,
            typer.Option("--values", help="Print chart values instead of the manifest"),
        ] = False,
    ) -> None:
        """Print the webhook a tag would create, without applying it.

        Examples:
            meshops tag generate prod --revision 1-8-1
            meshops tag generate prod --revision 1-8-1 --values
        """
        if output == OutputFormat.TABLE:
            _fail("tag generate supports --output yaml or json")

        try:
            manager = get_manager()
            if values:
                document = manager.generate_tag_config(tag, revision).to_values()
            else:
                document = webhook_to_dict(manager.generate_tag(tag, revision))
        except KubernetesError as e:
            handle_k8s_error(e)
        except RevisionTagError as e:
            handle_tag_error(e)
        except ValueError as e:
            _fail(str(e))

        get_formatter(output, console).format_dict(document)

    app.add_typer(tag_app, name="tag")
