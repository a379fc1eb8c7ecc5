"""Shared pieces for revision tag CLI commands.

Common Typer option annotations, error reporting for the Kubernetes and
revision tag exception hierarchies, and the interactive confirmer.
"""

from __future__ import annotations

from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from mesh_operations_manager.integrations.istio.exceptions import (
    AggregateDeleteError,
    NameCollisionError,
    ResolutionAmbiguousError,
    RevisionNotFoundError,
    RevisionTagError,
    TagAlreadyExistsError,
    TagNotFoundError,
)
from mesh_operations_manager.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
)
from mesh_operations_manager.plugins.istio.formatters import OutputFormat

console = Console()

_AFFIRMATIVE = frozenset({"y", "yes"})


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

OutputOption = Annotated[
    OutputFormat,
    typer.Option(
        "--output",
        "-o",
        help="Output format: table, json, or yaml",
        case_sensitive=False,
    ),
]

RevisionOption = Annotated[
    str,
    typer.Option(
        "--revision",
        "-r",
        help="Control plane revision the tag should reference",
    ),
]

SkipConfirmationOption = Annotated[
    bool,
    typer.Option(
        "--skip-confirmation",
        "-y",
        help="Do not ask before removing a tag that namespaces still use",
    ),
]

OverwriteOption = Annotated[
    bool,
    typer.Option(
        "--overwrite",
        help="Repoint the tag if it already exists",
    ),
]


# =============================================================================
# Error Handling
# =============================================================================


def handle_k8s_error(error: KubernetesError) -> NoReturn:
    """Print a Kubernetes error and exit 1.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, KubernetesConnectionError):
        console.print("[red]Error:[/red] Cannot connect to Kubernetes cluster")
        console.print(f"  {error.message}")
        if error.original_error:
            console.print(f"  Cause: {error.original_error}")
        console.print(
            "\n[dim]Hint: Check your kubeconfig, or select a context with "
            "MESHOPS_K8S_CONTEXT.[/dim]"
        )

    elif isinstance(error, KubernetesAuthError):
        console.print("[red]Error:[/red] Authentication/authorization failed")
        console.print(f"  {error.message}")
        console.print(
            "\n[dim]Hint: Managing revision tags needs access to "
            "mutatingwebhookconfigurations and namespaces.[/dim]"
        )

    elif isinstance(error, KubernetesNotFoundError):
        console.print("[red]Error:[/red] Resource not found")
        console.print(f"  {error.message}")

    elif isinstance(error, KubernetesValidationError):
        console.print("[red]Error:[/red] Validation failed")
        console.print(f"  {error.message}")
        for field, err in (error.validation_errors or {}).items():
            console.print(f"    - {field}: {err}")

    elif isinstance(error, KubernetesConflictError):
        console.print("[red]Error:[/red] Resource conflict")
        console.print(f"  {error.message}")
        console.print("\n[dim]Hint: Re-run the command to act on the latest version.[/dim]")

    else:
        console.print(f"[red]Error:[/red] {error.message}")
        if error.status_code:
            console.print(f"  HTTP Status: {error.status_code}")

    raise typer.Exit(1)


def handle_tag_error(error: RevisionTagError) -> NoReturn:
    """Print a revision tag error and exit 1.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    console.print(f"[red]Error:[/red] {escape(error.message)}", soft_wrap=True)

    if isinstance(error, NameCollisionError):
        console.print("\n[dim]Hint: Choose a tag name that is not an installed revision.[/dim]")
    elif isinstance(error, TagAlreadyExistsError):
        console.print("\n[dim]Hint: Pass --overwrite to repoint the existing tag.[/dim]")
    elif isinstance(error, RevisionNotFoundError):
        console.print("\n[dim]Hint: Check that the control plane revision is installed.[/dim]")
    elif isinstance(error, TagNotFoundError):
        console.print("\n[dim]Hint: Run 'meshops tag list' to see existing tags.[/dim]")
    elif isinstance(error, ResolutionAmbiguousError):
        for name in error.names:
            console.print(f"  - {name}")
    elif isinstance(error, AggregateDeleteError):
        for name in error.deleted:
            console.print(f"  deleted: {name}")

    raise typer.Exit(1)


# =============================================================================
# Confirmation
# =============================================================================


def read_confirmation(message: str) -> bool:
    """Ask the operator ``message`` on the terminal.

    Only ``y`` or ``yes`` (any case) consents. Any other answer, end of
    input, or a terminal error declines.
    """
    try:
        answer = typer.prompt(message, default="", show_default=False, prompt_suffix=" ")
    except (typer.Abort, EOFError, OSError):
        return False
    return answer.strip().lower() in _AFFIRMATIVE
