"""Roadmap commands for linctl CLI."""

from __future__ import annotations

from typing import Any

import typer

from linctl.config import get_max_width
from linctl.constants import ROADMAP_PAGE_SIZE
from linctl.errors import LinctlError, MutationError, NotFoundError
from linctl.json_path import get_list, get_path, get_str

from ._formatting import dry_run_banner, format_roadmap_table, success_mark
from ._helpers import SortedGroup, get_client, get_config
from ._json_state import echo_error, echo_json, is_json_output

LIST_QUERY = f"""
query {{
    roadmaps(first: {ROADMAP_PAGE_SIZE}) {{
        nodes {{
            id
            name
            description
            slugId
            projects {{ nodes {{ id }} }}
        }}
    }}
}}
"""

GET_QUERY = """
query($id: String!) {
    roadmap(id: $id) {
        id
        name
        description
        slugId
        createdAt
        updatedAt
        projects {
            nodes {
                id
                name
                state
                progress
            }
        }
    }
}
"""

CREATE_MUTATION = """
mutation($input: RoadmapCreateInput!) {
    roadmapCreate(input: $input) {
        success
        roadmap { id name }
    }
}
"""

UPDATE_MUTATION = """
mutation($id: String!, $input: RoadmapUpdateInput!) {
    roadmapUpdate(id: $id, input: $input) {
        success
        roadmap { id name }
    }
}
"""

# Sub-app for 'linctl roadmaps' subcommands
roadmaps_app = typer.Typer(
    help="List, inspect, create and update roadmaps.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def build_update_input(
    name: str | None,
    description: str | None,
) -> dict[str, Any]:
    """Collect the fields given on the command line into an update input."""
    update_input: dict[str, Any] = {}
    if name is not None:
        update_input["name"] = name
    if description is not None:
        update_input["description"] = description
    return update_input


def register(app: typer.Typer) -> None:
    """Register roadmap commands."""
    app.add_typer(roadmaps_app, name="roadmaps")

    @roadmaps_app.command("list")
    def list_roadmaps(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all roadmaps."""
        try:
            config = get_config()
            max_width = get_max_width(config)
            result = get_client(config).query(LIST_QUERY)
        except LinctlError as e:
            echo_error(str(e))
            raise typer.Exit(1) from None

        roadmaps = get_list(result, ("data", "roadmaps", "nodes"))
        if is_json_output(json_output):
            echo_json(roadmaps)
        elif not roadmaps:
            typer.echo("No roadmaps found")
        else:
            typer.echo(format_roadmap_table(roadmaps, max_width))

    @roadmaps_app.command("get")
    def get_roadmap(
        roadmap_id: str = typer.Argument(..., help="Roadmap ID"),
    ) -> None:
        """Show roadmap details as JSON."""
        try:
            result = get_client().query(GET_QUERY, {"id": roadmap_id})
            roadmap = get_path(result, ("data", "roadmap"))
            if roadmap is None:
                msg = f"Roadmap not found: {roadmap_id}"
                raise NotFoundError(msg)
        except LinctlError as e:
            echo_error(str(e))
            raise typer.Exit(1) from None

        echo_json(roadmap, pretty=True)

    @roadmaps_app.command("create")
    def create_roadmap(
        name: str = typer.Argument(..., help="Roadmap name"),
        description: str | None = typer.Option(
            None,
            "--description",
            "-d",
            help="Description",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Create a new roadmap."""
        create_input: dict[str, Any] = {"name": name}
        if description is not None:
            create_input["description"] = description

        try:
            result = get_client().mutate(CREATE_MUTATION, {"input": create_input})
            if get_path(result, ("data", "roadmapCreate", "success")) is not True:
                msg = "Failed to create roadmap"
                raise MutationError(msg)
        except LinctlError as e:
            echo_error(str(e))
            raise typer.Exit(1) from None

        roadmap = get_path(result, ("data", "roadmapCreate", "roadmap"), {})
        if is_json_output(json_output):
            echo_json(roadmap)
            return
        typer.echo(f"{success_mark()} Created roadmap: {get_str(roadmap, ('name',))}")
        typer.echo(f"  ID: {get_str(roadmap, ('id',))}")

    @roadmaps_app.command("update")
    def update_roadmap(
        roadmap_id: str = typer.Argument(..., help="Roadmap ID"),
        name: str | None = typer.Option(None, "--name", "-n", help="New name"),
        description: str | None = typer.Option(
            None,
            "--description",
            "-d",
            help="New description",
        ),
        dry_run: bool = typer.Option(
            False,
            "--dry-run",
            help="Preview without updating",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Update an existing roadmap."""
        update_input = build_update_input(name, description)
        if not update_input:
            typer.echo("No updates specified.")
            return

        if dry_run:
            if is_json_output(json_output):
                echo_json(
                    {
                        "dry_run": True,
                        "would_update": {"id": roadmap_id, "input": update_input},
                    },
                )
            else:
                typer.echo(dry_run_banner("Would update roadmap:"))
                typer.echo(f"  ID: {roadmap_id}")
                for key, value in update_input.items():
                    typer.echo(f"  {key}: {value}")
            return

        try:
            result = get_client().mutate(
                UPDATE_MUTATION,
                {"id": roadmap_id, "input": update_input},
            )
            if get_path(result, ("data", "roadmapUpdate", "success")) is not True:
                msg = "Failed to update roadmap"
                raise MutationError(msg)
        except LinctlError as e:
            echo_error(str(e))
            raise typer.Exit(1) from None

        if is_json_output(json_output):
            echo_json(get_path(result, ("data", "roadmapUpdate", "roadmap")))
            return
        typer.echo(f"{success_mark()} Roadmap updated")
