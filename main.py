"""aztfimport CLI entrypoint."""
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from aztfimport.batch.orchestrator import BatchOrchestrator
from aztfimport.config.loader import ConfigLoader
from aztfimport.config.schema import RunConfig
from aztfimport.discovery.listing import ResourceGroupListing
from aztfimport.errors import ArgumentError, AztfImportError
from aztfimport.runlog import RunLogger
from aztfimport.version import VERSION

USAGE = "aztfimport [option] <resource group name>"

app = typer.Typer(help="aztfimport - Import existing Azure resources into Terraform", add_completion=False)
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def check_arguments(args: List[str], quiet: bool, continue_on_error: bool, mapping_file: Optional[str]) -> str:
    """Validate the positional arguments and flag combination.

    Returns:
        str: The resource group name.

    Raises:
        ArgumentError: If the invocation is invalid.
    """
    if len(args) != 1:
        raise ArgumentError(f"expected exactly one resource group name, got {len(args)}\nUsage: {USAGE}")
    if quiet and not mapping_file:
        raise ArgumentError("`-q` must be used together with `-m`")
    if continue_on_error and not quiet:
        raise ArgumentError("`-k` must be used together with `-q`")
    return args[0]


def batch_import(config: RunConfig, continue_on_error: bool, debug: bool = False) -> None:
    """Import every mapped resource of the group without interaction.

    Raises:
        AztfImportError: On initialization, import or generation failure.
        OSError: If the log file cannot be opened.
    """
    if config.log_file:
        logger = RunLogger.to_file(config.log_file, debug=debug)
    else:
        logger = RunLogger(err_console.file, debug=debug)

    try:
        orchestrator = BatchOrchestrator(logger, continue_on_error=continue_on_error)
        result = orchestrator.run(config)
    finally:
        logger.close()

    console.print(f"[green]Terraform configuration generated in {config.output_dir}[/]")
    if result.failed:
        console.print(f"[yellow]{result.failed} resource(s) failed to import, see the log for details[/]")


def list_group(config: RunConfig) -> None:
    """Show the resource group's resources and write a mapping file for them."""
    listing = ResourceGroupListing(config)
    resources = listing.list()

    table = Table(title=f"Resources in {config.resource_group}")
    table.add_column("Resource ID", style="cyan")
    table.add_column("Terraform Address")

    for resource in resources:
        if resource.mapped:
            table.add_row(resource.resource_id, f"[green]{resource.resource_type}.{resource.resource_name}[/]")
        else:
            table.add_row(resource.resource_id, f"[yellow](unmapped) {resource.resource_name}[/]")
    console.print(table)

    mapping_path = listing.write_mapping(resources)
    console.print(f"[green]Resource mapping written to {mapping_path}[/]")
    console.print("[yellow]Fill in the resource types, then run again with -q -m <mapping file>[/]")


@app.command()
def main(
    args: Optional[List[str]] = typer.Argument(None, metavar="RESOURCE_GROUP", help="Name of the resource group to import", show_default=False),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet mode"),
    continue_on_error: bool = typer.Option(False, "--continue", "-k", help="Whether continue on import error (quiet mode only)"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", "-o", help="Specify output dir. Default is a dir under the user app dir, which is named after the resource group name"),
    mapping_file: Optional[str] = typer.Option(None, "--mapping-file", "-m", help="Specify the resource mapping file"),
    pattern: str = typer.Option("res-", "--pattern", "-p", help='The pattern of the resource name. The resource name is generated by taking the pattern and adding an auto-incremental integer to the end. If pattern includes a "*", the auto-incremental integer replaces the last "*".'),
    log_file: Optional[str] = typer.Option(None, "--log-file", "-l", help="Write the quiet mode log to this file instead of stderr"),
    subscription_id: Optional[str] = typer.Option(None, "--subscription-id", "-s", help="Azure subscription ID. Default is taken from the environment or the Azure CLI"),
    debug: bool = typer.Option(False, "--debug", help="Log terraform commands and their output"),
    version: bool = typer.Option(False, "--version", "-v", help="Print version"),
):
    """Import the resources of an Azure resource group into Terraform."""
    if version:
        console.print(VERSION)
        raise typer.Exit(0)

    try:
        resource_group = check_arguments(args or [], quiet, continue_on_error, mapping_file)
        config = ConfigLoader.new_config(
            resource_group,
            output_dir=output_dir,
            mapping_file=mapping_file,
            name_pattern=pattern,
            log_file=log_file,
            subscription_id=subscription_id,
        )

        if quiet:
            batch_import(config, continue_on_error, debug=debug)
        else:
            list_group(config)
    except (AztfImportError, OSError) as e:
        err_console.print(str(e), markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(1)
    except Exception as e:
        err_console.print(f"Error: {e}", markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
