"""Function listing CLI command."""

import click

from mathexpr.functions import Domain, FunctionCategory, FunctionRegistry


@click.command("functions")
@click.option(
    "--domain", "-d",
    type=click.Choice([d.value for d in Domain]),
    default=None,
    help="Only list functions of this domain.",
)
@click.option(
    "--category", "-c",
    type=click.Choice([c.value for c in FunctionCategory]),
    default=None,
    help="Only list functions of this category.",
)
def functions_cmd(domain: str | None, category: str | None):
    """List the built-in functions."""
    definitions = FunctionRegistry.list_functions(
        domain=Domain(domain) if domain else None,
        category=FunctionCategory(category) if category else None,
    )
    if not definitions:
        click.echo("No functions found.")
        return

    current = None
    for definition in definitions:
        if definition.domain != current:
            current = definition.domain
            click.echo(click.style(f"\n{current.value}", bold=True))
        params = ", ".join(p.name for p in definition.parameters)
        click.echo(f"  {definition.name}({params})  {definition.description}")
