"""mathexpr CLI entry point."""

import click


@click.group()
def cli():
    """mathexpr: tokenize, parse and evaluate math expressions."""
    pass


# Register subcommands
from mathexpr.cli.expression_cmd import diff_cmd, eval_cmd, tokens_cmd, tree_cmd  # noqa: E402
from mathexpr.cli.functions_cmd import functions_cmd  # noqa: E402

cli.add_command(eval_cmd)
cli.add_command(tokens_cmd)
cli.add_command(tree_cmd)
cli.add_command(diff_cmd)
cli.add_command(functions_cmd)
