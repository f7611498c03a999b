"""Expression CLI commands: eval, tokens, tree and diff."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

import click

from mathexpr.config import ParserOptions
from mathexpr.differentiator import Differentiator
from mathexpr.engine import ENGINES, StdMathEval
from mathexpr.errors import MathExpressionError
from mathexpr.numbers import format_complex
from mathexpr.printers import ASCIIPrinter, LaTeXPrinter, TreePrinter

_DOMAINS = click.Choice(sorted(ENGINES))


def _parser_options(
    config: Path | None, no_simplify: bool, no_implicit: bool, debug: bool
) -> ParserOptions:
    """Resolve options: config file (or environment), then command-line flags."""
    options = ParserOptions.from_yaml(config) if config else ParserOptions.from_env()
    overrides: dict[str, bool] = {}
    if no_simplify:
        overrides["simplify"] = False
    if no_implicit:
        overrides["allow_implicit_multiplication"] = False
    if debug:
        overrides["debug"] = True
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    return replace(options, **overrides)


def _parse_bindings(values: tuple[str, ...], domain: str) -> dict[str, Any]:
    """Turn ``name=value`` pairs into a variables mapping.

    Values stay strings for the evaluators to read in their own domain,
    except TRUE/FALSE, which become booleans in the logic domains.
    """
    bindings: dict[str, Any] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected name=value, got '{item}'", param_hint="-v")
        value = value.strip()
        if domain in ("logic", "pricing") and value.lower() in ("true", "false"):
            bindings[name.strip()] = value.lower() == "true"
        else:
            bindings[name.strip()] = value
    return bindings


def _format_result(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, complex):
        return format_complex(value)
    return str(value)


def _fail(error: Exception) -> None:
    click.echo(click.style(f"Error: {error}", fg="red"), err=True)
    raise SystemExit(1)


def _common_options(func):
    func = click.option("--debug", is_flag=True, default=False, help="Log every parse step.")(func)
    func = click.option(
        "--no-implicit", is_flag=True, default=False, help="Disable implicit multiplication."
    )(func)
    func = click.option(
        "--no-simplify", is_flag=True, default=False, help="Keep constant subexpressions unfolded."
    )(func)
    func = click.option(
        "--config",
        default=None,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="YAML file with parser options.",
    )(func)
    func = click.option(
        "--domain", "-d", type=_DOMAINS, default="real", show_default=True,
        help="Numeric domain (selects lexer and evaluator).",
    )(func)
    return func


@click.command("eval")
@click.argument("expression")
@click.option("--var", "-v", "variables", multiple=True, help="Variable binding name=value.")
@_common_options
def eval_cmd(
    expression: str,
    variables: tuple[str, ...],
    domain: str,
    config: Path | None,
    no_simplify: bool,
    no_implicit: bool,
    debug: bool,
):
    """Evaluate EXPRESSION and print the result."""
    options = _parser_options(config, no_simplify, no_implicit, debug)
    bindings = _parse_bindings(variables, domain)
    engine = ENGINES[domain](options)
    try:
        result = engine.evaluate(expression, bindings)
    except (MathExpressionError, ValueError) as e:
        _fail(e)
    click.echo(_format_result(result))


@click.command("tokens")
@click.argument("expression")
@click.option("--domain", "-d", type=_DOMAINS, default="real", show_default=True,
              help="Numeric domain (selects the lexer).")
def tokens_cmd(expression: str, domain: str):
    """Print the tokens of EXPRESSION, one per line."""
    lexer = ENGINES[domain].lexer_class()
    try:
        tokens = lexer.tokenize(expression)
    except MathExpressionError as e:
        _fail(e)
    for token in tokens:
        click.echo(f"{token.position:>4}  {token.type.name:<26} {token.value!r}")


_FORMATS = {
    "tree": TreePrinter,
    "ascii": ASCIIPrinter,
    "latex": LaTeXPrinter,
}


@click.command("tree")
@click.argument("expression")
@click.option("--format", "-f", "output_format", type=click.Choice(sorted(_FORMATS)),
              default="tree", show_default=True, help="Output format.")
@_common_options
def tree_cmd(
    expression: str,
    output_format: str,
    domain: str,
    config: Path | None,
    no_simplify: bool,
    no_implicit: bool,
    debug: bool,
):
    """Parse EXPRESSION and print its syntax tree."""
    options = _parser_options(config, no_simplify, no_implicit, debug)
    engine = ENGINES[domain](options)
    try:
        tree = engine.parse(expression)
    except (MathExpressionError, ValueError) as e:
        _fail(e)
    click.echo(tree.accept(_FORMATS[output_format]()))


@click.command("diff")
@click.argument("expression")
@click.option("--variable", "-x", default="x", show_default=True,
              help="Variable to differentiate with respect to.")
@click.option("--format", "-f", "output_format", type=click.Choice(sorted(_FORMATS)),
              default="ascii", show_default=True, help="Output format.")
@click.option("--no-implicit", is_flag=True, default=False,
              help="Disable implicit multiplication.")
def diff_cmd(expression: str, variable: str, output_format: str, no_implicit: bool):
    """Differentiate EXPRESSION and print the derivative."""
    options = _parser_options(None, False, no_implicit, False)
    engine = StdMathEval(options)
    try:
        derivative = Differentiator(variable).differentiate(engine.parse(expression))
    except (MathExpressionError, ValueError) as e:
        _fail(e)
    click.echo(derivative.accept(_FORMATS[output_format]()))
