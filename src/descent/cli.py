"""descent command line: inspect inputs against a grammar file."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from descent import __version__
from descent.errors import DescentError, DiagnosticRenderer
from descent.formatter import TreeFormatter
from descent.grammar import Grammar, find_grammar, load_grammar


def _load(grammar_path: str) -> Grammar:
    try:
        return load_grammar(find_grammar(Path(grammar_path)))
    except FileNotFoundError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)
    except DescentError as e:
        _report(e, {})


def _report(error: DescentError, sources: dict[str, str]) -> NoReturn:
    renderer = DiagnosticRenderer(color=sys.stderr.isatty(), sources=sources)
    click.echo(renderer.render(error.to_diagnostic()), err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="descent")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """Recursive-descent parsing toolkit."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@main.command()
@click.argument("grammar", type=click.Path(exists=True))
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--skip/--no-skip", default=False, help="Hide the grammar's skip kinds.")
def tokens(grammar: str, file: str, skip: bool) -> None:
    """Print the token stream of FILE."""
    gram = _load(grammar)
    source = Path(file).read_text()
    lexer = gram.lexer(file)
    lexer.begin(source)
    formatter = TreeFormatter(color=sys.stdout.isatty())
    try:
        for token in lexer:
            if skip and token.kind in gram.skip_kinds:
                continue
            click.echo(formatter.token_line(token))
    except DescentError as e:
        _report(e, {file: source})


@main.command()
@click.argument("grammar", type=click.Path(exists=True))
def kinds(grammar: str) -> None:
    """List the token patterns of GRAMMAR in match order."""
    gram = _load(grammar)
    formatter = TreeFormatter()
    click.echo(f"grammar {gram.name}")
    for pattern in gram.patterns:
        marker = " (skip)" if pattern.kind in gram.skip_kinds else ""
        click.echo(f"  {formatter.pattern_line(pattern)}{marker}")


@main.command()
@click.argument("grammar", type=click.Path(exists=True))
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def highlight(grammar: str, file: str) -> None:
    """Print FILE highlighted for the terminal."""
    from pygments import highlight as pygmentize
    from pygments.formatters import TerminalFormatter

    from descent.highlight import PatternLexer

    gram = _load(grammar)
    source = Path(file).read_text()
    click.echo(pygmentize(source, PatternLexer(gram.patterns), TerminalFormatter()), nl=False)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--tree", is_flag=True, help="Print the parsed node tree instead.")
def pasm(file: str, tree: bool) -> None:
    """Parse and reprint a pseudo-assembly FILE."""
    from descent.examples import pasm as grammar

    source = Path(file).read_text()
    try:
        program = grammar.parse(source, file)
        if tree:
            click.echo(TreeFormatter(color=sys.stdout.isatty()).format(program))
        else:
            click.echo(grammar.render(program), nl=False)
    except DescentError as e:
        _report(e, {file: source})
