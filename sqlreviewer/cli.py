from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from sqlreviewer.config import load_config
from sqlreviewer.exceptions import SqlReviewError
from sqlreviewer.logging_config import setup_logging
from sqlreviewer.pipeline import load_extra_findings, review_many
from sqlreviewer.report.render import render_rule_listing
from sqlreviewer.rules.corpus import TEST_SQLS
from sqlreviewer.rules.registry import RuleCatalog

app = typer.Typer(add_completion=False, help="Review SQL statements against heuristic rules.")


def _fail(e: SqlReviewError) -> None:
    typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def review(
    sql: Optional[str] = typer.Argument(None, help="SQL text; read from --file or stdin when omitted"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="File with SQL statements"),
    fmt: Optional[str] = typer.Option(None, "--format", "-t", help="json, text, lint, markdown, html, explain-digest, duplicate-key-checker"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="YAML config file"),
    db: str = typer.Option("", "--db", help="Current database, used to qualify table names"),
    charset: Optional[str] = typer.Option(None, "--charset"),
    collation: Optional[str] = typer.Option(None, "--collation"),
    extra_findings: Optional[List[Path]] = typer.Option(None, "--extra-findings", "-x", exists=True, dir_okay=False, help="JSON findings from an external analyzer"),
    ai: bool = typer.Option(False, "--ai", help="Append an AI review narrative (markdown/html)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    quiet: bool = typer.Option(False, "--quiet", "-q"),
):
    """
    Review SQL and print the report. Each statement in the input is reviewed
    on its own; blacklisted statements print nothing.
    """
    # .env must be loaded before the config reads SQLREVIEWER_* and OPENAI_* variables
    load_dotenv(override=False)
    setup_logging(verbose=verbose, quiet=quiet)

    if sql is None:
        if file is not None:
            sql = file.read_text(encoding="utf-8")
        else:
            sql = typer.get_text_stream("stdin").read()

    try:
        config = load_config(config_file)
        catalog = RuleCatalog.default(config)
        extra = [load_extra_findings(p) for p in (extra_findings or [])]
        outcomes = review_many(
            sql,
            catalog=catalog,
            config=config,
            current_db=db,
            fmt=fmt,
            charset=charset,
            collation=collation,
            extra=extra,
            run_ai=ai,
        )
    except SqlReviewError as e:
        _fail(e)
        return

    for outcome in outcomes:
        typer.echo(outcome.rendered)


@app.command("list-rules")
def list_rules(
    fmt: str = typer.Option("markdown", "--format", "-t", help="json or markdown"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
):
    """Print every heuristic rule, sorted by code."""
    load_dotenv(override=False)
    try:
        catalog = RuleCatalog.default(load_config(config_file))
    except SqlReviewError as e:
        _fail(e)
        return
    typer.echo(render_rule_listing(catalog, fmt))


@app.command("list-test-sqls")
def list_test_sqls():
    """Print the built-in test statements, one per line."""
    for sql in TEST_SQLS:
        typer.echo(sql)


def main():
    app()


if __name__ == "__main__":
    main()
