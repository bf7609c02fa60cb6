"""CLI entry point for spec2llms."""

import logging
from pathlib import Path

import click

from spec2llms.config import LANGUAGES, Config
from spec2llms.errors import Spec2LlmsError
from spec2llms.generator.composer import DocumentComposer
from spec2llms.generator.writer import write_documents
from spec2llms.parser.openapi import parse


def _setup_logging(verbose: bool) -> None:
    logger = logging.getLogger("spec2llms")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)


def _load_config(config_path: Path | None, **overrides) -> Config:
    """Defaults < config file < command-line flags."""
    cfg = Config.load_from_file(config_path) if config_path else Config()
    return cfg.merged(**overrides)


@click.command()
@click.argument("source", required=False)
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Config file (spec2llms.json).")
@click.option("-o", "--output", default=None, help="Output directory. [default: ./llms]")
@click.option("-t", "--title", default=None, help="API title, overrides the document's own title.")
@click.option("-b", "--base-url", default=None, help="Base URL for the API, overrides the document's servers.")
@click.option("-l", "--lang", "language", default=None, type=click.Choice(LANGUAGES), help="Output language.")
@click.option("--skip-validation", is_flag=True, help="Skip OpenAPI document validation.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(package_name="spec2llms")
def main(
    source: str | None,
    config_path: Path | None,
    output: str | None,
    title: str | None,
    base_url: str | None,
    language: str | None,
    skip_validation: bool,
    verbose: bool,
):
    """Generate llms.txt documentation from an OpenAPI 3.x specification.

    SOURCE is a local .json/.yaml file or an http(s) URL.
    """
    _setup_logging(verbose)
    try:
        cfg = _load_config(
            config_path,
            source=source,
            output=output,
            title=title,
            base_url=base_url,
            language=language,
            skip_validation=skip_validation or None,
        )
        cfg.validate_source()

        click.echo(f"Parsing OpenAPI spec: {cfg.source}")
        api = parse(cfg.source, skip_validation=cfg.skip_validation)
        click.echo(f"Found {len(api.endpoints)} endpoints")

        documents = DocumentComposer(api, cfg).compose()
        output_dir = Path(cfg.output)
        write_documents(output_dir, documents)
    except Spec2LlmsError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Generated llms.txt in {output_dir} ({len(documents.groups)} endpoint groups)")
