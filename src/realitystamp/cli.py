"""Reality Stamp CLI - sign, verify and inspect content provenance."""

from __future__ import annotations

import json
import logging
import random
import sys
import traceback
from pathlib import Path

import click
import yaml

from realitystamp import __version__
from realitystamp.config import EngineConfig
from realitystamp.errors import ProvenanceError
from realitystamp.feed import PostStore, seed_demo_feed
from realitystamp.feed.models import Post
from realitystamp.intake import load_upload
from realitystamp.payload import ContentPayload, TextPayload
from realitystamp.provenance import (
    ProvenanceCertificate,
    SigningSession,
    TrustVerdict,
    VerificationEngine,
    fingerprint,
    truncate_fingerprint,
)
from realitystamp.provenance.entropy import sweep_positions


def handle_error(error: Exception, debug: bool) -> None:
    """Handle errors with structured output.

    Args:
        error: The exception that occurred
        debug: Whether to show full traceback
    """
    if debug:
        traceback.print_exc()
    else:
        click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def load_config(config_path: Path | None) -> EngineConfig:
    """Load config from YAML, falling back to the environment."""
    if config_path is not None:
        return EngineConfig.from_yaml(config_path)
    return EngineConfig.from_env()


def read_payload(text: str | None, file: Path | None, config: EngineConfig) -> ContentPayload:
    """Build a payload from CLI arguments."""
    if file is not None:
        return load_upload(file, limits=config.limits)
    return TextPayload(text or "")


@click.group()
@click.version_option(version=__version__, prog_name="stampctl")
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, path_type=Path),
              help='Engine configuration YAML (default: environment)')
@click.option('--debug', is_flag=True, help='Enable debug mode (verbose logs, full tracebacks)')
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, debug: bool):
    """Reality Stamp CLI - human-gated content provenance."""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['debug'] = debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="fingerprint")
@click.argument('text', required=False)
@click.option('--file', '-f', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Image or video file to fingerprint')
@click.pass_context
def fingerprint_cmd(ctx: click.Context, text: str | None, file: Path | None):
    """Print the fingerprint of TEXT or a file."""
    debug = ctx.obj.get('debug', False)

    try:
        config = load_config(ctx.obj.get('config_path'))
        payload = read_payload(text, file, config)
        click.echo(fingerprint(payload, config.fingerprint_width))
    except Exception as e:
        handle_error(e, debug)


@cli.command()
@click.argument('text', required=False)
@click.option('--file', '-f', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Image or video file to sign')
@click.option('--out', '-o', type=click.Path(path_type=Path), help='Write certificate JSON here')
@click.pass_context
def sign(ctx: click.Context, text: str | None, file: Path | None, out: Path | None):
    """Sign TEXT or a file, simulating a full entropy sweep."""
    debug = ctx.obj.get('debug', False)

    try:
        config = load_config(ctx.obj.get('config_path'))
        session = SigningSession(config)
        failures: list[ProvenanceError] = []
        session.events.subscribe("issue_failed", failures.append)

        session.submit_content(read_payload(text, file, config))
        for x, y in sweep_positions(config.cell_size, config.surface_width, config.surface_height):
            session.report_position(x, y)

        certificate = session.certificate or session.request_issue()
        if certificate is None:
            raise failures[-1]

        if out:
            certificate.write_json(out)
            click.echo(f"Certificate written to: {out}")
        else:
            click.echo(json.dumps(certificate.to_dict(), indent=2, sort_keys=True))
    except Exception as e:
        handle_error(e, debug)


@cli.command()
@click.argument('text', required=False)
@click.option('--certificate', '-C', 'certificate_path', required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Certificate JSON to verify against')
@click.option('--file', '-f', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Image or video file to verify')
@click.option('--tampered', is_flag=True, help='Force the tamper override')
@click.option('--json', 'as_json', is_flag=True, help='Print the report as JSON')
@click.pass_context
def verify(
    ctx: click.Context,
    text: str | None,
    certificate_path: Path,
    file: Path | None,
    tampered: bool,
    as_json: bool,
):
    """Verify TEXT or a file against a certificate.

    Exits 0 when verified and 1 when tampered.
    """
    debug = ctx.obj.get('debug', False)

    try:
        config = load_config(ctx.obj.get('config_path'))
        certificate = ProvenanceCertificate.from_json(certificate_path)
        post = Post(
            id="cli",
            author="cli",
            payload=read_payload(text, file, config),
            certificate=certificate,
            tampered_override=tampered,
        )
        report = VerificationEngine(fingerprint_width=config.fingerprint_width).inspect(post)
    except Exception as e:
        handle_error(e, debug)
        return

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        click.echo(f"Status: {report.status_label}")
        click.echo(f"  Expected: {truncate_fingerprint(report.expected_fingerprint)}")
        click.echo(f"  Current:  {truncate_fingerprint(report.current_fingerprint)}")
        if report.overridden:
            click.echo("  Tamper override set")

    sys.exit(0 if report.verdict is TrustVerdict.VERIFIED else 1)


@cli.command()
@click.option('--tamper', '-t', multiple=True, help='Post id to tamper with (repeatable)')
@click.option('--seed', type=int, help='Random seed for tamper simulation')
@click.pass_context
def feed(ctx: click.Context, tamper: tuple[str, ...], seed: int | None):
    """Show the demo feed with trust verdicts."""
    debug = ctx.obj.get('debug', False)

    try:
        config = load_config(ctx.obj.get('config_path'))
        store = PostStore(
            engine=VerificationEngine(fingerprint_width=config.fingerprint_width),
            rng=random.Random(seed),
            tamper_binary_payloads=config.tamper_binary_payloads,
        )
        seed_demo_feed(store)

        for post_id in tamper:
            if not store.simulate_tamper(post_id):
                click.echo(f"Skipped {post_id}: unknown, unverified or already tampered", err=True)

        for post, report in zip(store.posts(), store.reports()):
            click.echo(f"[{report.status_label}] {post.id} @{post.author}")
            content = post.to_dict()["content"]
            click.echo(f"  {content if isinstance(content, str) else content['name']}")
    except Exception as e:
        handle_error(e, debug)


@cli.command(name="config")
@click.pass_context
def show_config(ctx: click.Context):
    """Print the effective engine configuration."""
    debug = ctx.obj.get('debug', False)

    try:
        config = load_config(ctx.obj.get('config_path'))
        click.echo(yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=True), nl=False)
    except Exception as e:
        handle_error(e, debug)


def main() -> None:
    """Entry point."""
    cli()


if __name__ == '__main__':
    main()
