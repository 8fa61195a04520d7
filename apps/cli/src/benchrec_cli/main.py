from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional

import typer

from benchrec import BenchrecConfig, MalformedRecord, ResultStore, upload_record

app = typer.Typer(add_completion=False, help="Inspect and share cached benchmark results")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress at INFO level.")) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _us(duration_ns: int) -> str:
    return f"{duration_ns // 1000} us"


@app.command("list")
def list_results(
    cache_dir: Optional[Path] = typer.Option(None, help="Result cache directory (default from BENCHREC_CACHE_DIR)."),
):
    """List result files recorded in the cache index."""
    store = ResultStore(cache_dir) if cache_dir else ResultStore.from_config()
    entries = store.index_entries()
    if not entries:
        typer.echo(f"No results indexed in {store.index_path}")
        return
    for path in entries:
        typer.echo(f"- {path}")


@app.command()
def show(path: Path):
    """Print the identity and statistics of one stored result file."""
    store = ResultStore.from_config()
    try:
        record = store.load_record(path)
    except (OSError, MalformedRecord) as e:
        typer.echo(f"Cannot read {path}: {e}", err=True)
        raise typer.Exit(code=1)
    res = record.results
    typer.echo(f"{res.name} [{record.backend} / {record.device} / {record.feature}]")
    typer.echo(f"  git: {res.git_hash}  version: {record.burn_version}  timestamp: {res.timestamp}")
    if res.options:
        typer.echo(f"  options: {res.options}")
    if res.shapes:
        typer.echo(f"  shapes: {[list(s) for s in res.shapes]}")
    typer.echo(f"  samples: {res.num_samples}")
    for label in ("mean", "median", "min", "max", "variance"):
        typer.echo(f"  {label}: {_us(getattr(res.computed, label))}")


@app.command()
def share(
    paths: List[Path] = typer.Argument(..., help="Stored result files to upload."),
    url: Optional[str] = typer.Option(None, help="Collection server URL (default from BENCHREC_SERVER_URL)."),
    token: Optional[str] = typer.Option(None, help="Bearer token (default from BENCHREC_TOKEN)."),
):
    """Upload stored result files to the collection server, one request each."""
    config = BenchrecConfig()
    url = url or config.server_url
    token = token or config.token
    if not token:
        typer.echo("An auth token is required; pass --token or set BENCHREC_TOKEN.", err=True)
        raise typer.Exit(code=1)
    store = ResultStore.from_config(config)
    failures = 0
    for path in paths:
        try:
            record = store.load_record(path)
        except (OSError, MalformedRecord) as e:
            typer.echo(f"Skipping {path}: {e}", err=True)
            failures += 1
            continue
        typer.echo(f"Sharing {path.name}...")
        outcome = upload_record(record, token, url, timeout=config.upload_timeout)
        if outcome.ok:
            typer.echo("Results shared successfully.")
        else:
            typer.echo(f"Failed to share results. {outcome.error}", err=True)
            failures += 1
    if failures:
        raise typer.Exit(code=1)


def app_main():
    app()


if __name__ == "__main__":
    app_main()
