"""
Command line interface for the Cloudflare Images provider.

Uploads, deletes and checks images with the same code path the host uses.
"""

import asyncio
import json
import logging
import mimetypes
from pathlib import Path
from typing import Optional

import aiofiles
import click

from cloudflare_images.config import ProviderConfig
from cloudflare_images.logging_config import setup_logging
from cloudflare_images.models import FileRecord
from cloudflare_images.storage.cloudflare import CloudflareImagesError, init

logger = logging.getLogger(__name__)


def _load_config(config_path: Optional[Path]) -> ProviderConfig:
    try:
        return ProviderConfig.load(config_path)
    except (ValueError, FileNotFoundError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")


def _record_for_id(image_id: str) -> FileRecord:
    return FileRecord(
        name=image_id,
        size=0,
        mime="application/octet-stream",
        provider_metadata={"cloudflare_id": image_id},
    )


async def _upload(config: ProviderConfig, path: Path, name: str, mime: str) -> FileRecord:
    async with aiofiles.open(path, "rb") as f:
        content = await f.read()

    record = FileRecord(
        name=name,
        size=len(content),
        mime=mime,
        ext=path.suffix or None,
        buffer=content,
    )
    async with init(config) as provider:
        await provider.upload(record)
    return record


async def _delete(config: ProviderConfig, image_id: str) -> None:
    async with init(config) as provider:
        await provider.delete(_record_for_id(image_id))


async def _exists(config: ProviderConfig, image_id: str) -> bool:
    async with init(config) as provider:
        return await provider.check_file_existence(_record_for_id(image_id))


@click.group()
@click.option("--config", "-c", type=click.Path(exists=True, path_type=Path), help="Config file path")
@click.option("--log-level", default="INFO", show_default=True, help="Logging level")
@click.option("--json-logs", is_flag=True, help="Emit JSON formatted logs")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], log_level: str, json_logs: bool) -> None:
    """Cloudflare Images provider - upload and manage images."""
    setup_logging(log_level, json_format=json_logs)
    ctx.obj = {"config_path": config}


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", help="File name to upload as (defaults to the file's name)")
@click.option("--mime", help="MIME type (guessed from the file name by default)")
@click.pass_context
def upload(ctx: click.Context, path: Path, name: Optional[str], mime: Optional[str]) -> None:
    """Upload an image and print its URLs."""
    config = _load_config(ctx.obj["config_path"])
    name = name or path.name
    mime = mime or mimetypes.guess_type(name)[0] or "application/octet-stream"

    try:
        record = asyncio.run(_upload(config, path, name, mime))
    except CloudflareImagesError as e:
        raise click.ClickException(str(e))

    if record.url is None:
        click.echo(f"Skipped {name} (thumbnails are served as variants)")
        return

    click.echo(
        json.dumps(
            {
                "url": str(record.url),
                "thumbnail_url": record.formats["thumbnail"]["url"],
                "provider_metadata": record.provider_metadata,
            },
            indent=2,
        )
    )


@cli.command()
@click.argument("image_id")
@click.pass_context
def delete(ctx: click.Context, image_id: str) -> None:
    """Delete an image by its Cloudflare ID."""
    config = _load_config(ctx.obj["config_path"])
    try:
        asyncio.run(_delete(config, image_id))
    except CloudflareImagesError as e:
        raise click.ClickException(str(e))
    click.echo(f"Deleted {image_id}")


@cli.command()
@click.argument("image_id")
@click.pass_context
def exists(ctx: click.Context, image_id: str) -> None:
    """Check whether an image exists. Exit code 1 when it does not."""
    config = _load_config(ctx.obj["config_path"])
    found = asyncio.run(_exists(config, image_id))
    click.echo("true" if found else "false")
    ctx.exit(0 if found else 1)


@cli.command("show-config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the resolved configuration (without the access token)."""
    config = _load_config(ctx.obj["config_path"])
    click.echo(json.dumps(config.safe_dump(), indent=2))


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
