# cli.py
import click
import logging

from submissions_api.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for running and inspecting the Submissions API"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  Deployment Mode: {settings.deployment_mode}")
    click.echo(f"  Storage Enabled: {settings.storage_enabled}")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  S3 Bucket: {settings.s3_bucket_name}")
    click.echo(f"  Listen Address: {settings.host}:{settings.port}")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST setting)")
@click.option("--port", type=int, default=None, help="Port to listen on (defaults to PORT setting)")
@click.option("--reload", is_flag=True, default=False, help="Reload on code changes")
def serve(host, port, reload):
    """Run the API under uvicorn"""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    click.echo(f"Server running at http://localhost:{port}")
    uvicorn.run(
        "submissions_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()
