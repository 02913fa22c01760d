# cli.py
import logging

import click

from database import get_document_store, init_db
from shop_api.config.settings import get_settings
from shop_api.firebase import get_firebase_app

logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the shop API"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  Deployment Mode: {settings.deployment_mode}")
    click.echo(f"  Database Path: {settings.database_path}")
    click.echo(f"  Firebase Project: {settings.firebase_project_id}")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  S3 Bucket: {settings.s3_bucket_name}")
    click.echo(f"  Base T-Shirt Price: {settings.base_tshirt_price}")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command("init-db")
@click.option("--db-path", default=None, help="SQLite database file (defaults to the configured path)")
def init_db_command(db_path):
    """Create the document collections and seed the design categories"""
    settings = get_settings()
    firebase_app = get_firebase_app(settings) if settings.deployment_mode == "cloud" else None
    store = get_document_store(settings.deployment_mode, db_path or settings.database_path, firebase_app)
    init_db(store)
    click.echo(f"Document store initialized ({settings.deployment_mode})")


@cli.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind")
@click.option("--port", default=8000, type=int, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload):
    """Run the API with uvicorn"""
    import uvicorn

    uvicorn.run("shop_api.main:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
