# cli.py
import logging
import sys

import click
import requests

from portfolio_api.config.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)

SMOKE_CHECK_PATHS = ("/projects", "/achievements")


@click.group()
def cli():
    """CLI commands for the Portfolio API"""
    pass


@cli.command()
@click.option('--host', default=None, help='API host address (defaults to HOST)')
@click.option('--port', default=None, type=int, help='API port (defaults to PORT)')
@click.option('--reload/--no-reload', default=False, help='Enable/disable auto-reload for development')
def serve(host, port, reload):
    """Start the API server"""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    host = host or settings.host
    port = port or settings.port
    logger.info("Server running on http://%s:%s", host, port)
    uvicorn.run(
        "portfolio_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    for key, value in settings.masked_dict().items():
        print(f"  {key}: {value}")


def check_endpoint(base_url: str, path: str, timeout: float = 10.0) -> bool:
    """GET one endpoint and report status and JSON validity. False only when the request itself failed."""
    url = f"{base_url.rstrip('/')}{path}"
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        print(f"[FAIL] GET {path} - Error: {e}")
        return False

    print(f"[PASS] GET {path} - Status: {response.status_code}")
    try:
        response.json()
        print(f"[PASS] GET {path} - Valid JSON received.")
    except ValueError:
        print(f"[WARN] GET {path} - Invalid JSON.")
    return True


@cli.command()
@click.option('--base-url', default=None, help='Server to check (defaults to http://localhost:PORT)')
def check_endpoints(base_url):
    """Smoke-test the public list endpoints of a running server"""
    base_url = base_url or f"http://localhost:{get_settings().port}"
    print("Verifying Endpoints...")
    results = [check_endpoint(base_url, path) for path in SMOKE_CHECK_PATHS]
    if not all(results):
        sys.exit(1)


if __name__ == "__main__":
    cli()
