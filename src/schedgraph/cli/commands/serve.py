"""
Serve command: run the dependency HTTP API with uvicorn
"""

import typer

from schedgraph.logger import get_logger

logger = get_logger(__name__)

app = typer.Typer(name="serve", help="Start the HTTP API server")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind host"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
):
    """Start the dependency API on the configured database."""
    import uvicorn

    from schedgraph.api.app import create_app

    logger.info(f"Starting schedgraph API on {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port)
