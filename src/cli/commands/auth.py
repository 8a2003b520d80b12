"""Auth commands for yis CLI."""

import socket
import webbrowser
from datetime import datetime
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlparse

import httpx
import typer
from rich.console import Console
from rich.panel import Panel

from src.cli import display
from src.shared.config import get_settings
from src.shared.strava import FileTokenStore, StravaOAuthClient, TokenManager

app = typer.Typer(help="Authentication commands")
console = Console()

CALLBACK_PORT = 9876


class OAuthCallbackHandler(BaseHTTPRequestHandler):
    """HTTP handler for OAuth callback."""

    auth_code: str | None = None
    error: str | None = None

    def do_GET(self) -> None:
        """Handle GET request from OAuth callback."""
        params = parse_qs(urlparse(self.path).query)

        if "code" in params:
            OAuthCallbackHandler.auth_code = params["code"][0]
            self._reply(200, b"<h1>Success!</h1><p>You can close this window.</p>")
        elif "error" in params:
            OAuthCallbackHandler.error = params["error"][0]
            self._reply(400, b"<h1>Login Failed</h1>")
        else:
            self._reply(400, b"<h1>Invalid Callback</h1>")

    def _reply(self, status: int, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-type", "text/html")
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        """Suppress default logging."""


def is_port_available(port: int) -> bool:
    """Check if a port is available."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind(("localhost", port))
            return True
        except OSError:
            return False


def _wait_for_code(auth_url: str) -> str:
    """Open the browser and wait for Strava to redirect back with a code."""
    OAuthCallbackHandler.auth_code = None
    OAuthCallbackHandler.error = None

    server = HTTPServer(("localhost", CALLBACK_PORT), OAuthCallbackHandler)
    server.timeout = 120

    webbrowser.open(auth_url)
    try:
        server.handle_request()
    finally:
        server.server_close()

    if OAuthCallbackHandler.error:
        display.display_error(f"Authorization failed: {OAuthCallbackHandler.error}")
        raise typer.Exit(1)
    if not OAuthCallbackHandler.auth_code:
        display.display_error("Timed out waiting for authorization")
        raise typer.Exit(1)

    return OAuthCallbackHandler.auth_code


@app.command()
def login(
    no_browser: bool = typer.Option(False, "--no-browser", help="Don't open browser automatically"),
) -> None:
    """Login to Strava via OAuth."""
    settings = get_settings()
    if not settings.strava_client_id or not settings.strava_client_secret:
        display.display_error("STRAVA_CLIENT_ID and STRAVA_CLIENT_SECRET must be set")
        raise typer.Exit(1)

    oauth = StravaOAuthClient(
        client_id=settings.strava_client_id,
        client_secret=settings.strava_client_secret,
        redirect_uri=f"http://localhost:{CALLBACK_PORT}/callback",
    )
    auth_url = oauth.get_authorization_url(state="yis")

    if no_browser:
        console.print(
            Panel(
                "[bold]Authorize with Strava[/bold]\n\n"
                f"[cyan]{auth_url}[/cyan]\n\n"
                "After authorizing, copy the [bold]code[/bold] from the URL.",
                title="Login",
                border_style="cyan",
            )
        )
        auth_code = typer.prompt("Paste authorization code")
    else:
        if not is_port_available(CALLBACK_PORT):
            display.display_error(f"Port {CALLBACK_PORT} is in use")
            display.display_info("Retry with --no-browser to paste the code manually")
            raise typer.Exit(1)
        console.print(
            Panel(
                "[bold]Authorize with Strava[/bold]\n\n"
                "Opening browser for authorization...\n"
                "Waiting for callback...",
                title="Login",
                border_style="cyan",
            )
        )
        auth_code = _wait_for_code(auth_url)
        display.display_progress("Authorization received!", done=True)

    try:
        token_data = oauth.exchange_code_for_token(auth_code)
    except httpx.HTTPError as e:
        display.display_error(f"Login failed: {e}")
        raise typer.Exit(1) from None

    manager = TokenManager(FileTokenStore(settings.tokens_file), oauth)
    manager.save_initial(token_data)

    firstname = (token_data.get("athlete") or {}).get("firstname", "athlete")
    display.display_progress(f"Welcome, {firstname}!", done=True)
    console.print("\n[green]You can now run 'yis stats' to see your year![/green]")


@app.command()
def logout() -> None:
    """Remove saved credentials."""
    store = FileTokenStore(get_settings().tokens_file)
    if store.load() is None:
        display.display_info("Not logged in")
        return
    store.clear()
    display.display_progress("Logged out", done=True)
    display.display_info(f"Removed {store.path}")


@app.command()
def status() -> None:
    """Show authentication status."""
    store = FileTokenStore(get_settings().tokens_file)
    credentials = store.load()

    if credentials is None:
        display.display_warning("Not logged in")
        display.display_info("Run 'yis auth login' to authenticate")
        return

    expires = datetime.fromtimestamp(credentials.expires_at)
    display.display_progress("Logged in", done=True)
    display.display_info(f"Athlete ID: {credentials.athlete_id}")
    display.display_info(f"Token expires: {expires:%Y-%m-%d %H:%M}")
    display.display_info(f"Tokens: {store.path}")
