"""hookgate CLI -- run the receiver and exercise it with signed test deliveries.

Thin wrapper using click.  ``sign`` is offline; ``send`` and ``handshake``
post to a running receiver with httpx.
"""

from __future__ import annotations

import json
from typing import BinaryIO, NoReturn

import click
import httpx

from hookgate.protocol.signature import sign_body
from hookgate.protocol.types import DEFAULT_SIGNATURE_HEADER, DEFAULT_TOKEN_HEADERS


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error(msg: str) -> NoReturn:
    """Print an error message to stderr and exit 1."""
    click.echo(msg, err=True)
    raise SystemExit(1)


def _read_body(body_file: BinaryIO) -> bytes:
    data = body_file.read()
    return data if isinstance(data, bytes) else data.encode("utf-8")


def _post(url: str, content: bytes, headers: dict[str, str], timeout: float) -> httpx.Response:
    try:
        return httpx.post(url, content=content, headers=headers, timeout=timeout)
    except httpx.HTTPError as exc:
        _error(f"Error: could not reach {url}: {exc}")


def _report(resp: httpx.Response) -> None:
    click.echo(f"HTTP {resp.status_code}")
    try:
        click.echo(json.dumps(resp.json(), indent=2))
    except ValueError:
        click.echo(resp.text)
    if resp.status_code >= 400:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="hookgate")
def cli() -> None:
    """hookgate -- Notion webhook receiver."""


# ---------------------------------------------------------------------------
# hookgate serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--host", default=None, help="Bind address (default: HOOKGATE_HOST).")
@click.option("--port", "-p", type=int, default=None, help="Port (default: HOOKGATE_PORT).")
def serve(host: str | None, port: int | None) -> None:
    """Run the webhook receiver under uvicorn."""
    import uvicorn

    from hookgate.receiver.app import create_app
    from hookgate.receiver.config import Settings

    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# hookgate sign
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("body_file", type=click.File("rb"), default="-")
@click.option(
    "--secret", envvar="HOOKGATE_SIGNING_SECRET", required=True,
    help="Signing secret (default: HOOKGATE_SIGNING_SECRET).",
)
def sign(body_file: BinaryIO, secret: str) -> None:
    """Print the hex HMAC-SHA256 signature for BODY_FILE (stdin if omitted)."""
    click.echo(sign_body(_read_body(body_file), secret))


# ---------------------------------------------------------------------------
# hookgate send
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("url")
@click.argument("body_file", type=click.File("rb"), default="-")
@click.option(
    "--secret", envvar="HOOKGATE_SIGNING_SECRET", required=True,
    help="Signing secret (default: HOOKGATE_SIGNING_SECRET).",
)
@click.option("--header", default=DEFAULT_SIGNATURE_HEADER, show_default=True,
              help="Signature header name.")
@click.option("--timeout", default=10.0, show_default=True, help="Request timeout (s).")
def send(url: str, body_file: BinaryIO, secret: str, header: str, timeout: float) -> None:
    """POST BODY_FILE to URL as a signed event delivery."""
    body = _read_body(body_file)
    headers = {
        "content-type": "application/json",
        header: sign_body(body, secret),
    }
    _report(_post(url, body, headers, timeout))


# ---------------------------------------------------------------------------
# hookgate handshake
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("url")
@click.argument("token")
@click.option("--in-body", is_flag=True, help="Send the token as a JSON body field.")
@click.option("--timeout", default=10.0, show_default=True, help="Request timeout (s).")
def handshake(url: str, token: str, in_body: bool, timeout: float) -> None:
    """POST a verification-token handshake to URL."""
    if in_body:
        body = json.dumps({"verificationToken": token}).encode("utf-8")
        headers = {"content-type": "application/json"}
    else:
        body = b""
        headers = {DEFAULT_TOKEN_HEADERS[0]: token}
    _report(_post(url, body, headers, timeout))


if __name__ == "__main__":
    cli()
