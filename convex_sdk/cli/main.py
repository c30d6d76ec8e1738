"""
convex_sdk.cli.main
===================

`convex-sdk`: a small command-line interface over :class:`convex_sdk.ConvexAPI`.

Examples
--------
    $ convex-sdk --url https://convex.world balance '#9'
    $ convex-sdk keygen --out me.pem --password hunter2
    $ convex-sdk create-account --key-file me.pem --password hunter2
    $ convex-sdk faucet '#1234' 1000000
    $ convex-sdk send '(map inc [1 2 3])' --address '#1234' --key-file me.pem --password hunter2
    $ convex-sdk resolve convex.fungible

Configuration
-------------
- Node URL  : `--url` or env `CONVEX_URL` (default: https://convex.world)
- Language  : `--language` or env `CONVEX_LANGUAGE` (lisp | scrypt)
- Timeout   : `--timeout` or env `CONVEX_TIMEOUT` seconds (default: 30.0)
- Key file password : `--password` or env `CONVEX_KEY_PASSWORD`
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

import typer

from ..account import Account
from ..address import to_address, to_checksum
from ..api import ConvexAPI
from ..config import SDKConfig
from ..errors import ConvexSdkError
from ..version import __version__ as SDK_VERSION
from ..version import version as sdk_version
from ..wallet.key_pair import KeyPair

app = typer.Typer(
    name="convex-sdk",
    help="Convex SDK CLI: query balances, manage keys and send transactions.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "run"]


@dataclass
class Ctx:
    config: SDKConfig
    verbose: bool = False


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


@app.callback()
def _root(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", help="Node base URL.", envvar="CONVEX_URL"),
    language: Optional[str] = typer.Option(
        None, "--language", help="Transaction language (lisp | scrypt).", envvar="CONVEX_LANGUAGE"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds.", envvar="CONVEX_TIMEOUT"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log SDK activity to stderr."),
) -> None:
    """Resolve the effective configuration for this CLI process."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    try:
        config = SDKConfig.with_overrides(None, url=url, language=language, request_timeout=timeout)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    ctx.obj = Ctx(config=config, verbose=verbose)


@contextmanager
def _node(ctx: typer.Context) -> Iterator[ConvexAPI]:
    c: Ctx = ctx.obj
    try:
        with ConvexAPI.from_config(c.config) as convex:
            yield convex
    except ConvexSdkError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1) from e


def _load_key(key_file: Path, password: str) -> KeyPair:
    try:
        return KeyPair.import_from_file(key_file, password)
    except ConvexSdkError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1) from e


def _address_arg(value: str) -> int:
    try:
        return to_address(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


# --- Offline commands ------------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the SDK CLI version."""
    typer.echo(f"convex-sdk {sdk_version()}")


@app.command("env")
def env(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    c: Ctx = ctx.obj
    data = c.config.to_dict()
    data["sdk_version"] = SDK_VERSION
    _print_json(data)


@app.command("keygen")
def keygen(
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write an encrypted PEM key file."),
    password: Optional[str] = typer.Option(
        None, "--password", help="Password for the key file.", envvar="CONVEX_KEY_PASSWORD"
    ),
) -> None:
    """Generate a new Ed25519 key pair."""
    key_pair = KeyPair.create()
    result = {"publicKey": key_pair.public_key_checksum}
    if out is not None:
        if not password:
            raise typer.BadParameter("--password is required with --out")
        result["file"] = str(key_pair.export_to_file(out, password))
    _print_json(result)


@app.command("checksum")
def checksum(value: str = typer.Argument(..., help="Hex value (public key or hash).")) -> None:
    """Print the checksum-cased form of a hex value."""
    try:
        typer.echo(to_checksum(value))
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


# --- Node commands -----------------------------------------------------------------


@app.command("create-account")
def create_account(
    ctx: typer.Context,
    key_file: Optional[Path] = typer.Option(None, "--key-file", help="Encrypted PEM key file."),
    password: str = typer.Option(
        "", "--password", help="Password for the key file.", envvar="CONVEX_KEY_PASSWORD"
    ),
    topup: bool = typer.Option(False, "--topup", help="Fund the new account from the faucet."),
) -> None:
    """Create an account for a key pair (a fresh one unless --key-file is given)."""
    key_pair = _load_key(key_file, password) if key_file is not None else KeyPair.create()
    with _node(ctx) as convex:
        account = convex.create_account(key_pair)
        if topup:
            convex.top_up_account(account)
        _print_json({"address": f"#{account.address}", "publicKey": key_pair.public_key_checksum})


@app.command("faucet")
def faucet(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Account address (#n or n)."),
    amount: int = typer.Argument(..., help="Amount to request."),
) -> None:
    """Request funds from the development faucet."""
    target = _address_arg(address)
    with _node(ctx) as convex:
        _print_json({"address": f"#{target}", "amount": convex.request_funds(amount, target)})


@app.command("balance")
def balance(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Account address (#n or n)."),
) -> None:
    """Print the balance of an account (0 if it does not exist)."""
    target = _address_arg(address)
    with _node(ctx) as convex:
        typer.echo(str(convex.get_balance(target)))


@app.command("account-info")
def account_info(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Account address (#n or n)."),
) -> None:
    """Print the account record held by the node."""
    target = _address_arg(address)
    with _node(ctx) as convex:
        _print_json(convex.get_account_info(target).to_dict())


@app.command("query")
def query(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Source expression."),
    address: str = typer.Option("#9", "--address", "-a", help="Address to query as."),
) -> None:
    """Run a read-only query."""
    target = _address_arg(address)
    with _node(ctx) as convex:
        _print_json(convex.query(source, target).value)


@app.command("send")
def send(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Source expression."),
    address: str = typer.Option(..., "--address", "-a", help="Sending account address."),
    key_file: Path = typer.Option(..., "--key-file", help="Encrypted PEM key file."),
    password: str = typer.Option(
        "", "--password", help="Password for the key file.", envvar="CONVEX_KEY_PASSWORD"
    ),
) -> None:
    """Sign and submit a transaction."""
    account = Account.create(_load_key(key_file, password), _address_arg(address))
    with _node(ctx) as convex:
        _print_json(convex.send(source, account).value)


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Registry name."),
    account: bool = typer.Option(False, "--account", help="Resolve an account name."),
) -> None:
    """Resolve a registry name to an address."""
    with _node(ctx) as convex:
        address = convex.resolve_account_name(name) if account else convex.resolve_name(name)
    if address is None:
        typer.echo(f"error: {name!r} is not registered", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"#{address}")


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        rv = app(prog_name="convex-sdk", standalone_mode=False, args=argv)
        return rv if isinstance(rv, int) else 0
    except typer.Exit as e:  # normal exit
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1


def run(argv: Optional[list[str]] = None) -> int:
    """Console-script entry point."""
    return main(argv)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
