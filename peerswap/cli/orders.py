#!/usr/bin/env python3
"""
PeerSwap Order CLI

Command-line tools for makers and takers working with signed orders.

Orders are JSON files in the `Order.to_dict` format.  The signing domain
(chain id + engine address) comes from config.toml and can be overridden
per call.

Usage:
    peerswap-order hash <order_file> [--chain-id ID] [--engine ADDRESS]
    peerswap-order sign <order_file> [--scheme eip712|eth_sign]
    peerswap-order verify <order_file> <signature>
    peerswap-order status <order_file>
"""

import asyncio
import getpass
import json
import os
from pathlib import Path
from typing import Optional

import click

from peerswap.config import PeerSwapConfig, load_config
from peerswap.crypto import PrivateKey
from peerswap.database_sqlite import DatabaseSQLite
from peerswap.exceptions import ConfigurationError, InvalidKeyError
from peerswap.settlement.encoder import OrderEncoder
from peerswap.settlement.order import Order
from peerswap.settlement.signatures import SignatureType, SignatureVerifier, sign_order_digest
from peerswap.settlement.status import SQLiteStatusStore

SCHEMES = {
    "eip712": SignatureType.EIP712,
    "eth_sign": SignatureType.ETH_SIGN,
}

STATUS_COLORS = {
    "OPEN": "green",
    "EXECUTED": "cyan",
    "CANCELED": "red",
}


def load_order(order_file: str) -> Order:
    """Read and parse an order JSON file."""
    try:
        with open(order_file, "r") as f:
            return Order.from_dict(json.load(f))
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Failed to read order: {e}")
    except (KeyError, ValueError) as e:
        raise click.ClickException(f"Malformed order: {e}")


def get_private_key() -> PrivateKey:
    """Signing key from PEERSWAP_PRIVATE_KEY, or prompted for."""
    key_hex = os.environ.get("PEERSWAP_PRIVATE_KEY") or getpass.getpass("Private key (hex): ")
    try:
        return PrivateKey.from_hex(key_hex.strip())
    except (InvalidKeyError, ValueError) as e:
        raise click.ClickException(f"Invalid private key: {e}")


def resolve_config(ctx: click.Context) -> PeerSwapConfig:
    """Config file plus command-line overrides, validated."""
    opts = ctx.obj
    config = load_config(opts["config_path"])
    if opts["chain_id"] is not None:
        config.engine.chain_id = opts["chain_id"]
    if opts["engine"] is not None:
        config.engine.address = opts["engine"]
    try:
        config.validate()
    except ConfigurationError as e:
        raise click.ClickException(str(e))
    return config


def make_encoder(config: PeerSwapConfig) -> OrderEncoder:
    return OrderEncoder(
        config.engine.address,
        config.engine.chain_id,
        config.engine.domain_name,
        config.engine.domain_version,
    )


@click.group()
@click.version_option(version="1.0.0", prog_name="peerswap-order")
@click.option("--config", "-c", "config_path", type=click.Path(), default=None,
              help="Path to config.toml (default: $PEERSWAP_CONFIG or ./config.toml)")
@click.option("--chain-id", type=int, default=None, help="Override [engine] chain_id")
@click.option("--engine", "-e", default=None, help="Override [engine] address")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], chain_id: Optional[int], engine: Optional[str]):
    """PeerSwap Order Tools

    Hash, sign and verify peer-to-peer swap orders, and look up their
    settlement status.
    """
    ctx.ensure_object(dict)
    ctx.obj.update(config_path=config_path, chain_id=chain_id, engine=engine)


@cli.command("hash")
@click.argument("order_file", type=click.Path(exists=True))
@click.pass_context
def hash_cmd(ctx: click.Context, order_file: str):
    """Print the digest a maker signs for an order.

    Examples:

        peerswap-order --chain-id 1 --engine 0xabc... hash order.json
    """
    config = resolve_config(ctx)
    order = load_order(order_file)
    click.echo(make_encoder(config).hash_order_hex(order))


@cli.command("sign")
@click.argument("order_file", type=click.Path(exists=True))
@click.option(
    "--scheme", "-s",
    type=click.Choice(sorted(SCHEMES)),
    default="eip712",
    help="Signature scheme",
)
@click.option("--output", "-o", type=click.Path(), help="Write signature to file")
@click.pass_context
def sign_cmd(ctx: click.Context, order_file: str, scheme: str, output: Optional[str]):
    """Sign an order as its seller.

    The key is read from PEERSWAP_PRIVATE_KEY or prompted for.

    Examples:

        peerswap-order sign order.json

        peerswap-order sign order.json --scheme eth_sign -o order.sig
    """
    config = resolve_config(ctx)
    order = load_order(order_file)
    private_key = get_private_key()

    if private_key.address != order.seller:
        raise click.ClickException(
            f"Key address {private_key.address} is not the order seller {order.seller}"
        )

    digest = make_encoder(config).hash_order(order)
    signature = "0x" + sign_order_digest(private_key, digest, SCHEMES[scheme]).hex()

    if output:
        Path(output).write_text(signature + "\n")
        click.echo(click.style(f"✓ Signature written to {output}", fg="green"))
    else:
        click.echo(signature)


@cli.command("verify")
@click.argument("order_file", type=click.Path(exists=True))
@click.argument("signature")
@click.pass_context
def verify_cmd(ctx: click.Context, order_file: str, signature: str):
    """Check a wire signature against an order's seller.

    SIGNATURE is hex, or a path to a file written by `sign -o`.

    Examples:

        peerswap-order verify order.json 0x1234...01
    """
    config = resolve_config(ctx)
    order = load_order(order_file)

    if os.path.isfile(signature):
        signature = Path(signature).read_text().strip()
    try:
        sig_bytes = bytes.fromhex(signature[2:] if signature.startswith("0x") else signature)
    except ValueError:
        raise click.ClickException("Signature is not valid hex")

    digest = make_encoder(config).hash_order(order)
    if SignatureVerifier().is_valid(order.seller, digest, sig_bytes):
        click.echo(click.style(f"✓ Valid signature by {order.seller}", fg="green"))
    else:
        raise click.ClickException(f"Invalid signature for seller {order.seller}")


@cli.command("status")
@click.argument("order_file", type=click.Path(exists=True))
@click.pass_context
def status_cmd(ctx: click.Context, order_file: str):
    """Show whether an order is OPEN, EXECUTED or CANCELED.

    Reads the status database named in [database.sqlite].
    """
    config = resolve_config(ctx)
    order = load_order(order_file)
    digest = make_encoder(config).hash_order(order)

    async def lookup():
        db = await DatabaseSQLite.from_config(config)
        try:
            return await SQLiteStatusStore(db).status_of(order.seller, digest)
        finally:
            await db.close()

    status = asyncio.run(lookup())
    click.echo(f"Order: 0x{digest.hex()}")
    click.echo(f"Maker: {order.seller}")
    click.echo("Status: " + click.style(status.name, fg=STATUS_COLORS[status.name], bold=True))


if __name__ == "__main__":
    cli()
