from __future__ import annotations

import logging
import sys
import traceback
from pprint import pprint
from typing import Optional

from .account import load_keypair
from .config import Config, DEFAULT_GAS_BUDGET
from .log import init_logger
from .submit import DEFAULT_RESPONSE_OPTIONS, sign_and_submit
from .sui_client import SuiClient
from .transaction import TransactionBuilder, new_transaction

logger = logging.getLogger(__name__)

TFT_MODULE = "tft"

DEFAULT_USERNAME = "alina"
DEFAULT_IMAGE_URL = "https://placehold.co/600x400/FFF000/000?text=yo"
DEFAULT_HEALTH = 111


def build_mint_transaction(
        package_id: str,
        recipient: str,
        username: str,
        image_url: str,
        health: Optional[int] = None,
        gas_budget: int = DEFAULT_GAS_BUDGET,
) -> TransactionBuilder:
    '''
    public fun mint_player(username: String, image_url: String, ctx: &mut TxContext): Player
    public fun update_health(health: u64, player: &mut Player)

    Mint a player, optionally set its health, and transfer it to ``recipient``.
    '''
    tx = new_transaction()

    player = tx.add_call(
        f"{package_id}::{TFT_MODULE}::mint_player",
        [
            tx.pure(username, "string"),
            tx.pure(image_url, "string"),
        ]
    )

    if health is not None:
        tx.add_call(
            f"{package_id}::{TFT_MODULE}::update_health",
            [
                tx.pure(health, "u64"),
                player,
            ]
        )

    tx.add_transfer([player], recipient)
    tx.set_budget(gas_budget)
    return tx


def mint_player(
        config: Config,
        username: str = DEFAULT_USERNAME,
        image_url: str = DEFAULT_IMAGE_URL,
        health: Optional[int] = None,
        client: SuiClient = None,
) -> dict:
    keypair = load_keypair(config)
    address = keypair.sui_address()

    tx = build_mint_transaction(config.package_id, address, username, image_url, health, config.gas_budget)

    if client is not None:
        return submit_mint(client, tx, keypair)
    with SuiClient(base_url=config.node_url, timeout=config.timeout) as client:
        return submit_mint(client, tx, keypair)


def submit_mint(client: SuiClient, tx: TransactionBuilder, keypair) -> dict:
    return sign_and_submit(
        client,
        tx,
        keypair,
        request_type="WaitForLocalExecution",
        options=DEFAULT_RESPONSE_OPTIONS,
    )


def main(health: Optional[int] = DEFAULT_HEALTH, env_file=".env"):
    init_logger()
    try:
        config = Config.from_env(env_file)
        response = mint_player(config, health=health)
    except Exception as e:
        logger.error(f"Mint fail: {e}\n{traceback.format_exc()}")
        sys.exit(1)

    print("-------- Mint response: --------")
    pprint(response)
