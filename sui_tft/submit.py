from __future__ import annotations

import base64
import logging
from typing import List, Optional, Tuple

from .bcs import ObjectRef
from .keypair import Keypair
from .sui_client import SuiClient
from .transaction import TransactionBuilder, TransactionError, object_ref

logger = logging.getLogger(__name__)

SUI_COIN_TYPE = "0x2::sui::SUI"

DEFAULT_RESPONSE_OPTIONS = {
    "showEffects": True,
    "showEvents": True,
    "showObjectChanges": True,
}

# WaitForEffectsCert: waits for TransactionEffectsCert and then return to client.
# WaitForLocalExecution: also waits until the node executed the transaction locally,
# so it is aware of it on subsequent queries.
REQUEST_TYPES = ("WaitForEffectsCert", "WaitForLocalExecution")


def get_gas_price(client: SuiClient) -> int:
    return int(client.suix_getReferenceGasPrice())


def select_gas_payment(client: SuiClient, owner: str, gas_budget: int) -> List[ObjectRef]:
    """Largest SUI coins of ``owner`` until their balance covers ``gas_budget``"""
    coins = []
    cursor = None
    while True:
        page = client.suix_getCoins(owner, SUI_COIN_TYPE, cursor, None)
        coins.extend(page["data"])
        cursor = page.get("nextCursor")
        if not page.get("hasNextPage") or cursor is None:
            break
    if not coins:
        raise TransactionError(f"No SUI coins for gas found in {owner}")

    payment = []
    gas_amount = 0
    for coin in sorted(coins, key=lambda x: int(x["balance"]), reverse=True):
        if gas_amount >= gas_budget:
            break
        payment.append(object_ref(coin))
        gas_amount += int(coin["balance"])
    if gas_amount < gas_budget:
        raise TransactionError(f"Gas coins of {owner} hold {gas_amount}, less than budget {gas_budget}")
    logger.debug(f"Gas payment: {len(payment)} coins, {gas_amount} for budget {gas_budget}")
    return payment


def prepare_transaction(
        client: SuiClient,
        builder: TransactionBuilder,
        sender: str,
        gas_price: Optional[int] = None,
        gas_payment: Optional[list] = None,
) -> bytes:
    if builder.gas_budget is None:
        raise TransactionError("Gas budget not set")
    if gas_price is None:
        gas_price = get_gas_price(client)
    if gas_payment is None:
        gas_payment = select_gas_payment(client, sender, builder.gas_budget)
    return builder.build(sender, gas_price, gas_payment).encode


def sign_and_submit(
        client: SuiClient,
        builder: TransactionBuilder,
        keypair: Keypair,
        request_type: str = "WaitForLocalExecution",
        options: Optional[dict] = None,
        gas_price: Optional[int] = None,
        gas_payment: Optional[list] = None,
) -> dict:
    """
    Sign the transaction as ``keypair`` and execute it once.

    The builder is sealed on signing and can not be submitted again. Node and
    transport errors propagate to the caller; the returned result is the
    node's response as is.
    """
    if builder.sealed:
        raise TransactionError("Transaction already submitted, build a new one")
    if request_type not in REQUEST_TYPES:
        raise TransactionError(f"Unknown request type {request_type}, expected one of {REQUEST_TYPES}")
    if options is None:
        options = DEFAULT_RESPONSE_OPTIONS

    tx_bytes, signature = sign_transaction(client, builder, keypair, gas_price, gas_payment)

    logger.info(f"Execute transaction {builder.command_names()}, waiting...")
    result = client.sui_executeTransactionBlock(
        base64.b64encode(tx_bytes).decode("ascii"),
        [signature],
        options,
        request_type,
    )
    status = result.get("effects", {}).get("status", {}).get("status")
    logger.info(f"Execute finished, status: {status}, transactionDigest: {result.get('digest')}")
    return result


def sign_transaction(
        client: SuiClient,
        builder: TransactionBuilder,
        keypair: Keypair,
        gas_price: Optional[int] = None,
        gas_payment: Optional[list] = None,
) -> Tuple[bytes, str]:
    tx_bytes = prepare_transaction(client, builder, keypair.sui_address(), gas_price, gas_payment)
    builder.seal()
    return tx_bytes, keypair.sign_transaction(tx_bytes)


def dry_run(
        client: SuiClient,
        builder: TransactionBuilder,
        sender: str,
        gas_price: Optional[int] = None,
        gas_payment: Optional[list] = None,
) -> dict:
    """Simulate without signing; the builder stays open for a later submit."""
    tx_bytes = prepare_transaction(client, builder, sender, gas_price, gas_payment)
    return client.sui_dryRunTransactionBlock(base64.b64encode(tx_bytes).decode("ascii"))
