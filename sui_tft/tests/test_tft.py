import base64
import hashlib
import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

import httpx

from sui_tft import Config, ConfigError, SuiClient, TransactionError, derive_keypair, dry_run, sign_and_submit
from sui_tft.bcs import SuiAddress
from sui_tft.tests.mock_node import GAS_COIN_ID, PLAYER_ID, MockNode, fake_digest
from sui_tft.submit import select_gas_payment
from sui_tft.tft import build_mint_transaction, main, mint_player

PACKAGE_ID = "0x" + "ab" * 32
ADMIN_PRIVATE_KEY = base64.b64encode(bytes([0]) + bytes(range(32))).decode("ascii")


def make_config(**kwargs) -> Config:
    env = {"PACKAGE_ID": PACKAGE_ID, "ADMIN_PRIVATE_KEY": ADMIN_PRIVATE_KEY, "SUI_NODE_URL": "http://mock-node"}
    env.update(kwargs)
    return Config.from_mapping(env)


class TestMintPlayer(unittest.TestCase):

    def test_mint_and_transfer(self):
        node = MockNode()
        keypair = derive_keypair("ed25519", ADMIN_PRIVATE_KEY)
        tx = build_mint_transaction(PACKAGE_ID, "0xABCD", "alina", "https://img", gas_budget=100000000)
        assert [v.key for v in tx.commands] == ["MoveCall", "TransferObjects"]

        with node.client() as client:
            result = sign_and_submit(client, tx, keypair)

        assert result["effects"]["status"]["status"] == "success"
        assert PLAYER_ID in [v["objectId"] for v in result["objectChanges"] if v["type"] == "created"]
        assert node.methods() == ["suix_getReferenceGasPrice", "suix_getCoins", "sui_executeTransactionBlock"]

        executed = node.executed()
        tx_bytes, signatures, options, request_type = executed["params"]
        assert request_type == "WaitForLocalExecution"
        assert options == {"showEffects": True, "showEvents": True, "showObjectChanges": True}

        tx_bytes = base64.b64decode(tx_bytes)
        assert tx_bytes.count(b"mint_player") == 1
        assert b"update_health" not in tx_bytes
        assert SuiAddress("0xABCD").encode in tx_bytes
        assert SuiAddress(GAS_COIN_ID).encode in tx_bytes
        # ... gas price, budget, TransactionExpiration::None
        assert tx_bytes.endswith((1000).to_bytes(8, "little") + (100000000).to_bytes(8, "little") + b"\x00")

        signature = base64.b64decode(signatures[0])
        assert signature[0] == 0
        assert signature[65:] == keypair.public_key()
        digest = hashlib.blake2b(b"\x00\x00\x00" + tx_bytes, digest_size=32).digest()
        assert keypair.verify(digest, signature[1:65])

    def test_mint_player_with_health(self):
        node = MockNode()
        result = mint_player(make_config(), health=111, client=node.client())
        assert result["effects"]["status"]["status"] == "success"
        tx_bytes = node.executed_tx_bytes()
        assert tx_bytes.find(b"mint_player") < tx_bytes.find(b"update_health")
        sender = derive_keypair("ed25519", ADMIN_PRIVATE_KEY).sui_address()
        assert SuiAddress(sender).encode in tx_bytes
        assert node.requests[1]["params"][0] == sender

    def test_secp256k1_signer(self):
        node = MockNode()
        private_key = base64.b64encode(bytes([1]) + bytes(range(1, 33))).decode("ascii")
        mint_player(make_config(ADMIN_PRIVATE_KEY=private_key, KEY_SCHEME="secp256k1"), client=node.client())
        signature = base64.b64decode(node.executed()["params"][1][0])
        assert signature[0] == 1
        assert len(signature) == 1 + 64 + 33

    def test_failed_execution_is_returned(self):
        node = MockNode(status="failure")
        result = mint_player(make_config(), client=node.client())
        assert result["effects"]["status"]["status"] == "failure"

    def test_submitted_transaction_is_sealed(self):
        node = MockNode()
        keypair = derive_keypair("ed25519", ADMIN_PRIVATE_KEY)
        tx = build_mint_transaction(PACKAGE_ID, keypair.sui_address(), "alina", "https://img")
        with node.client() as client:
            sign_and_submit(client, tx, keypair)
            with self.assertRaises(TransactionError):
                sign_and_submit(client, tx, keypair)
        assert node.methods().count("sui_executeTransactionBlock") == 1

    def test_dry_run_keeps_transaction_open(self):
        node = MockNode()
        keypair = derive_keypair("ed25519", ADMIN_PRIVATE_KEY)
        tx = build_mint_transaction(PACKAGE_ID, keypair.sui_address(), "alina", "https://img")
        with node.client() as client:
            result = dry_run(client, tx, keypair.sui_address())
            assert result["effects"]["status"]["status"] == "success"
            assert not tx.sealed
            sign_and_submit(client, tx, keypair)
        assert tx.sealed

    def test_no_gas_coins(self):
        node = MockNode(coins=[])
        with self.assertRaises(TransactionError):
            mint_player(make_config(), client=node.client())
        assert "sui_executeTransactionBlock" not in node.methods()

    def test_gas_coins_largest_first_across_pages(self):
        coins = [
            {"coinObjectId": "0x31", "version": "1", "digest": fake_digest(3), "balance": "10"},
            {"coinObjectId": "0x32", "version": "1", "digest": fake_digest(4), "balance": "50"},
            {"coinObjectId": "0x33", "version": "1", "digest": fake_digest(5), "balance": "300"},
        ]
        node = MockNode(coins=coins, page_size=2)
        with node.client() as client:
            payment = select_gas_payment(client, "0x1", 100)
        assert [v["params"][2] for v in node.requests] == [None, "c2"]
        assert [v.encode[:32] for v in payment] == [SuiAddress("0x33").encode]

        node = MockNode(coins=coins, page_size=2)
        with node.client() as client:
            payment = select_gas_payment(client, "0x1", 320)
        assert [v.encode[:32] for v in payment] == [SuiAddress("0x33").encode, SuiAddress("0x32").encode]

    def test_insufficient_gas_coins(self):
        coins = [{"coinObjectId": "0x31", "version": "1", "digest": fake_digest(3), "balance": "10"}]
        node = MockNode(coins=coins)
        with self.assertRaises(TransactionError):
            mint_player(make_config(GAS_BUDGET="1000"), client=node.client())
        assert "sui_executeTransactionBlock" not in node.methods()

    def test_caller_client_stays_open(self):
        node = MockNode()
        client = node.client()
        mint_player(make_config(), client=client)
        assert not client.is_closed
        client.close()

    def test_unreachable_node(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = SuiClient(base_url="http://mock-node", timeout=5, transport=httpx.MockTransport(handler))
        keypair = derive_keypair("ed25519", ADMIN_PRIVATE_KEY)
        tx = build_mint_transaction(PACKAGE_ID, keypair.sui_address(), "alina", "https://img")
        gas_payment = [{"objectId": GAS_COIN_ID, "version": "3", "digest": fake_digest(1)}]
        with client:
            with self.assertRaises(httpx.ConnectError):
                sign_and_submit(client, tx, keypair, gas_price=1000, gas_payment=gas_payment)

    def test_main(self):
        with mock.patch("sui_tft.tft.Config.from_env", return_value=make_config()), \
                mock.patch("sui_tft.tft.mint_player", return_value={"digest": "abc"}) as mint:
            stdout = io.StringIO()
            with redirect_stdout(stdout):
                main(health=None)
        assert mint.call_args.kwargs["health"] is None
        assert "-------- Mint response: --------" in stdout.getvalue()
        assert "'digest': 'abc'" in stdout.getvalue()

    def test_main_reports_errors(self):
        with mock.patch("sui_tft.tft.Config.from_env", side_effect=ConfigError("PACKAGE_ID env not exist")):
            stdout = io.StringIO()
            with redirect_stdout(stdout), self.assertRaises(SystemExit) as cm:
                main()
        assert cm.exception.code == 1
        assert stdout.getvalue() == ""
