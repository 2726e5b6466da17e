import base64
import json

import base58
import httpx

from sui_tft.sui_client import SuiClient

GAS_COIN_ID = "0x" + "11" * 32
PLAYER_ID = "0x" + "22" * 32


def fake_digest(seed: int) -> str:
    return base58.b58encode(bytes([seed] * 32)).decode("ascii")


class MockNode:
    """In-process full node answering the JSON-RPC methods used by a submit."""

    def __init__(self, coins=None, gas_price="1000", status="success", page_size=None):
        if coins is None:
            coins = [
                {"coinObjectId": GAS_COIN_ID, "version": "3", "digest": fake_digest(1), "balance": "5000000000"},
            ]
        self.coins = coins
        self.gas_price = gas_price
        self.status = status
        self.page_size = page_size
        self.requests = []

    def methods(self):
        return [v["method"] for v in self.requests]

    def executed(self) -> dict:
        for v in self.requests:
            if v["method"] == "sui_executeTransactionBlock":
                return v
        raise AssertionError("transaction not executed")

    def executed_tx_bytes(self) -> bytes:
        return base64.b64decode(self.executed()["params"][0])

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        method = body["method"]
        if method == "suix_getReferenceGasPrice":
            result = self.gas_price
        elif method == "suix_getCoins":
            result = self.coin_page(body["params"][2])
        elif method == "sui_executeTransactionBlock":
            result = self.execution_result()
        elif method == "sui_dryRunTransactionBlock":
            result = {"effects": {"status": {"status": self.status}}}
        else:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"],
                                              "error": {"code": -32601, "message": f"{method} not found"}})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    def coin_page(self, cursor) -> dict:
        if self.page_size is None:
            return {"data": self.coins, "nextCursor": None, "hasNextPage": False}
        start = 0 if cursor is None else int(cursor[1:])
        end = start + self.page_size
        has_next = end < len(self.coins)
        return {"data": self.coins[start:end], "nextCursor": f"c{end}" if has_next else None, "hasNextPage": has_next}

    def execution_result(self) -> dict:
        return {
            "digest": fake_digest(9),
            "effects": {
                "status": {"status": self.status},
                "created": [{"owner": {"AddressOwner": "0x0"},
                             "reference": {"objectId": PLAYER_ID, "version": 4, "digest": fake_digest(2)}}],
            },
            "events": [],
            "objectChanges": [
                {
                    "type": "created",
                    "objectType": "0xabc::tft::Player",
                    "objectId": PLAYER_ID,
                    "version": "4",
                    "digest": fake_digest(2),
                },
            ],
        }

    def client(self) -> SuiClient:
        return SuiClient(base_url="http://mock-node", timeout=5, transport=httpx.MockTransport(self.handler))
