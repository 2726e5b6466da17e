import logging

import httpx
from retrying import retry

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error thrown when the API returns >= 400"""

    def __init__(self, message, status_code):
        # Call the base class constructor with the parameters it needs
        super().__init__(message)
        self.status_code = status_code


class RpcError(Exception):
    """Error member of a JSON-RPC response"""

    def __init__(self, message, code=None, data=None):
        super().__init__(message)
        self.code = code
        self.data = data


def retry_if_unavailable(exception) -> bool:
    return isinstance(exception, (httpx.TransportError, ApiError))


class SuiClient(httpx.Client):
    """
    Sui full node JSON-RPC client.

    Read methods retry on transport failures; transaction execution is sent
    exactly once.
    """

    def __init__(self, base_url, timeout, **kwargs):
        super(SuiClient, self).__init__(base_url=base_url, timeout=timeout, **kwargs)
        self.endpoint = base_url
        self.request_id = 0

    def post(self, *args, **kwargs):
        response = super().post(*args, **kwargs)
        if response.status_code >= 400:
            raise ApiError(response.text, response.status_code)
        return response

    def call(self, method, params):
        self.request_id += 1
        logger.debug(f"{method} -> {self.endpoint}")
        response = self.post(
            f"{self.endpoint}",
            json={
                "jsonrpc": "2.0",
                "id": self.request_id,
                "method": method,
                "params": params
            },
        )
        response = response.json()
        if "error" in response:
            error = response["error"]
            if isinstance(error, dict):
                raise RpcError(error.get("message", str(error)), error.get("code"), error.get("data"))
            raise RpcError(str(error))
        return response["result"]

    @retry(stop_max_attempt_number=5, wait_random_min=500, wait_random_max=1000,
           retry_on_exception=retry_if_unavailable)
    def read(self, method, params):
        return self.call(method, params)

    def sui_dryRunTransactionBlock(
            self,
            tx_bytes,
    ):
        return self.read("sui_dryRunTransactionBlock", [tx_bytes])

    def sui_executeTransactionBlock(
            self,
            tx_bytes,
            signatures,
            options,
            request_type,
    ):
        return self.call(
            "sui_executeTransactionBlock",
            [
                tx_bytes,
                signatures,
                options,
                request_type,
            ]
        )

    def suix_getCoins(
            self,
            owner,
            coin_type,
            cursor,
            limit,
    ):
        return self.read("suix_getCoins", [owner, coin_type, cursor, limit])

    def suix_getReferenceGasPrice(self):
        return self.read("suix_getReferenceGasPrice", [])
