from .account import derive_keypair, load_keypair
from .config import Config, ConfigError, get_fullnode_url
from .ed25519 import Ed25519Keypair
from .keypair import Keypair, KeyDerivationError
from .secp256k1 import Secp256k1Keypair
from .submit import dry_run, sign_and_submit
from .sui_client import ApiError, RpcError, SuiClient
from .transaction import ResultRef, TransactionBuilder, TransactionError, new_transaction
