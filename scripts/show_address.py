import sys

from sui_tft import Config, load_keypair
from sui_tft.log import init_logger


def main():
    logger = init_logger()
    try:
        keypair = load_keypair(Config.from_env())
    except Exception as e:
        logger.error(f"Load key fail: {e}")
        sys.exit(1)
    print(f"Address: {keypair.sui_address()}")
    print(f"Public key: {keypair.public_key_base64()}")


if __name__ == "__main__":
    main()
