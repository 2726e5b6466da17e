from setuptools import setup
from os import path

here = path.abspath(path.dirname(__file__))

setup(
    name='sui-tft',
    version='0.1.0',
    description='Sui TFT Tool',
    long_description="Mint tft players on sui: derive the admin key, build a programmable "
                     "transaction, sign and submit it to a full node",
    # Choose your license
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    python_requires=">=3.8",
    package_data={'': ['*.yaml']},
    packages=["sui_tft", "sui_tft.tests"],
    install_requires=["pyyaml", "retrying", "mnemonic", "httpx",
                      "python-dotenv", "pynacl", "base58", "ecdsa"],
    extras_require={"test": ["pytest"]},
)
