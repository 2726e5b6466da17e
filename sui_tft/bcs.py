# Copyright (c) OmniBTC
# SPDX-License-Identifier: GPL-3.0

from __future__ import annotations

from typing import List

import base58

MAX_U8 = 2 ** 8 - 1
MAX_U16 = 2 ** 16 - 1
MAX_U32 = 2 ** 32 - 1
MAX_U64 = 2 ** 64 - 1
MAX_U128 = 2 ** 128 - 1
MAX_U256 = 2 ** 256 - 1

SUI_ADDRESS_LENGTH = 32
OBJECT_DIGEST_LENGTH = 32


def uleb128(value: int) -> bytes:
    if value < 0:
        raise ValueError(f"uleb128 value must not be negative: {value}")
    output = b""
    while value >= 0x80:
        # Write 7 (lowest) bits of data and set the 8th bit to 1.
        output += bytes([(value & 0x7F) | 0x80])
        value >>= 7

    # Write the remaining bits of data and set the highest bit to 0.
    output += bytes([value & 0x7F])
    return output


def encode_list(data: list) -> bytes:
    output = uleb128(len(data))
    for v in data:
        if isinstance(v, list):
            output += encode_list(v)
        else:
            output += v.encode
    return output


def from_list(data: list, sui_type):
    return [v if isinstance(v, sui_type) else sui_type(v) for v in data]


class _UInt:
    BYTES: int = 0
    MAX: int = 0

    def __init__(self, v0: int):
        if isinstance(v0, bool) or not isinstance(v0, int):
            raise ValueError(f"{type(self).__name__} expects int, got {v0!r}")
        if not 0 <= v0 <= self.MAX:
            raise ValueError(f"{v0} out of range for {type(self).__name__}")
        self.v0 = v0

    def __eq__(self, other):
        return type(self) is type(other) and self.v0 == other.v0

    def __repr__(self):
        return f"{type(self).__name__}({self.v0})"

    @property
    def encode(self) -> bytes:
        return self.v0.to_bytes(self.BYTES, "little", signed=False)


class U8(_UInt):
    BYTES = 1
    MAX = MAX_U8

    @staticmethod
    def from_hex(data: str) -> List[U8]:
        if data.startswith("0x"):
            data = data[2:]
        if len(data) % 2 == 1:
            data = "0" + data
        return from_list(list(bytes.fromhex(data)), U8)


class U16(_UInt):
    BYTES = 2
    MAX = MAX_U16


class U32(_UInt):
    BYTES = 4
    MAX = MAX_U32


class U64(_UInt):
    BYTES = 8
    MAX = MAX_U64


class U128(_UInt):
    BYTES = 16
    MAX = MAX_U128


class U256(_UInt):
    BYTES = 32
    MAX = MAX_U256


class String:
    def __init__(self, v0: str):
        if not isinstance(v0, str):
            raise ValueError(f"String expects str, got {v0!r}")
        self.v0 = v0

    @property
    def encode(self) -> bytes:
        data = self.v0.encode("utf-8")
        return uleb128(len(data)) + data


class Bool:
    def __init__(self, v0: bool):
        if not isinstance(v0, bool):
            raise ValueError(f"Bool expects bool, got {v0!r}")
        self.v0 = v0

    @property
    def encode(self) -> bytes:
        return bytes([1 if self.v0 else 0])


class RustEnum:
    """Tagged union; subclasses list variants as ``Name = (type, index)``."""

    def __init__(self, key, value):
        variant = getattr(type(self), key, None)
        if not isinstance(variant, tuple):
            raise ValueError(f"{key} is not a variant of {type(self).__name__}")
        if not isinstance(value, variant[0]):
            raise ValueError(f"{type(self).__name__}::{key} expects {variant[0].__name__}")
        self.key = key
        self.value = value

    def __repr__(self):
        return f"{type(self).__name__}::{self.key}"

    @property
    def encode(self) -> bytes:
        (ty, index) = getattr(type(self), self.key)
        return bytes([index]) + self.value.encode


class ObjectDigest:
    def __init__(self, v0):
        if isinstance(v0, (bytes, list)):
            v0 = from_list(list(v0), U8)
        elif isinstance(v0, str):
            v0 = from_list(list(base58.b58decode(v0)), U8)
        else:
            raise ValueError(v0)
        if len(v0) != OBJECT_DIGEST_LENGTH:
            raise ValueError(f"Object digest must be {OBJECT_DIGEST_LENGTH} bytes")
        self.v0: List[U8] = v0

    @property
    def encode(self) -> bytes:
        return encode_list(self.v0)


class SuiAddress:
    def __init__(self, v0):
        if isinstance(v0, (bytes, list)):
            v0 = from_list(list(v0), U8)
        elif isinstance(v0, str) and v0.startswith("0x"):
            v0 = U8.from_hex(v0)
            if len(v0) < SUI_ADDRESS_LENGTH:
                v0 = [U8(0)] * (SUI_ADDRESS_LENGTH - len(v0)) + v0
        else:
            raise ValueError(v0)
        if len(v0) != SUI_ADDRESS_LENGTH:
            raise ValueError(f"Sui address must be {SUI_ADDRESS_LENGTH} bytes")
        self.v0: List[U8] = v0

    def __str__(self):
        return "0x" + self.encode.hex()

    @property
    def encode(self) -> bytes:
        # Fixed length, no length prefix.
        return bytes(v.v0 for v in self.v0)


SequenceNumber = U64
EpochId = U64
ObjectID = SuiAddress
Address = SuiAddress


class ObjectRef:
    def __init__(self, object_id, sequence_number, object_digest):
        self.object_id: ObjectID = object_id
        self.sequence_number: SequenceNumber = sequence_number
        self.object_digest: ObjectDigest = object_digest

    @property
    def encode(self) -> bytes:
        return self.object_id.encode + self.sequence_number.encode + self.object_digest.encode


class ObjectArg(RustEnum):
    ImmOrOwnedObject = (ObjectRef, 0)


class Pure:
    def __init__(self, v0):
        self.v0: List[U8] = from_list(list(v0), U8)

    @property
    def encode(self) -> bytes:
        return encode_list(self.v0)


class CallArg(RustEnum):
    Pure = (Pure, 0)
    Object = (ObjectArg, 1)


class Identifier:
    def __init__(self, v0):
        if not isinstance(v0, str) or not v0.isidentifier() or not v0.isascii():
            raise ValueError(f"Invalid move identifier: {v0!r}")
        self.v0 = v0

    @property
    def encode(self) -> bytes:
        return uleb128(len(self.v0)) + bytes(self.v0, encoding="ascii")


class NONE:
    @property
    def encode(self) -> bytes:
        return b''


class StructTag:
    def __init__(self,
                 address: SuiAddress,
                 module: Identifier,
                 name: Identifier,
                 type_params: List[TypeTag],
                 ):
        self.address: SuiAddress = address
        self.module: Identifier = module
        self.name: Identifier = name
        self.type_params: List[TypeTag] = type_params

    @property
    def encode(self) -> bytes:
        return self.address.encode + self.module.encode + self.name.encode + encode_list(self.type_params)


class TypeTag(RustEnum):
    Bool = (NONE, 0)
    U8 = (NONE, 1)
    U64 = (NONE, 2)
    U128 = (NONE, 3)
    Address = (NONE, 4)
    Signer = (NONE, 5)
    Vector = (RustEnum, 6)
    Struct = (StructTag, 7)
    U16 = (NONE, 8)
    U32 = (NONE, 9)
    U256 = (NONE, 10)


class ProgrammableMoveCall:
    def __init__(self,
                 package: ObjectID,
                 module: Identifier,
                 function: Identifier,
                 type_arguments: List[TypeTag],
                 arguments: List[Argument]
                 ):
        self.package = package
        self.module = module
        self.function = function
        self.type_arguments = type_arguments
        self.arguments = arguments

    @property
    def encode(self) -> bytes:
        return self.package.encode + self.module.encode + \
               self.function.encode + encode_list(self.type_arguments) + encode_list(self.arguments)


class NestedResult:
    def __init__(self, v0, v1):
        self.v0: U16 = v0
        self.v1: U16 = v1

    @property
    def encode(self) -> bytes:
        return self.v0.encode + self.v1.encode


class Argument(RustEnum):
    GasCoin = (NONE, 0)
    Input = (U16, 1)
    Result = (U16, 2)
    NestedResult = (NestedResult, 3)


class TransferObjects:
    def __init__(self, v0, v1):
        self.v0: List[Argument] = v0
        self.v1: Argument = v1

    @property
    def encode(self) -> bytes:
        return encode_list(self.v0) + self.v1.encode


class Command(RustEnum):
    MoveCall = (ProgrammableMoveCall, 0)
    TransferObjects = (TransferObjects, 1)


class ProgrammableTransaction:
    def __init__(self, inputs, commands):
        self.inputs: List[CallArg] = inputs
        self.commands: List[Command] = commands

    @property
    def encode(self) -> bytes:
        return encode_list(self.inputs) + encode_list(self.commands)


class TransactionExpiration(RustEnum):
    NONE = (NONE, 0)
    Epoch = (EpochId, 1)


class GasData:
    def __init__(self, payment, owner, price, budget):
        self.payment: List[ObjectRef] = payment
        self.owner: SuiAddress = owner
        self.price: U64 = price
        self.budget: U64 = budget

    @property
    def encode(self) -> bytes:
        return encode_list(self.payment) + self.owner.encode + self.price.encode + self.budget.encode


class TransactionKind(RustEnum):
    ProgrammableTransaction = (ProgrammableTransaction, 0)


class TransactionDataV1:
    def __init__(
            self,
            kind: TransactionKind,
            sender: SuiAddress,
            gas_data: GasData,
            expiration: TransactionExpiration
    ):
        self.kind: TransactionKind = kind
        self.sender: SuiAddress = sender
        self.gas_data: GasData = gas_data
        self.expiration: TransactionExpiration = expiration

    @property
    def encode(self):
        return self.kind.encode + self.sender.encode + self.gas_data.encode + self.expiration.encode


class TransactionData(RustEnum):
    V1 = (TransactionDataV1, 0)


class IntentScope(RustEnum):
    TransactionData = (NONE, 0)


class IntentVersion(RustEnum):
    V0 = (NONE, 0)


class AppId(RustEnum):
    Sui = (NONE, 0)


class Intent:
    def __init__(
            self,
            scope: IntentScope,
            version: IntentVersion,
            app_id: AppId):
        self.scope = scope
        self.version = version
        self.app_id = app_id

    @property
    def encode(self):
        return self.scope.encode + self.version.encode + self.app_id.encode

    @classmethod
    def transaction_data(cls) -> Intent:
        return cls(IntentScope("TransactionData", NONE()),
                   IntentVersion("V0", NONE()),
                   AppId("Sui", NONE()))
