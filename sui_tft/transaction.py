from __future__ import annotations

from typing import List, Optional, Union

from . import bcs
from .bcs import (
    Argument,
    CallArg,
    Command,
    GasData,
    Identifier,
    NestedResult,
    NONE,
    ObjectArg,
    ObjectDigest,
    ObjectID,
    ObjectRef,
    ProgrammableMoveCall,
    ProgrammableTransaction,
    Pure,
    SequenceNumber,
    StructTag,
    SuiAddress,
    TransactionData,
    TransactionDataV1,
    TransactionExpiration,
    TransactionKind,
    TransferObjects,
    TypeTag,
    U16,
    U64,
    encode_list,
)
from .utils import judge_hex_str

PRIMITIVE_TYPES = {
    "bool": "Bool",
    "u8": "U8",
    "u16": "U16",
    "u32": "U32",
    "u64": "U64",
    "u128": "U128",
    "u256": "U256",
    "address": "Address",
}

PURE_TYPES = dict(PRIMITIVE_TYPES, string="String")


class TransactionError(ValueError):
    """Raised when a transaction cannot be assembled as requested."""


class ResultRef:
    """
    Handle on the output of an earlier command in the same transaction.

    The value only exists once the transaction executes on chain; locally it
    is the command index (and optionally which of its return values).
    """

    def __init__(self, builder: TransactionBuilder, index: int, sub_index: Optional[int] = None):
        self.builder = builder
        self.index = index
        self.sub_index = sub_index

    def __getitem__(self, sub_index: int) -> ResultRef:
        if self.sub_index is not None:
            raise TransactionError("Nested results can not be indexed again")
        return ResultRef(self.builder, self.index, sub_index)

    def __repr__(self):
        if self.sub_index is None:
            return f"Result({self.index})"
        return f"NestedResult({self.index}, {self.sub_index})"

    @property
    def argument(self) -> Argument:
        if self.sub_index is None:
            return Argument("Result", U16(self.index))
        return Argument("NestedResult", NestedResult(U16(self.index), U16(self.sub_index)))


def split_type_params(data: str) -> List[str]:
    output = []
    depth = 0
    current = ""
    for c in data:
        if c == "<":
            depth += 1
        elif c == ">":
            depth -= 1
        if c == "," and depth == 0:
            output.append(current.strip())
            current = ""
        else:
            current += c
    if current.strip():
        output.append(current.strip())
    return output


def generate_type_arg(type_arg: str) -> TypeTag:
    """
    u64 -> TypeTag::U64
    vector<u8> -> TypeTag::Vector(TypeTag::U8)
    0x2::coin::Coin<0x2::sui::SUI> -> TypeTag::Struct(...)
    """
    type_arg = type_arg.strip()
    lowered = type_arg.lower()
    if lowered in PRIMITIVE_TYPES:
        return TypeTag(PRIMITIVE_TYPES[lowered], NONE())
    elif lowered.startswith("vector<") and lowered.endswith(">"):
        return TypeTag("Vector", generate_type_arg(type_arg[7:-1]))
    elif "::" in type_arg:
        type_arg_index = type_arg.find("<")
        if type_arg_index == -1:
            head, params = type_arg, []
        else:
            if not type_arg.endswith(">"):
                raise TransactionError(f"Invalid type argument: {type_arg}")
            head = type_arg[:type_arg_index]
            params = [generate_type_arg(v) for v in split_type_params(type_arg[type_arg_index + 1:-1])]
        parts = head.split("::")
        if len(parts) != 3:
            raise TransactionError(f"Invalid struct type: {type_arg}")
        return TypeTag("Struct", StructTag(SuiAddress(parts[0]), Identifier(parts[1]), Identifier(parts[2]), params))
    raise TransactionError(f"Invalid type argument: {type_arg}")


def generate_pure_value(type_name: str, data):
    lowered = type_name.strip().lower()
    if lowered in PURE_TYPES:
        return getattr(bcs, PURE_TYPES[lowered])(data)
    elif lowered.startswith("vector<") and lowered.endswith(">"):
        if isinstance(data, (bytes, bytearray)):
            data = list(data)
        if not isinstance(data, (list, tuple)):
            raise TransactionError(f"{type_name} expects a list, got {data!r}")
        return [generate_pure_value(type_name.strip()[7:-1], v) for v in data]
    raise TransactionError(f"Unsupported pure type: {type_name}")


def parse_target(target: str):
    """0x2::coin::value -> ("0x2", "coin", "value")"""
    parts = target.split("::") if isinstance(target, str) else []
    if len(parts) != 3 or not parts[0].startswith("0x") or not judge_hex_str(parts[0]):
        raise TransactionError(f"Move call target must be '<package>::<module>::<function>', got {target!r}")
    return parts[0], parts[1], parts[2]


def object_ref(data: Union[dict, ObjectRef]) -> ObjectRef:
    """Accepts node json with objectId/coinObjectId, version and digest."""
    if isinstance(data, ObjectRef):
        return data
    object_id = data.get("objectId", data.get("coinObjectId"))
    return ObjectRef(
        ObjectID(object_id),
        SequenceNumber(int(data["version"])),
        ObjectDigest(data["digest"])
    )


class TransactionBuilder:
    """
    Programmable transaction under construction.

    Commands are only appended; a command can use the results of commands
    before it, never after it. Once sealed (at signing) nothing can change.

    example:
        tx = new_transaction()
        player = tx.add_call(f"{package_id}::tft::mint_player",
                             [tx.pure("alina", "string"), tx.pure(image_url, "string")])
        tx.add_call(f"{package_id}::tft::update_health", [tx.pure(111, "u64"), player])
        tx.add_transfer([player], sender)
        tx.set_budget(100000000)
    """

    def __init__(self):
        self._inputs: List[CallArg] = []
        self._commands: List[Command] = []
        self._gas_budget: Optional[int] = None
        self._sealed = False

    def __repr__(self):
        return f"TransactionBuilder(commands={self.command_names()}, gas_budget={self._gas_budget})"

    @property
    def inputs(self) -> List[CallArg]:
        return list(self._inputs)

    @property
    def commands(self) -> List[Command]:
        return list(self._commands)

    @property
    def gas_budget(self) -> Optional[int]:
        return self._gas_budget

    @property
    def sealed(self) -> bool:
        return self._sealed

    def command_names(self) -> List[str]:
        names = []
        for command in self._commands:
            if command.key == "MoveCall":
                names.append(f"{command.value.module.v0}::{command.value.function.v0}")
            else:
                names.append(command.key)
        return names

    def _check_mutable(self):
        if self._sealed:
            raise TransactionError("Transaction is sealed, build a new one")

    def _add_input(self, call_arg: CallArg) -> Argument:
        self._check_mutable()
        self._inputs.append(call_arg)
        return Argument("Input", U16(len(self._inputs) - 1))

    def pure(self, value, type_name: str) -> Argument:
        pure_value = generate_pure_value(type_name, value)
        if isinstance(pure_value, list):
            data = encode_list(pure_value)
        else:
            data = pure_value.encode
        return self._add_input(CallArg("Pure", Pure(data)))

    def object(self, data: Union[dict, ObjectRef]) -> Argument:
        return self._add_input(CallArg("Object", ObjectArg("ImmOrOwnedObject", object_ref(data))))

    def _resolve_argument(self, arg) -> Argument:
        position = len(self._commands)
        if isinstance(arg, ResultRef):
            if arg.builder is not self:
                raise TransactionError(f"{arg} belongs to another transaction")
            if arg.index >= position:
                raise TransactionError(f"{arg} is not produced by an earlier command")
            return arg.argument
        if isinstance(arg, Argument):
            if arg.key == "Input" and arg.value.v0 >= len(self._inputs):
                raise TransactionError(f"Input {arg.value.v0} does not exist")
            if arg.key == "Result" and arg.value.v0 >= position:
                raise TransactionError(f"Result {arg.value.v0} is not produced by an earlier command")
            if arg.key == "NestedResult" and arg.value.v0.v0 >= position:
                raise TransactionError(f"Result {arg.value.v0.v0} is not produced by an earlier command")
            return arg
        raise TransactionError(f"Unsupported argument {arg!r}, use pure()/object() or a call result")

    def _add_command(self, command: Command) -> ResultRef:
        self._check_mutable()
        self._commands.append(command)
        return ResultRef(self, len(self._commands) - 1)

    def add_call(self, target: str, arguments: list = None, type_arguments: List[str] = None) -> ResultRef:
        package_id, module, function = parse_target(target)
        if arguments is None:
            arguments = []
        if type_arguments is None:
            type_arguments = []
        self._check_mutable()
        call = ProgrammableMoveCall(
            ObjectID(package_id),
            Identifier(module),
            Identifier(function),
            [generate_type_arg(v) for v in type_arguments],
            [self._resolve_argument(v) for v in arguments]
        )
        return self._add_command(Command("MoveCall", call))

    def add_transfer(self, objects: list, recipient):
        if not objects:
            raise TransactionError("Nothing to transfer")
        self._check_mutable()
        objects = [self._resolve_argument(v) for v in objects]
        if isinstance(recipient, str):
            recipient = self.pure(recipient, "address")
        recipient = self._resolve_argument(recipient)
        self._add_command(Command("TransferObjects", TransferObjects(objects, recipient)))

    def set_budget(self, amount: int):
        self._check_mutable()
        if isinstance(amount, bool) or not isinstance(amount, int) or not 0 < amount <= bcs.MAX_U64:
            raise TransactionError(f"Gas budget must be a positive u64, got {amount!r}")
        self._gas_budget = amount

    def programmable_transaction(self) -> ProgrammableTransaction:
        return ProgrammableTransaction(list(self._inputs), list(self._commands))

    def build(self, sender: str, gas_price: int, gas_payment: list) -> TransactionData:
        if not self._commands:
            raise TransactionError("Transaction has no commands")
        if self._gas_budget is None:
            raise TransactionError("Gas budget not set")
        gas_data = GasData(
            [object_ref(v) for v in gas_payment],
            SuiAddress(sender),
            U64(int(gas_price)),
            U64(self._gas_budget)
        )
        transaction_data_v1 = TransactionDataV1(
            TransactionKind("ProgrammableTransaction", self.programmable_transaction()),
            SuiAddress(sender),
            gas_data,
            TransactionExpiration("NONE", NONE())
        )
        return TransactionData("V1", transaction_data_v1)

    def seal(self):
        self._sealed = True


def new_transaction() -> TransactionBuilder:
    return TransactionBuilder()
