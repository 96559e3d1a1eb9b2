import json
from pathlib import Path

import pytest

from abidec.abi_json import canonical_param_type, load_interface, AbiParam
from abidec.core.errors import LoadError
from abidec.decoding.grammar import parse_type
from abidec.decoding.specs import Constructor, Event, Function, Param, StateMutability
from abidec.decoding.types import Types

SMALL_ABI = (
    '[{"inputs":[{"internalType":"address","name":"a","type":"address"}],"stateMutability":"nonpayable","type":"constructor"},'
    '{"anonymous":false,"inputs":[{"indexed":false,"internalType":"address","name":"x","type":"address"},'
    '{"indexed":false,"internalType":"uint256","name":"y","type":"uint256"}],"name":"E","type":"event"},'
    '{"inputs":[{"internalType":"uint256","name":"x","type":"uint256"}],"name":"f",'
    '"outputs":[{"internalType":"uint256","name":"","type":"uint256"}],"stateMutability":"nonpayable","type":"function"},'
    '{"stateMutability":"payable","type":"receive"}]'
)


def test_load_small_abi() -> None:
    iface = load_interface(SMALL_ABI)
    assert iface.constructor == Constructor(inputs=(Param("a", Types.Address()),), state_mutability=StateMutability.NONPAYABLE)
    assert iface.functions == (
        Function(
            name="f",
            inputs=(Param("x", Types.Uint(256)),),
            outputs=(Param("", Types.Uint(256)),),
            state_mutability=StateMutability.NONPAYABLE,
        ),
    )
    assert iface.events == (
        Event(
            name="E",
            inputs=(Param("x", Types.Address(), indexed=False), Param("y", Types.Uint(256), indexed=False)),
            anonymous=False,
        ),
    )
    assert iface.has_receive
    assert not iface.has_fallback


def test_load_from_path_and_artifact(tmp_path: Path, factory_abi_path: Path) -> None:
    abi = json.loads(factory_abi_path.read_text())
    artifact = tmp_path / "Factory.json"
    artifact.write_text(json.dumps({"contractName": "Factory", "abi": abi}))
    assert load_interface(artifact) == load_interface(factory_abi_path)
    assert load_interface(abi) == load_interface(factory_abi_path)


def test_tuple_components_are_expanded() -> None:
    raw = AbiParam.model_validate(
        {
            "name": "orders",
            "type": "tuple[2][]",
            "components": [
                {"name": "maker", "type": "address"},
                {"name": "legs", "type": "tuple[]", "components": [{"name": "amount", "type": "uint128"}]},
            ],
        }
    )
    assert canonical_param_type(raw) == "(address,(uint128)[])[2][]"


def test_tuple_params_keep_component_names() -> None:
    abi = [
        {
            "type": "function",
            "name": "fill",
            "stateMutability": "payable",
            "inputs": [
                {"name": "order", "type": "tuple", "components": [{"name": "maker", "type": "address"}, {"name": "salt", "type": "uint256"}]}
            ],
            "outputs": [],
        },
        {"type": "fallback", "stateMutability": "payable"},
        {"type": "error", "name": "Expired", "inputs": [{"name": "at", "type": "uint64"}]},
    ]
    iface = load_interface(abi)
    [fill] = iface.functions
    assert fill.signature == "fill((address,uint256))"
    assert fill.inputs[0].type == parse_type("(address,uint256)")
    assert [c.name for c in fill.inputs[0].components] == ["maker", "salt"]
    assert iface.has_fallback
    assert iface.errors[0].signature == "Expired(uint64)"


@pytest.mark.parametrize(
    "entry, field",
    [
        ({"type": "function", "name": "f", "inputs": []}, "stateMutability"),
        ({"type": "constructor", "inputs": []}, "stateMutability"),
        ({"type": "function", "stateMutability": "view", "inputs": []}, "name"),
        ({"type": "event", "anonymous": False, "inputs": []}, "name"),
        ({"type": "event", "name": "E", "inputs": []}, "anonymous"),
        ({"type": "error", "inputs": []}, "name"),
    ],
)
def test_missing_required_fields(entry: dict, field: str) -> None:
    with pytest.raises(LoadError) as exc:
        load_interface([{"type": "receive", "stateMutability": "payable"}, entry])
    assert exc.value.field == field
    assert exc.value.entry == 1


def test_unknown_entry_kind() -> None:
    with pytest.raises(LoadError) as exc:
        load_interface([{"type": "modifier", "name": "onlyOwner"}])
    assert exc.value.field == "type"


def test_invalid_type_string() -> None:
    with pytest.raises(LoadError) as exc:
        load_interface([{"type": "function", "name": "f", "stateMutability": "pure", "inputs": [{"name": "a", "type": "uint7"}]}])
    assert "'a'" in str(exc.value)


def test_invalid_state_mutability() -> None:
    with pytest.raises(LoadError):
        load_interface([{"type": "function", "name": "f", "stateMutability": "constant", "inputs": []}])


def test_invalid_json() -> None:
    with pytest.raises(LoadError):
        load_interface("[{")
