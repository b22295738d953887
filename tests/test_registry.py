from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

import pytest

from liquid_console import Binding, BindingKind, Param, UnsupportedTypeError, Vector2, Vector3
from liquid_console.coerce import CoercionRegistry
from liquid_console.registry import CommandRegistry, params_from_signature, signature
from liquid_console.utils import format_value


def test_params_from_signature() -> None:
    def teleport(shell, where: Vector3, speed: float = 2.0, *rest, label="x") -> None:
        pass

    params = params_from_signature(teleport, skip=1)

    assert params == (
        Param(Vector3, "where"),
        Param(float, "speed", optional=True, default=2.0),
    )


def test_unannotated_parameters_are_text() -> None:
    params = params_from_signature(lambda a, b=None: None)

    assert params == (Param(str, "a"), Param(str, "b", optional=True, default=None))


def test_bound_method_skips_self() -> None:
    class Door:
        def open(self, wide: bool) -> None:
            pass

    assert params_from_signature(Door().open) == (Param(bool, "wide"),)


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry(CoercionRegistry())


def test_register_is_case_insensitive(registry: CommandRegistry) -> None:
    binding = registry.register("Jump", lambda: None)

    assert binding.name == "jump"
    assert "JUMP" in registry
    assert registry.lookup("jUmP") is binding
    assert registry.remove("JUMP")
    assert not registry.remove("jump")
    assert len(registry) == 0


def test_register_rejects_unsupported_type(registry: CommandRegistry) -> None:
    class Opaque:
        pass

    with pytest.raises(UnsupportedTypeError):
        registry.register("take", lambda o: None, (Param(Opaque, "o"),))

    assert registry.lookup("take") is None


def test_names_listed_only(registry: CommandRegistry) -> None:
    registry.register("shown", lambda: None)
    registry.register("secret", lambda: None, kind=BindingKind.HIDDEN)
    registry.register("level", lambda: None, kind=BindingKind.VARIABLE)
    registry.register("go", lambda: None, kind=BindingKind.ALIAS)

    assert registry.names(listed_only=True) == ["shown"]
    assert sorted(registry.names()) == ["go", "level", "secret", "shown"]


@pytest.mark.parametrize(
    "kind, params, expected",
    [
        pytest.param(BindingKind.COMMAND, (), "spawn", id="bare"),
        pytest.param(
            BindingKind.COMMAND,
            (Param(Vector2, "at"), Param(Optional[int], "count", optional=True)),
            "spawn Vector2:at Optional[int]:count?",
            id="typed",
        ),
        pytest.param(BindingKind.VARIABLE, (Param(float, "value", optional=True),), "var spawn float:value?", id="var"),
        pytest.param(BindingKind.ALIAS, (), "alias spawn", id="alias"),
        pytest.param(BindingKind.COMMAND, (Param(List[float], "xs"),), "spawn List[float]:xs", id="array"),
    ],
)
def test_signature(kind: BindingKind, params: Any, expected: str) -> None:
    binding = Binding(name="spawn", fn=lambda *a: None, params=params, kind=kind)

    assert signature(binding) == expected


def test_target_name() -> None:
    class Lamp:
        def toggle(self) -> None:
            pass

    def standalone() -> None:
        pass

    assert Binding("toggle", Lamp().toggle).target_name() == "Lamp"
    assert Binding("s", standalone).target_name().endswith("standalone")


class Mood(Enum):
    CALM = 1
    ANGRY = 2


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param(5.0, "5", id="integral-float"),
        pytest.param(2.5, "2.5", id="float"),
        pytest.param(7, "7", id="int"),
        pytest.param(True, "true", id="bool"),
        pytest.param(float("inf"), "inf", id="inf"),
        pytest.param([1.0, 2.5], "1,2.5", id="list"),
        pytest.param(Vector3(1.0, 2.0, 0.5), "1,2,0.5", id="vector"),
        pytest.param(Mood.ANGRY, "angry", id="enum"),
        pytest.param("as is", "as is", id="str"),
    ],
)
def test_format_value(value: Any, expected: str) -> None:
    assert format_value(value) == expected
