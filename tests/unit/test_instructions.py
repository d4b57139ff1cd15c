from __future__ import annotations

from dataclasses import dataclass

import pytest

from src.domain.algorithms.instructions import (
    InstructionSynthesizer,
    builtin_instruction,
    distance_label,
    symbol_for,
)
from src.domain.models import (
    GeoPoint,
    InstructionKind,
    InstructionSymbol,
    Maneuver,
    ManeuverModifier,
    ManeuverType,
    RoutingLeg,
    RoutingStep,
    Stop,
)


def _step(
    type_: str,
    modifier: str | None = None,
    *,
    name: str = "Tran Hung Dao",
    exit: int | None = None,
    distance_m: float = 120.0,
    instruction: str | None = None,
) -> RoutingStep:
    return RoutingStep(
        maneuver=Maneuver(
            type=ManeuverType.parse(type_),
            modifier=ManeuverModifier.parse(modifier),
            exit=exit,
            raw_type=type_,
        ),
        name=name,
        distance_m=distance_m,
        instruction=instruction,
    )


@dataclass(slots=True)
class _StaticCompiler:
    text: str = "Compiled"
    calls: int = 0

    def compile(self, language: str, step: RoutingStep, *, leg_index: int, leg_count: int) -> str:
        self.calls += 1
        return f"{self.text} ({language} {leg_index}/{leg_count})"


class _BrokenCompiler:
    def compile(self, language: str, step: RoutingStep, *, leg_index: int, leg_count: int) -> str:
        raise KeyError(language)


def test_maneuver_parsing_is_closed() -> None:
    assert ManeuverType.parse("end of road") is ManeuverType.END_OF_ROAD
    assert ManeuverType.parse("exit roundabout") is ManeuverType.ROUNDABOUT
    assert ManeuverType.parse("teleport") is ManeuverType.UNKNOWN
    assert ManeuverType.parse(None) is ManeuverType.UNKNOWN
    assert ManeuverModifier.parse("slight left") is ManeuverModifier.SLIGHT_LEFT
    assert ManeuverModifier.parse("diagonal") is None


@pytest.mark.parametrize(
    ("step", "expected"),
    [
        (_step("depart"), "Depart from Depot"),
        (_step("arrive", "left"), "Arrive at Store A, on the left"),
        (_step("arrive"), "Arrive at Store A"),
        (_step("turn", "left"), "Turn left onto Tran Hung Dao"),
        (_step("turn", "slight right"), "Turn slightly right onto Tran Hung Dao"),
        (_step("turn", "straight"), "Continue straight onto Tran Hung Dao"),
        (_step("turn", "uturn"), "Make a U-turn onto Tran Hung Dao"),
        (_step("continue", name=""), "Continue on unnamed road"),
        (_step("merge", "left"), "Merge left onto Tran Hung Dao"),
        (_step("fork", "slight right"), "Keep right at the fork onto Tran Hung Dao"),
        (
            _step("roundabout", exit=2),
            "Enter the roundabout and take the 2nd exit onto Tran Hung Dao",
        ),
        (_step("exit roundabout"), "Exit the roundabout onto Tran Hung Dao"),
        (
            _step("end of road", "right"),
            "At the end of the road, turn right onto Tran Hung Dao",
        ),
        (_step("off ramp", "right"), "Take the exit on the right onto Tran Hung Dao"),
        (_step("new name"), "Continue onto Tran Hung Dao"),
        (_step("teleport"), "Continue on Tran Hung Dao"),
    ],
)
def test_builtin_instruction_rules(step: RoutingStep, expected: str) -> None:
    assert builtin_instruction(step, from_name="Depot", to_name="Store A") == expected


@pytest.mark.parametrize(
    ("type_", "modifier", "text", "expected"),
    [
        ("depart", "left", "", InstructionSymbol.DEPART),
        ("arrive", None, "", InstructionSymbol.ARRIVE),
        ("turn", "uturn", "Make a U-turn to the right", InstructionSymbol.UTURN_RIGHT),
        ("turn", "uturn", "Make a U-turn", InstructionSymbol.UTURN_LEFT),
        ("turn", "sharp left", "", InstructionSymbol.SHARP_LEFT),
        ("continue", "straight", "", InstructionSymbol.STRAIGHT),
        ("merge", None, "", InstructionSymbol.MERGE),
        ("fork", None, "", InstructionSymbol.FORK),
        ("rotary", None, "", InstructionSymbol.ROUNDABOUT),
        ("teleport", "sideways", "", InstructionSymbol.CONTINUE),
        (None, None, "", InstructionSymbol.CONTINUE),
    ],
)
def test_symbol_for(
    type_: str | None, modifier: str | None, text: str, expected: InstructionSymbol
) -> None:
    assert symbol_for(type_, modifier, text) is expected


def test_distance_label_rejects_non_positive_values() -> None:
    assert distance_label(0) is None
    assert distance_label(-5.0) is None
    assert distance_label(float("nan")) is None
    assert distance_label("12") is None
    assert distance_label(450) == "450 m"
    assert distance_label(1500) == "1.5 km"


def test_describe_step_prefers_embedded_instruction() -> None:
    compiler = _StaticCompiler()
    synthesizer = InstructionSynthesizer(compiler=compiler)

    text = synthesizer.describe_step(_step("turn", "left", instruction="Rẽ trái"))

    assert text == "Rẽ trái"
    assert compiler.calls == 0


def test_describe_step_uses_compiler_then_rules() -> None:
    synthesizer = InstructionSynthesizer(compiler=_StaticCompiler(), language="vi")
    assert synthesizer.describe_step(_step("turn", "left"), leg_index=1, leg_count=3) == (
        "Compiled (vi 1/3)"
    )

    broken = InstructionSynthesizer(compiler=_BrokenCompiler())
    assert broken.describe_step(_step("turn", "left")) == "Turn left onto Tran Hung Dao"


def test_build_turn_instructions_numbers_legs_and_names_stops() -> None:
    stops = {
        "depot": Stop(id="depot", name="Depot", location=GeoPoint(lat=10.04, lon=105.77)),
        "a": Stop(id="a", name="Store A", location=GeoPoint(lat=10.05, lon=105.78)),
        "b": Stop(id="b", name="Store B", location=GeoPoint(lat=10.06, lon=105.79)),
    }
    legs = (
        RoutingLeg(steps=(_step("depart"), _step("arrive", distance_m=0.0))),
        RoutingLeg(steps=(_step("depart"), _step("turn", "right"), _step("arrive"))),
    )

    instructions = InstructionSynthesizer().build_turn_instructions(
        legs, ["depot", "a", "b"], stops
    )

    assert [i.id for i in instructions] == ["0-0", "0-1", "1-0", "1-1", "1-2"]
    assert instructions[0].text == "Depart from Depot"
    assert instructions[1].text == "Arrive at Store A"
    assert instructions[1].distance_label is None
    assert instructions[2].text == "Depart from Store A"
    assert instructions[3].kind is InstructionKind.MANEUVER
    assert instructions[3].symbol is InstructionSymbol.RIGHT
    assert instructions[4].kind is InstructionKind.ARRIVE
    assert instructions[4].text == "Arrive at Store B"


def test_build_turn_instructions_defaults_names_for_missing_stops() -> None:
    legs = (RoutingLeg(steps=(_step("depart"), _step("arrive"))),)
    instructions = InstructionSynthesizer().build_turn_instructions(legs, [], {})
    assert instructions[0].text == "Depart from your starting point"
    assert instructions[1].text == "Arrive at your destination"
