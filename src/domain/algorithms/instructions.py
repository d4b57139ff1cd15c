from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Mapping, Sequence

from src.domain.algorithms.geo_utils import format_distance
from src.domain.models import (
    Instruction,
    InstructionKind,
    InstructionSymbol,
    ManeuverModifier,
    ManeuverType,
    RoutingLeg,
    RoutingStep,
    Stop,
)

if TYPE_CHECKING:
    from src.app.ports.output import IManeuverTextCompiler

logger = logging.getLogger(__name__)

UNNAMED_ROAD = "unnamed road"
DEFAULT_ORIGIN_NAME = "your starting point"
DEFAULT_DESTINATION_NAME = "your destination"

_LEFTISH = {
    ManeuverModifier.LEFT,
    ManeuverModifier.SLIGHT_LEFT,
    ManeuverModifier.SHARP_LEFT,
}
_RIGHTISH = {
    ManeuverModifier.RIGHT,
    ManeuverModifier.SLIGHT_RIGHT,
    ManeuverModifier.SHARP_RIGHT,
}

_MODIFIER_TEXT: dict[ManeuverModifier, str] = {
    ManeuverModifier.LEFT: "left",
    ManeuverModifier.RIGHT: "right",
    ManeuverModifier.STRAIGHT: "straight",
    ManeuverModifier.SLIGHT_LEFT: "slightly left",
    ManeuverModifier.SLIGHT_RIGHT: "slightly right",
    ManeuverModifier.SHARP_LEFT: "sharp left",
    ManeuverModifier.SHARP_RIGHT: "sharp right",
    ManeuverModifier.UTURN: "around",
}

_MODIFIER_SYMBOL: dict[ManeuverModifier, InstructionSymbol] = {
    ManeuverModifier.SLIGHT_LEFT: InstructionSymbol.SLIGHT_LEFT,
    ManeuverModifier.SLIGHT_RIGHT: InstructionSymbol.SLIGHT_RIGHT,
    ManeuverModifier.SHARP_LEFT: InstructionSymbol.SHARP_LEFT,
    ManeuverModifier.SHARP_RIGHT: InstructionSymbol.SHARP_RIGHT,
    ManeuverModifier.LEFT: InstructionSymbol.LEFT,
    ManeuverModifier.RIGHT: InstructionSymbol.RIGHT,
    ManeuverModifier.STRAIGHT: InstructionSymbol.STRAIGHT,
}

_TYPE_SYMBOL: dict[ManeuverType, InstructionSymbol] = {
    ManeuverType.MERGE: InstructionSymbol.MERGE,
    ManeuverType.FORK: InstructionSymbol.FORK,
    ManeuverType.ROUNDABOUT: InstructionSymbol.ROUNDABOUT,
    ManeuverType.ROTARY: InstructionSymbol.ROUNDABOUT,
}


@dataclass(frozen=True, slots=True)
class _Phrase:
    road: str
    modifier: ManeuverModifier | None
    exit: int | None
    raw_type: str | None
    from_name: str
    to_name: str

    @property
    def direction(self) -> str | None:
        if self.modifier is None:
            return None
        return _MODIFIER_TEXT[self.modifier]

    @property
    def side(self) -> str | None:
        if self.modifier in _LEFTISH:
            return "left"
        if self.modifier in _RIGHTISH:
            return "right"
        return None


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _depart(p: _Phrase) -> str:
    return f"Depart from {p.from_name}"


def _arrive(p: _Phrase) -> str:
    if p.side:
        return f"Arrive at {p.to_name}, on the {p.side}"
    if p.modifier is ManeuverModifier.STRAIGHT:
        return f"Arrive at {p.to_name}, straight ahead"
    return f"Arrive at {p.to_name}"


def _uturn(p: _Phrase) -> str:
    return f"Make a U-turn onto {p.road}"


def _turn(p: _Phrase) -> str:
    if p.modifier is ManeuverModifier.UTURN:
        return _uturn(p)
    if p.modifier is ManeuverModifier.STRAIGHT:
        return f"Continue straight onto {p.road}"
    if p.direction:
        return f"Turn {p.direction} onto {p.road}"
    return f"Turn onto {p.road}"


def _continue(p: _Phrase) -> str:
    if p.modifier is ManeuverModifier.UTURN:
        return f"Make a U-turn and continue on {p.road}"
    if p.direction:
        return f"Continue {p.direction} on {p.road}"
    return f"Continue on {p.road}"


def _merge(p: _Phrase) -> str:
    if p.side:
        return f"Merge {p.side} onto {p.road}"
    return f"Merge onto {p.road}"


def _fork(p: _Phrase) -> str:
    if p.side:
        return f"Keep {p.side} at the fork onto {p.road}"
    if p.modifier is ManeuverModifier.STRAIGHT:
        return f"Keep straight at the fork onto {p.road}"
    return f"Take the fork onto {p.road}"


def _circle(kind: str) -> Callable[[_Phrase], str]:
    def phrase(p: _Phrase) -> str:
        if p.raw_type and p.raw_type.strip().lower().startswith("exit"):
            return f"Exit the {kind} onto {p.road}"
        if p.exit:
            return f"Enter the {kind} and take the {_ordinal(p.exit)} exit onto {p.road}"
        return f"Enter the {kind} and exit onto {p.road}"

    return phrase


def _end_of_road(p: _Phrase) -> str:
    if p.direction and p.modifier is not ManeuverModifier.STRAIGHT:
        return f"At the end of the road, turn {p.direction} onto {p.road}"
    return f"At the end of the road, continue onto {p.road}"


def _on_ramp(p: _Phrase) -> str:
    if p.side:
        return f"Take the ramp on the {p.side} onto {p.road}"
    return f"Take the ramp onto {p.road}"


def _off_ramp(p: _Phrase) -> str:
    if p.side:
        return f"Take the exit on the {p.side} onto {p.road}"
    return f"Take the exit onto {p.road}"


def _new_name(p: _Phrase) -> str:
    return f"Continue onto {p.road}"


_RULES: dict[ManeuverType, Callable[[_Phrase], str]] = {
    ManeuverType.DEPART: _depart,
    ManeuverType.ARRIVE: _arrive,
    ManeuverType.TURN: _turn,
    ManeuverType.CONTINUE: _continue,
    ManeuverType.MERGE: _merge,
    ManeuverType.FORK: _fork,
    ManeuverType.ROUNDABOUT: _circle("roundabout"),
    ManeuverType.ROTARY: _circle("rotary"),
    ManeuverType.END_OF_ROAD: _end_of_road,
    ManeuverType.ON_RAMP: _on_ramp,
    ManeuverType.OFF_RAMP: _off_ramp,
    ManeuverType.NEW_NAME: _new_name,
    ManeuverType.UTURN: _uturn,
}


def builtin_instruction(
    step: RoutingStep,
    *,
    from_name: str = DEFAULT_ORIGIN_NAME,
    to_name: str = DEFAULT_DESTINATION_NAME,
) -> str:
    """Phrase a step with the built-in English rule table."""

    maneuver = step.maneuver
    phrase = _Phrase(
        road=(step.name or "").strip() or UNNAMED_ROAD,
        modifier=maneuver.modifier,
        exit=maneuver.exit,
        raw_type=maneuver.raw_type,
        from_name=from_name,
        to_name=to_name,
    )
    rule = _RULES.get(maneuver.type, _continue)
    return rule(phrase)


def symbol_for(
    maneuver_type: ManeuverType | str | None,
    modifier: ManeuverModifier | str | None,
    text: str = "",
) -> InstructionSymbol:
    """Pick the icon tag for a maneuver. Never fails; unknown input is 'continue'."""

    if not isinstance(maneuver_type, ManeuverType):
        maneuver_type = ManeuverType.parse(maneuver_type)
    if modifier is not None and not isinstance(modifier, ManeuverModifier):
        modifier = ManeuverModifier.parse(modifier)

    if maneuver_type is ManeuverType.DEPART:
        return InstructionSymbol.DEPART
    if maneuver_type is ManeuverType.ARRIVE:
        return InstructionSymbol.ARRIVE

    if modifier is ManeuverModifier.UTURN or maneuver_type is ManeuverType.UTURN:
        if "right" in (text or "").lower():
            return InstructionSymbol.UTURN_RIGHT
        return InstructionSymbol.UTURN_LEFT
    if modifier is not None and modifier in _MODIFIER_SYMBOL:
        return _MODIFIER_SYMBOL[modifier]

    return _TYPE_SYMBOL.get(maneuver_type, InstructionSymbol.CONTINUE)


def distance_label(meters: object) -> str | None:
    if isinstance(meters, bool) or not isinstance(meters, (int, float)):
        return None
    if not math.isfinite(meters) or meters <= 0:
        return None
    return format_distance(meters / 1000.0)


def kind_for(maneuver_type: ManeuverType) -> InstructionKind:
    if maneuver_type is ManeuverType.DEPART:
        return InstructionKind.DEPART
    if maneuver_type is ManeuverType.ARRIVE:
        return InstructionKind.ARRIVE
    return InstructionKind.MANEUVER


@dataclass(slots=True)
class InstructionSynthesizer:
    """Turns routing steps into display instructions.

    Literal instruction strings embedded in the response win. Otherwise the
    optional maneuver-text compiler is tried, and the built-in rule table is
    used when it is missing or fails.
    """

    compiler: IManeuverTextCompiler | None = None
    language: str = "en"

    def describe_step(
        self,
        step: RoutingStep,
        *,
        from_name: str = DEFAULT_ORIGIN_NAME,
        to_name: str = DEFAULT_DESTINATION_NAME,
        leg_index: int = 0,
        leg_count: int = 1,
    ) -> str:
        if step.instruction and step.instruction.strip():
            return step.instruction

        if self.compiler is not None:
            try:
                text = self.compiler.compile(
                    self.language, step, leg_index=leg_index, leg_count=leg_count
                )
            except Exception:
                logger.debug("Maneuver text compiler failed; using rule table", exc_info=True)
            else:
                if isinstance(text, str) and text.strip():
                    return text

        return builtin_instruction(step, from_name=from_name, to_name=to_name)

    def instructions_for_leg(
        self,
        leg: RoutingLeg,
        from_stop: Stop | None,
        to_stop: Stop | None,
        *,
        leg_index: int = 0,
        leg_count: int = 1,
    ) -> tuple[Instruction, ...]:
        from_name = from_stop.name if from_stop else DEFAULT_ORIGIN_NAME
        to_name = to_stop.name if to_stop else DEFAULT_DESTINATION_NAME

        out: list[Instruction] = []
        for step_index, step in enumerate(leg.steps):
            maneuver = step.maneuver
            text = self.describe_step(
                step,
                from_name=from_name,
                to_name=to_name,
                leg_index=leg_index,
                leg_count=leg_count,
            )
            out.append(
                Instruction(
                    id=f"{leg_index}-{step_index}",
                    text=text,
                    kind=kind_for(maneuver.type),
                    symbol=symbol_for(maneuver.type, maneuver.modifier, text),
                    distance_label=distance_label(step.distance_m),
                    maneuver_type=maneuver.type,
                    maneuver_modifier=maneuver.modifier,
                )
            )
        return tuple(out)

    def build_turn_instructions(
        self,
        legs: Sequence[RoutingLeg],
        stop_sequence: Sequence[str],
        stops_by_id: Mapping[str, Stop],
    ) -> tuple[Instruction, ...]:
        """Flat instruction list for a whole route, leg after leg."""

        out: list[Instruction] = []
        for index, leg in enumerate(legs):
            from_id = stop_sequence[index] if index < len(stop_sequence) else None
            to_id = stop_sequence[index + 1] if index + 1 < len(stop_sequence) else None
            out.extend(
                self.instructions_for_leg(
                    leg,
                    stops_by_id.get(from_id) if from_id else None,
                    stops_by_id.get(to_id) if to_id else None,
                    leg_index=index,
                    leg_count=len(legs),
                )
            )
        return tuple(out)
