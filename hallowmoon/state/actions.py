"""
The closed set of actions the reducer accepts.

Each action is a small pydantic model tagged by `type`. Hosts that receive
actions as plain dicts (saved replays, the console) go through
parse_action(), which validates against the tagged union.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class ActionType(str, Enum):
    MOVE_CARD_TO_SLOT = "MOVE_CARD_TO_SLOT"
    RECALL_CARD = "RECALL_CARD"
    ACTIVATE_SLOT = "ACTIVATE_SLOT"
    UPGRADE_SLOT = "UPGRADE_SLOT"
    ADVANCE_TIME = "ADVANCE_TIME"
    RESOLVE_PENDING_SLOT_ACTIONS = "RESOLVE_PENDING_SLOT_ACTIONS"
    SET_TIME_SCALE = "SET_TIME_SCALE"
    ACKNOWLEDGE_CARD_REVEAL = "ACKNOWLEDGE_CARD_REVEAL"


class MoveCardToSlot(BaseModel):
    type: Literal["MOVE_CARD_TO_SLOT"] = "MOVE_CARD_TO_SLOT"
    card_id: str
    slot_id: str


class RecallCard(BaseModel):
    type: Literal["RECALL_CARD"] = "RECALL_CARD"
    card_id: str


class ActivateSlot(BaseModel):
    type: Literal["ACTIVATE_SLOT"] = "ACTIVATE_SLOT"
    slot_id: str


class UpgradeSlot(BaseModel):
    type: Literal["UPGRADE_SLOT"] = "UPGRADE_SLOT"
    slot_id: str


class AdvanceTime(BaseModel):
    type: Literal["ADVANCE_TIME"] = "ADVANCE_TIME"


class ResolvePendingSlotActions(BaseModel):
    type: Literal["RESOLVE_PENDING_SLOT_ACTIONS"] = "RESOLVE_PENDING_SLOT_ACTIONS"


class SetTimeScale(BaseModel):
    type: Literal["SET_TIME_SCALE"] = "SET_TIME_SCALE"
    scale: float  # 0 pauses


class AcknowledgeCardReveal(BaseModel):
    type: Literal["ACKNOWLEDGE_CARD_REVEAL"] = "ACKNOWLEDGE_CARD_REVEAL"
    card_id: str


GameAction = Annotated[
    Union[
        MoveCardToSlot,
        RecallCard,
        ActivateSlot,
        UpgradeSlot,
        AdvanceTime,
        ResolvePendingSlotActions,
        SetTimeScale,
        AcknowledgeCardReveal,
    ],
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter = TypeAdapter(GameAction)


def parse_action(data: dict) -> BaseModel:
    """Validate a plain dict into one of the GameAction models."""
    return _action_adapter.validate_python(data)
