"""
Game state reducer.

GameMachine.reduce(state, action) takes one action and the current
snapshot and returns the next snapshot. Player mistakes never raise:
the returned state carries one extra log line explaining the refusal.

Time and randomness come only from the injected Runtime. While the game
is paused (paused_at set) every lock comparison uses paused_at instead
of the wall clock, so paused real time never counts against a lock.

Usage:
    machine = GameMachine(Runtime(seed=3))
    state = machine.initial_state()
    state = machine.reduce(state, MoveCardToSlot(card_id=state.hero_card_id,
                                                 slot_id="slot-the-manor"))
    state = machine.reduce(state, {"type": "ACTIVATE_SLOT", "slot_id": "slot-the-manor"})
"""

import logging
from typing import Callable

from ..runtime import Runtime
from ..utils.time import format_duration_label, round_half_up
from .actions import (
    AcknowledgeCardReveal,
    ActionType,
    ActivateSlot,
    MoveCardToSlot,
    RecallCard,
    SetTimeScale,
    UpgradeSlot,
    parse_action,
)
from .content import (
    MIN_LOCK_MS,
    MIN_TIME_SCALE,
    OPPORTUNITY_TEMPLATES,
    SLOT_LOCK_BASE_MS,
    SLOT_TEMPLATES,
    base_lock_duration_ms,
    build_story_log,
    get_persona_template,
    get_slot_template,
)
from .helpers import (
    add_to_hand,
    append_log,
    apply_resources,
    instantiate_card,
    instantiate_slot,
    remove_from_hand,
    slot_cards,
    spawn_opportunity,
)
from .occupancy import detach_card, release_from_slot, return_to_hand, seat_card
from .pending import resolve_pending_slot_actions
from .schema import (
    CardArchetype,
    GameState,
    HandLocation,
    Resources,
    Slot,
    SlotAcceptance,
    SlotState,
    SlotType,
)
from .slots import (
    SlotActionResult,
    SlotActivationContext,
    SlotBehaviorRegistry,
    SlotBehaviorUtils,
    SlotCardPlacementContext,
)
from .slots.dreams import journal_template

logger = logging.getLogger(__name__)

OPPORTUNITY_CHANCE_PER_CYCLE = 0.65


def starting_resources() -> Resources:
    return Resources(coin=0, lore=0, glimmer=1)


def _work_left(slot: Slot, reference: int, scale: float) -> float:
    """Unscaled work still owed on a slot's lock at `reference`."""
    if slot.lock_work_ms is None or slot.lock_rebased_at is None:
        # Saves from before work tracking only know the deadline
        return max(0.0, (slot.locked_until - reference) * scale)
    return max(0.0, slot.lock_work_ms - (reference - slot.lock_rebased_at) * scale)


class GameMachine:
    """
    Reducer plus the helpers hosts need around it.

    Action handlers are registered in a dict keyed by ActionType; each
    takes (state, action) and returns the next state.
    """

    def __init__(
        self,
        runtime: Runtime | None = None,
        registry: SlotBehaviorRegistry | None = None,
    ):
        self.runtime = runtime or Runtime()
        self.registry = registry if registry is not None else SlotBehaviorRegistry()
        self.utils = SlotBehaviorUtils(self.runtime)

        self._handlers: dict[ActionType, Callable] = {
            ActionType.MOVE_CARD_TO_SLOT: self._move_card_to_slot,
            ActionType.RECALL_CARD: self._recall_card,
            ActionType.ACTIVATE_SLOT: self._activate,
            ActionType.UPGRADE_SLOT: self._upgrade_slot,
            ActionType.ADVANCE_TIME: self._advance_time,
            ActionType.RESOLVE_PENDING_SLOT_ACTIONS: self._resolve_pending,
            ActionType.SET_TIME_SCALE: self._set_time_scale,
            ActionType.ACKNOWLEDGE_CARD_REVEAL: self._acknowledge_card_reveal,
        }

    # -------------------------------------------------------------------------
    # Public helpers
    # -------------------------------------------------------------------------

    def now(self) -> int:
        return self.runtime.now()

    def initial_state(self, persona_key: str | None = None) -> GameState:
        """
        Fresh game: the hero and a Fading Whisper in hand, only the manor
        on the map. Raises ContentError for an unknown persona key.
        """
        hero = instantiate_card(get_persona_template(persona_key), self.runtime)
        whisper = instantiate_card(OPPORTUNITY_TEMPLATES[0], self.runtime, existing={hero.id})
        manor = instantiate_slot(SLOT_TEMPLATES["manor"])

        return GameState(
            cycle=1,
            hero_card_id=hero.id,
            cards={hero.id: hero, whisper.id: whisper},
            hand=[hero.id, whisper.id],
            slots={manor.id: manor},
            resources=starting_resources(),
            log=build_story_log("arrival"),
            discoveries=[],
            time_scale=1.0,
            paused_at=None,
            pending_reveals=[],
        )

    def reduce(self, state: GameState, action) -> GameState:
        if isinstance(action, dict):
            action = parse_action(action)
        action_type = ActionType(action.type)
        logger.debug(f"Reducing {action_type.value}")
        return self._handlers[action_type](state, action)

    def resolve_pending_actions(self, state: GameState) -> GameState:
        return resolve_pending_slot_actions(state, state.effective_now(self.now()))

    @staticmethod
    def upgrade_cost(slot: Slot) -> int:
        return slot.upgrade_cost + (slot.level - 1) * 2

    def base_lock_duration(self, slot: Slot, state: GameState | None = None) -> int:
        behavior = self.registry.get_behavior(slot.type)
        if behavior is not None and state is not None:
            context = SlotActivationContext(state, slot, state.log)
            override = behavior.lock_duration_ms(context, self.utils)
            if override is not None:
                return int(override)
        return base_lock_duration_ms(slot.type)

    def scaled_lock_duration(self, slot: Slot, time_scale: float,
                             state: GameState | None = None) -> int:
        base = self.base_lock_duration(slot, state)
        scale = max(time_scale, MIN_TIME_SCALE)
        return max(MIN_LOCK_MS, round_half_up(base / scale))

    def is_card_allowed(self, state: GameState, card, slot: Slot) -> bool:
        behavior = self.registry.get_behavior(slot.type)
        if behavior is not None:
            context = SlotActivationContext(state, slot, state.log)
            if not behavior.accepts_card(card, context, self.utils):
                return False
        if slot.accepted == SlotAcceptance.PERSONA_ONLY:
            return card.type == CardArchetype.PERSONA
        if slot.accepted == SlotAcceptance.NON_PERSONA:
            return card.type != CardArchetype.PERSONA
        return True

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    @staticmethod
    def _say(state: GameState, message: str) -> GameState:
        return state.model_copy(update={"log": append_log(state.log, message)})

    def _move_card_to_slot(self, state: GameState, action: MoveCardToSlot) -> GameState:
        card = state.cards.get(action.card_id)
        slot = state.slots.get(action.slot_id)
        if card is None or slot is None or not slot.unlocked or card.location.area == "lost":
            return self._say(state, "That move is not possible right now.")

        if not self.is_card_allowed(state, card, slot):
            return self._say(state, f"{card.name} is not suited for {slot.name}.")

        if card.slot_id == slot.id:
            return state

        now = state.effective_now(self.now())
        origin = state.slots.get(card.slot_id) if card.slot_id else None
        if origin is not None and origin.is_locked(now):
            return self._say(
                state,
                f"{card.name} is still committed to {origin.name}. "
                "Wait for the action to resolve before moving them.",
            )
        if slot.is_locked(now):
            return self._say(
                state,
                f"{slot.name} is still resolving a previous action. "
                f"≈ {format_duration_label(slot.locked_until - now)} remain.",
            )

        working = detach_card(state, card.id)

        behavior = self.registry.get_behavior(slot.type)
        if behavior is not None:
            target = working.slots[slot.id]
            occupant, assistant, attachments = slot_cards(working, target)
            context = SlotCardPlacementContext(
                state=working,
                slot=target,
                card=working.cards[card.id],
                occupant=occupant,
                assistant=assistant,
                attachments=attachments,
                log=working.log,
            )
            placed = behavior.on_card_placed(context, self.utils)
            if placed is not None:
                working = placed.state.model_copy(update={"log": placed.log})
                if placed.handled:
                    return working

        working = seat_card(working, card.id, slot.id)
        return self._say(working, f"{card.name} settles into {slot.name}.")

    def _recall_card(self, state: GameState, action: RecallCard) -> GameState:
        card = state.cards.get(action.card_id)
        if card is None or card.location.area == "lost":
            return self._say(state, "That card cannot be recalled right now.")

        slot = state.slots.get(card.slot_id) if card.slot_id else None
        if slot is not None and slot.is_locked(state.effective_now(self.now())):
            return self._say(
                state,
                f"{card.name} is still committed to {slot.name}. "
                "Wait for the action to resolve before recalling them.",
            )

        working = state
        if slot is not None:
            released = release_from_slot(slot, card.id)
            working = state.model_copy(update={"slots": {**state.slots, slot.id: released}})
        working = return_to_hand(working, card.id)
        return self._say(working, f"{card.name} returns to your hand.")

    def activate_slot(self, state: GameState, slot_id: str) -> SlotActionResult:
        now = state.effective_now(self.now())
        prepared = resolve_pending_slot_actions(state, now)
        slot = prepared.slots.get(slot_id)

        if slot is None or not slot.unlocked:
            return SlotActionResult(prepared, append_log(prepared.log, "That slot is not yet available."), False)

        if slot.is_locked(now):
            remaining = format_duration_label(slot.locked_until - now)
            message = f"{slot.name} is still resolving a previous action. ≈ {remaining} remain."
            return SlotActionResult(prepared, append_log(prepared.log, message), False)

        behavior = self.registry.get_behavior(slot.type)
        if behavior is None:
            logger.error(f"No behavior registered for slot type {slot.type.value} ({slot.id})")
            message = f"No behavior is registered for slot type {slot.type.value}."
            return SlotActionResult(prepared, append_log(prepared.log, message), False)

        result = behavior.activate(SlotActivationContext(prepared, slot, prepared.log), self.utils)
        if not result.performed:
            return result

        refreshed = result.state.slots.get(slot_id)
        if refreshed is None:
            return result

        work = float(self.base_lock_duration(refreshed, result.state))
        duration = self.scaled_lock_duration(refreshed, result.state.time_scale, result.state)
        locked = refreshed.model_copy(update={
            "locked_until": now + duration,
            "lock_duration_ms": duration,
            "lock_work_ms": work,
            "lock_work_total_ms": work,
            "lock_rebased_at": now,
        })
        logger.debug(f"Locked {slot_id} for {duration}ms")
        return SlotActionResult(
            result.state.model_copy(update={"slots": {**result.state.slots, slot_id: locked}}),
            append_log(result.log, f"{locked.name} will be ready again in about {format_duration_label(duration)}."),
            True,
        )

    def _activate(self, state: GameState, action: ActivateSlot) -> GameState:
        result = self.activate_slot(state, action.slot_id)
        return result.state.model_copy(update={"log": result.log})

    def _upgrade_slot(self, state: GameState, action: UpgradeSlot) -> GameState:
        slot = state.slots.get(action.slot_id)
        if slot is None:
            return self._say(state, "That slot is not yet available.")

        cost = self.upgrade_cost(slot)
        if state.resources.glimmer < cost:
            return self._say(state, f"You need {cost} glimmer to upgrade {slot.name}.")

        upgraded = slot.model_copy(update={"level": slot.level + 1})
        return state.model_copy(update={
            "slots": {**state.slots, slot.id: upgraded},
            "resources": apply_resources(state.resources, {"glimmer": -cost}),
            "log": append_log(state.log, f"{slot.name} is enhanced to level {upgraded.level}."),
        })

    def _advance_time(self, state: GameState, action=None) -> GameState:
        now = state.effective_now(self.now())
        cards = dict(state.cards)
        slots = dict(state.slots)
        hand = list(state.hand)
        reveals = list(state.pending_reveals)
        log = append_log(state.log, "The candle gutters as time presses onward.")

        # Card lifetimes
        for card in state.cards.values():
            if card.permanent or card.location.area == "lost":
                continue
            remaining = (card.remaining_turns or 0) - 1
            if remaining > 0:
                cards[card.id] = card.model_copy(update={"remaining_turns": remaining})
                continue

            if card.location.area == "hand":
                hand = remove_from_hand(hand, card.id)
            elif card.slot_id in slots:
                slots[card.slot_id] = release_from_slot(slots[card.slot_id], card.id)
            del cards[card.id]
            reveals = [rid for rid in reveals if rid != card.id]
            log = append_log(log, f"{card.name} fades before it can be used.")

        # Repairs
        for slot in list(slots.values()):
            if slot.state != SlotState.DAMAGED or slot.repair is None or not slot.repair_started:
                continue
            occupant = cards.get(slot.occupant_id) if slot.occupant_id else None
            if occupant is None or occupant.type != CardArchetype.PERSONA:
                continue

            remaining = slot.repair.remaining - 1
            if remaining > 0:
                slots[slot.id] = slot.model_copy(update={
                    "repair": slot.repair.model_copy(update={"remaining": remaining}),
                })
                log = append_log(
                    log,
                    f"{occupant.name} makes progress restoring {slot.name}. "
                    f"≈ {format_duration_label(remaining * SLOT_LOCK_BASE_MS)} remain.",
                )
                continue

            target = get_slot_template(slot.repair.target_key)
            restored = instantiate_slot(target, slot.id).model_copy(update={
                "occupant_id": slot.occupant_id,
                "assistant_id": None,
            })
            slots[slot.id] = restored
            message = f"{occupant.name} restores {restored.name}, ready for use."

            if target.type == SlotType.STUDY:
                journal = self.utils.create_card(journal_template([]), HandLocation(), existing=cards)
                cards[journal.id] = journal
                hand = add_to_hand(hand, journal.id)
                reveals.append(journal.id)
                message = f"{occupant.name} restores {restored.name}, uncovering {journal.name}."

            logger.info(f"Slot {slot.id} restored as {target.key}")
            log = append_log(log, message)

        next_state = state.model_copy(update={
            "cycle": state.cycle + 1,
            "cards": cards,
            "slots": slots,
            "hand": hand,
            "log": log,
            "pending_reveals": reveals,
        })
        next_state = resolve_pending_slot_actions(next_state, now)

        if self.runtime.random() < OPPORTUNITY_CHANCE_PER_CYCLE:
            next_state, spawned_log = spawn_opportunity(next_state, next_state.log, self.runtime)
            next_state = next_state.model_copy(update={"log": spawned_log})
        return next_state

    def _resolve_pending(self, state: GameState, action=None) -> GameState:
        return self.resolve_pending_actions(state)

    def _set_time_scale(self, state: GameState, action: SetTimeScale) -> GameState:
        """
        Pause on scale <= 0; otherwise re-base every outstanding lock.

        Each lock carries its unscaled work left as of its last re-base.
        Work done since then (up to paused_at when resuming, or now while
        running) is subtracted at the old scale, and only the new deadline
        is rounded. Repeated changes therefore never drift.
        """
        now = self.now()
        if action.scale <= 0:
            if state.is_paused:
                return state
            logger.debug(f"Paused at {now}")
            return state.model_copy(update={"paused_at": now})

        new_scale = max(MIN_TIME_SCALE, action.scale)
        old_scale = state.time_scale
        if not state.is_paused and new_scale == old_scale:
            return state

        reference = state.paused_at if state.is_paused else now
        slots = {}
        for slot_id, slot in state.slots.items():
            if slot.locked_until is None or slot.locked_until <= reference:
                slots[slot_id] = slot
                continue
            work = _work_left(slot, reference, old_scale)
            total = slot.lock_work_total_ms
            if total is None and slot.lock_duration_ms is not None:
                total = slot.lock_duration_ms * old_scale
            update = {
                "locked_until": now + round_half_up(work / new_scale),
                "lock_work_ms": work,
                "lock_work_total_ms": total,
                "lock_rebased_at": now,
            }
            if total is not None:
                update["lock_duration_ms"] = max(MIN_LOCK_MS, round_half_up(total / new_scale))
            slots[slot_id] = slot.model_copy(update=update)

        return state.model_copy(update={
            "time_scale": new_scale,
            "paused_at": None,
            "slots": slots,
        })

    def _acknowledge_card_reveal(self, state: GameState, action: AcknowledgeCardReveal) -> GameState:
        if action.card_id not in state.pending_reveals:
            return state
        reveals = list(state.pending_reveals)
        reveals.remove(action.card_id)
        return state.model_copy(update={"pending_reveals": reveals})
