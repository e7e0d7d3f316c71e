# core/errors.py

# -------------------------------
# ❗ Engine failures
# -------------------------------
# Every refused transition raises one of these. `kind` is stable and
# meant for callers, `message` is meant for humans.


class EngineError(Exception):
    kind = "engine"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    def __str__(self):
        return self.message


class ValidationError(EngineError):
    kind = "validation"


class InvalidDifficulty(ValidationError):
    kind = "invalid_difficulty"

    def __init__(self, rank):
        super().__init__(f"Unknown difficulty rank: {rank!r} (expected one of S, A, B, C, D)")
        self.rank = rank


class NotFoundError(EngineError):
    kind = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientResourceError(EngineError):
    kind = "insufficient_resource"

    def __init__(self, resource: str, required, available):
        super().__init__(
            f"Not enough {resource}: need {required}, have {available}"
            f" ({required - available} more {resource} needed)"
        )
        self.resource = resource
        self.required = required
        self.available = available


class LevelLockedError(InsufficientResourceError):
    kind = "level_locked"

    def __init__(self, required_level: int, level: int):
        EngineError.__init__(self, f"Reach level {required_level} to unlock this (current level {level})")
        self.resource = "level"
        self.required = required_level
        self.available = level


class AlreadyCompletedError(EngineError):
    kind = "already_completed"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} is already completed")
        self.entity = entity
        self.entity_id = entity_id


class AlreadyPurchasedError(EngineError):
    kind = "already_purchased"

    def __init__(self, item_id):
        super().__init__(f"Shop item {item_id} has already been purchased")
        self.item_id = item_id


class AlreadyEarnedError(EngineError):
    kind = "already_earned"

    def __init__(self, badge_id):
        super().__init__(f"Badge {badge_id} is already earned")
        self.badge_id = badge_id


class PenaltyNotApplicable(EngineError):
    kind = "penalty_not_applicable"

    def __init__(self, quest_type: str):
        super().__init__(f"Penalties apply to daily/weekly quests only (quest type: {quest_type})")
        self.quest_type = quest_type


class ConflictError(EngineError):
    kind = "conflict"


class StorageError(EngineError):
    kind = "storage"
