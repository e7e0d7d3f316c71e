from core.errors import (
    AlreadyPurchasedError,
    InsufficientResourceError,
    LevelLockedError,
    ValidationError,
)
from core.models import HunterProfile, Item, ItemType


# -------------------------------
# 🧾 Validation of new items
# -------------------------------
def validate_item_fields(item_type: str, price: int, required_level: int) -> ItemType:
    try:
        kind = ItemType(str(item_type).lower())
    except ValueError:
        raise ValidationError(f"Unknown item type: {item_type!r} (expected 'shop' or 'reward')") from None

    if price is None or price < 0:
        raise ValidationError(f"Price cannot be negative: {price}")

    if required_level is None or required_level < 1:
        raise ValidationError(f"Required level must be at least 1: {required_level}")

    return kind


# -------------------------------
# 💰 Shop: gold, one-time
# -------------------------------
def check_shop_purchase(profile: HunterProfile, item: Item) -> int:
    """
    Validate a shop purchase against the given (locked) profile.

    Returns the new gold_spent value.
    """
    if item.item_type != ItemType.SHOP.value:
        raise ValidationError(f"Item {item.id} is not a shop item")

    if item.price < 0:
        raise ValidationError(f"Item {item.id} has a negative price")

    if item.purchased:
        raise AlreadyPurchasedError(item.id)

    if profile.spendable_gold < item.price:
        raise InsufficientResourceError("gold", item.price, profile.spendable_gold)

    if profile.level < item.required_level:
        raise LevelLockedError(item.required_level, profile.level)

    return profile.gold_spent + item.price


# -------------------------------
# ❤️ Rewards: HP, repeatable
# -------------------------------
def check_reward_redeem(profile: HunterProfile, item: Item) -> int:
    """
    Validate a reward redemption against the given (locked) profile.

    Returns the new HP value.
    """
    if item.item_type != ItemType.REWARD.value:
        raise ValidationError(f"Item {item.id} is not a reward item")

    if item.price < 0:
        raise ValidationError(f"Item {item.id} has a negative price")

    if profile.hp < item.price:
        raise InsufficientResourceError("HP", item.price, profile.hp)

    if profile.level < item.required_level:
        raise LevelLockedError(item.required_level, profile.level)

    return max(0, profile.hp - item.price)
