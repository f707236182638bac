from roster.errors import RosterTooLargeError, RosterTooSmallError, ValidationError
from roster.models import Category

MAX_ROSTER_SIZE: dict[Category, int] = {
    Category.MEN: 12,
    Category.WOMEN: 13,
}

# Players an administrator may attach to a team one by one. Kept apart from
# the registration caps above.
ADMIN_PLAYER_CAP = 6

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100


def max_roster_size(category: Category) -> int:
    return MAX_ROSTER_SIZE[Category(category)]


def validate_roster_size(category: Category, proposed_count: int) -> None:
    if proposed_count < 1:
        raise RosterTooSmallError(proposed_count)
    limit = max_roster_size(category)
    if proposed_count > limit:
        raise RosterTooLargeError(proposed_count, limit)


def check_admin_capacity(current_count: int) -> None:
    if current_count >= ADMIN_PLAYER_CAP:
        raise RosterTooLargeError(current_count + 1, ADMIN_PLAYER_CAP)


def validate_text_field(
    value: str | None,
    field: str,
    min_length: int = NAME_MIN_LENGTH,
    max_length: int = NAME_MAX_LENGTH,
) -> str:
    """Trim ``value`` and check its length, returning the trimmed text."""
    cleaned = (value or "").strip()
    if len(cleaned) < min_length:
        raise ValidationError(field, f"must have at least {min_length} characters")
    if len(cleaned) > max_length:
        raise ValidationError(field, f"must have at most {max_length} characters")
    return cleaned


def validate_player_name(value: str | None) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError("player_name", "must not be blank")
    return cleaned
