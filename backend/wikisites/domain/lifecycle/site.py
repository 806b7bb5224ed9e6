from typing import Dict

from wikisites.domain.invariants.exceptions import ValidationError, Conflict

# Administrative action -> resulting is_active flag
SITE_ACTIONS: Dict[str, bool] = {
    "suspend": False,
    "activate": True,
}


def assert_site_transition(*, is_active: bool, action: str) -> bool:
    """
    Guards suspend/activate requests.
    Returns the is_active value the site should end up with.
    """
    if action not in SITE_ACTIONS:
        raise ValidationError("Invalid action. Must be suspend or activate")

    target = SITE_ACTIONS[action]
    if target == is_active:
        state = "active" if is_active else "suspended"
        raise Conflict(f"Site is already {state}")

    return target
