from .nim_rules import (
    apply_action,
    generate_initial_state,
    is_legal,
    is_terminal,
    nim_sum,
    random_action,
    valid_actions,
)

__all__ = [
    "apply_action",
    "generate_initial_state",
    "is_legal",
    "is_terminal",
    "nim_sum",
    "random_action",
    "valid_actions",
]
