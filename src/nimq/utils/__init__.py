from .codec import action_to_key, key_to_action, key_to_state, state_to_key

__all__ = ["action_to_key", "key_to_action", "key_to_state", "state_to_key"]
