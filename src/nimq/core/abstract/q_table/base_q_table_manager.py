import json
from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional, Sequence

from pydantic import ValidationError

from nimq.core.entities.nim import NimAction, State
from nimq.core.entities.q_table import QTableDocument
from nimq.core.exceptions import QTableFormatError
from nimq.utils.codec import action_to_key, key_to_action, key_to_state, state_to_key
from nimq.core.rules.nim_rules import is_legal, valid_actions


class BaseQTableManager(ABC):

    def __init__(self, alpha: float = 0.1, gamma: float = 0.9):
        self.alpha = alpha
        self.gamma = gamma

        # Internal structure: state -> action -> value
        self.Q_table: Dict[State, Dict[NimAction, float]] = {}

    @abstractmethod
    def update_policy(
        self,
        s: State,
        a: NimAction,
        R: float,
        s_prime: State,
    ) -> float:
        pass

    def get(self, s: Sequence[int], a: NimAction) -> float:
        return self.Q_table.get(tuple(s), {}).get(tuple(a), 0.0)

    def set(self, s: Sequence[int], a: NimAction, value: float) -> None:
        self.Q_table.setdefault(tuple(s), {})[NimAction(*a)] = float(value)

    def has_state(self, s: Sequence[int]) -> bool:
        return bool(self.Q_table.get(tuple(s)))

    def state_values(self, s: Sequence[int]) -> Dict[NimAction, float]:
        return dict(self.Q_table.get(tuple(s), {}))

    def max_value(self, s: Sequence[int]) -> float:
        """
        Best value over the legal moves of ``s``.

        Only moves legal in ``s`` are considered; unrecorded moves count as 0.0,
        and a state with nothing recorded (or no legal moves) is worth 0.0.
        """
        recorded = self.Q_table.get(tuple(s))
        if not recorded:
            return 0.0
        values = [recorded.get(a, 0.0) for a in valid_actions(s)]
        return max(values) if values else 0.0

    def states(self) -> Iterator[State]:
        return iter(self.Q_table)

    def __len__(self) -> int:
        return sum(len(actions) for actions in self.Q_table.values())

    def is_empty(self) -> bool:
        return len(self) == 0

    def to_document(self) -> QTableDocument:
        # Flatten into: { state_key: { action_key: value } }
        flat_q_table: Dict[str, Dict[str, float]] = {}
        for state, actions in self.Q_table.items():
            if not actions:
                continue
            flat_q_table[state_to_key(state)] = {
                action_to_key(action): value for action, value in actions.items()
            }
        return QTableDocument(flat_q_table)

    def serialize(self, indent: Optional[int] = None) -> str:
        separators = None if indent is not None else (",", ":")
        return json.dumps(self.to_document().root, indent=indent, separators=separators)

    @classmethod
    def from_document(cls, document: QTableDocument, **kwargs) -> "BaseQTableManager":
        manager = cls(**kwargs)
        for state_key, actions in document.root.items():
            state = key_to_state(state_key)
            for action_key, value in actions.items():
                action = key_to_action(action_key)
                if not is_legal(state, action):
                    raise QTableFormatError(
                        f"Action {action_key!r} is not legal for state {state_key!r}"
                    )
                manager.set(state, action, value)
        return manager

    @classmethod
    def deserialize(cls, payload, **kwargs) -> "BaseQTableManager":
        """
        Rebuild a table from its portable JSON form.

        Raises:
            QTableFormatError: If the payload is not a valid nested mapping
        """
        try:
            document = QTableDocument.model_validate_json(payload)
        except ValidationError as e:
            raise QTableFormatError(f"Malformed Q-table payload: {e}") from e
        return cls.from_document(document, **kwargs)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(alpha={self.alpha}, gamma={self.gamma}, "
            f"states={len(self.Q_table)}, entries={len(self)})"
        )
