import threading
from typing import Dict, Tuple

PHRASES: Tuple[str, ...] = ("SubhanAllah", "Alhamdulillah", "Allahu Akbar", "La ilaha illallah")


class TasbihCounter:
    """Counts one phrase up to target, then starts the next phrase at 1."""

    def __init__(self, target: int = 33, phrases: Tuple[str, ...] = PHRASES):
        if target <= 0:
            raise ValueError("target must be positive")
        self.target = target
        self.phrases = phrases
        self.phrase_index = 0
        self.count = 0
        self.total = 0

    @property
    def phrase(self) -> str:
        return self.phrases[self.phrase_index]

    def increment(self) -> int:
        if self.count < self.target:
            self.count += 1
        else:
            self.count = 1
            self.phrase_index = (self.phrase_index + 1) % len(self.phrases)
        self.total += 1
        return self.count

    def reset(self) -> None:
        self.count = 0

    def set_target(self, target: int) -> None:
        if target <= 0:
            raise ValueError("target must be positive")
        self.target = target
        self.count = min(self.count, target)

    def to_dict(self) -> Dict[str, object]:
        return {
            "phrase": self.phrase,
            "count": self.count,
            "target": self.target,
            "total": self.total,
        }


class TasbihRegistry:
    """In-memory counters keyed by user id."""

    def __init__(self):
        self._counters: Dict[str, TasbihCounter] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)

    def _get(self, user_id: str) -> TasbihCounter:
        counter = self._counters.get(user_id)
        if counter is None:
            counter = self._counters[user_id] = TasbihCounter()
        return counter

    def snapshot(self, user_id: str) -> Dict[str, object]:
        """Current state; a user who never counted gets a fresh counter's state without storing one."""
        with self._lock:
            counter = self._counters.get(user_id)
            return (counter or TasbihCounter()).to_dict()

    def increment(self, user_id: str) -> Dict[str, object]:
        with self._lock:
            counter = self._get(user_id)
            counter.increment()
            return counter.to_dict()

    def reset(self, user_id: str) -> Dict[str, object]:
        with self._lock:
            counter = self._counters.get(user_id)
            if counter is None:
                return TasbihCounter().to_dict()
            counter.reset()
            return counter.to_dict()

    def set_target(self, user_id: str, target: int) -> Dict[str, object]:
        with self._lock:
            counter = self._get(user_id)
            counter.set_target(target)
            return counter.to_dict()
