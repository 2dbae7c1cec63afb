"""
Global History Register

Shift register of the most recent branch outcomes, folded into gshare
table indices.
"""


class GlobalHistoryRegister:
    """
    Global Branch History Register.

    Holds the last `length` outcomes as an unsigned integer. The newest
    outcome enters at bit length-1 and older outcomes move towards bit 0.
    A zero-length register always reads 0.
    """

    def __init__(self, length: int):
        """
        Initialize the history register.

        Args:
            length: Number of branch outcomes to track (N)
        """
        self.length = length
        self.mask = (1 << length) - 1
        self._history = 0

    def update(self, taken: bool) -> None:
        """
        Shift in a new branch outcome.

        Args:
            taken: Branch outcome (True = taken)
        """
        if self.length == 0:
            return

        history = self._history >> 1
        if taken:
            history |= 1 << (self.length - 1)
        self._history = history & self.mask

    @property
    def value(self) -> int:
        """Current history, masked to `length` bits."""
        return self._history & self.mask

    def reset(self) -> None:
        """Reset history to all not-taken."""
        self._history = 0

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        if self.length == 0:
            return "GHR(0)"
        return f"GHR({self.length}): {self.value:0{self.length}b}"
