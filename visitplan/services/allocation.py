"""Even distribution of people across ordered slots (days or months)."""

from __future__ import annotations

from typing import List


def distribute(count: int, slots: int) -> List[int]:
    """
    Spread ``count`` people across ``slots`` as evenly as possible.

    The earliest slots receive the surplus: with base = count // slots, the
    first ``count % slots`` slots get base + 1 and the rest get base.

    Args:
        count: Number of people to place
        slots: Number of available slots

    Returns:
        Per-slot quotas summing to ``count``

    Raises:
        ValueError: If ``slots`` is not positive or ``count`` is negative
    """
    if slots <= 0:
        raise ValueError(f"Cannot distribute over {slots} slots")
    if count < 0:
        raise ValueError(f"Cannot distribute a negative count ({count})")
    base, remainder = divmod(count, slots)
    return [base + 1 if i < remainder else base for i in range(slots)]
