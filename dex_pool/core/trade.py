"""Swap direction."""

from enum import Enum


class SwapDirection(Enum):
    """Direction of a swap from the caller's perspective."""
    X_TO_Y = "x_to_y"  # Caller pays X, receives Y
    Y_TO_X = "y_to_x"  # Caller pays Y, receives X

