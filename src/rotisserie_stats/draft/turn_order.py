"""Snake-draft turn order, including the late-draft double-pick regime."""

from __future__ import annotations

# Round after which each seat takes two picks in a row
DEFAULT_DOUBLE_PICK_STARTS_AFTER_ROUND = 25

# How many rounds ahead picks_until_next_turn looks before giving up
LOOKAHEAD_ROUNDS = 4


def get_drafter_for_pick(
    pick_number: int,
    num_drafters: int,
    double_pick_starts_after_round: int = DEFAULT_DOUBLE_PICK_STARTS_AFTER_ROUND,
) -> int:
    """Return the 0-indexed seat that owns a 1-indexed pick.

    Standard rounds alternate direction: round 1 runs 0 -> N-1, round 2 runs
    N-1 -> 0, and so on. Once ``double_pick_starts_after_round`` rounds are done,
    every round holds ``2 * N`` picks and each seat picks twice in a row. The
    first double-pick round runs in reverse, which continues the alternation
    when the last standard round was forward (true for the default of 25).

    Args:
        pick_number: Absolute pick number (1-indexed)
        num_drafters: Number of seats at the table
        double_pick_starts_after_round: Last round of single picks

    Returns:
        Seat index in ``range(num_drafters)``
    """
    double_pick_start = double_pick_starts_after_round * num_drafters + 1

    if pick_number < double_pick_start:
        zero_indexed = pick_number - 1
        round_index = zero_indexed // num_drafters
        position = zero_indexed % num_drafters
        return position if round_index % 2 == 0 else num_drafters - 1 - position

    picks_per_double_round = num_drafters * 2
    pick_in_phase = pick_number - double_pick_start
    double_round = pick_in_phase // picks_per_double_round
    position_in_round = pick_in_phase % picks_per_double_round
    seat_position = position_in_round // 2

    is_forward = double_round % 2 == 1
    return seat_position if is_forward else num_drafters - 1 - seat_position


def picks_until_next_turn(
    current_pick_number: int,
    seat: int,
    num_drafters: int,
    double_pick_starts_after_round: int = DEFAULT_DOUBLE_PICK_STARTS_AFTER_ROUND,
) -> int:
    """Count picks after ``current_pick_number`` until ``seat`` picks again.

    Scans at most ``LOOKAHEAD_ROUNDS`` rounds ahead and returns 0 if the seat
    never comes up, which only happens for a seat index outside the table.
    """
    for offset in range(1, num_drafters * LOOKAHEAD_ROUNDS + 1):
        drafter = get_drafter_for_pick(
            current_pick_number + offset, num_drafters, double_pick_starts_after_round
        )
        if drafter == seat:
            return offset
    return 0
