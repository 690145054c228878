"""Detection of newly arrived orders between two feed snapshots."""


def has_new_orders(previous_ids, current_ids) -> bool:
    """True when an order appeared that the previous snapshot did not hold.

    An empty previous set never counts: that is the initial load, and
    existing orders must not raise an alert.
    """
    previous_ids = set(previous_ids)
    if not previous_ids:
        return False
    return bool(set(current_ids) - previous_ids)


def snapshot_ids(snapshot) -> set[str]:
    return {order["id"] for order in snapshot}
