"""Store-wide lock for updates that span several stores"""

import threading
from contextlib import contextmanager

_store_lock = threading.RLock()


@contextmanager
def transaction():
    """
    Hold the store lock for the duration of the block.

    Checkout re-validates the coupon, redeems it, takes stock and writes
    the order inside one block so concurrent checkouts cannot oversell.
    """
    with _store_lock:
        yield
