"""Shared test setup."""

import os

# numba reads this once at import; the parallel/serial comparisons need
# more than one worker even on single-core runners
MIN_TEST_THREADS = 4
if int(os.environ.get("NUMBA_NUM_THREADS", "0")) < MIN_TEST_THREADS:
    os.environ["NUMBA_NUM_THREADS"] = str(MIN_TEST_THREADS)
