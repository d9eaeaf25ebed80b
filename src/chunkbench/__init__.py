"""chunkbench: chunked TCP throughput measurement.

One sender streams a fixed number of fixed-size chunks over a single TCP
connection; the receiver times each chunk and derives:
- effective data rate
- bandwidth-delay product (from an assumed RTT)
- theoretical window-limited throughput (from an assumed window)

Timing derivation and smoothing are pure functions in ``metrics`` so they can
be tested without sockets.
"""

__all__ = []
