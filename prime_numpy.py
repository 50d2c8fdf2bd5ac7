#!/usr/bin/env python3
"""
Segmented Sieve of Eratosthenes for the n-th prime (NumPy).

The search range [0, upper] is estimated once from the prime number theorem,
then sieved in fixed-size segments so peak memory is one segment, never the
whole range.

Examples:
  python prime_numpy.py 0          # 2
  python prime_numpy.py 10000      # 104743
  python prime_numpy.py 1000000 --segment-size 200000
"""

import argparse
import math
import numbers

import numpy as np

# Chunk size for one segment (number of integers, not odds)
MAX_SEGMENT_SIZE = 1_000_000


class BoundExceededError(RuntimeError):
    """The estimated upper limit ran out before the n-th prime was reached."""

    def __init__(self, n: int, upper_limit: int):
        super().__init__(f"{n}th prime not found within calculated upper limit {upper_limit:,}")
        self.n = n
        self.upper_limit = upper_limit


def estimate_upper_bound(n: int) -> int:
    # https://en.wikipedia.org/wiki/Prime_number_theorem#Approximations_for_the_nth_prime_number
    if n < 6:
        return 11  # fifth prime
    nf = float(n)
    return int(math.ceil(nf * (math.log(nf) + math.log(math.log(nf)))))


def sieve_segment(offset: int, length: int) -> np.ndarray:
    """
    Mark primality for every integer in [offset, offset + length).

    Index i of the returned bool array stands for the integer offset + i.
    Divisors run over 2..sqrt(offset + length); a divisor that lies inside
    the segment and is already struck off is skipped.
    """
    is_prime = np.ones(length, dtype=bool)
    high = offset + length  # exclusive

    if offset == 0:
        is_prime[:2] = False
    elif offset == 1:
        is_prime[0] = False

    i = 2
    while i * i < high:
        if i >= offset and not is_prime[i - offset]:
            i += 1
            continue
        # first multiple of i at or above both i^2 and the segment start
        start = max(i * i, ((offset + i - 1) // i) * i)
        if start < high:
            is_prime[start - offset::i] = False  # vectorized strided clear
        i += 1

    return is_prime


def find_target_in_segment(segment: np.ndarray, target_index: int, offset: int):
    """Return offset + index of the target_index-th (0-based) prime in segment, or None."""
    idx = np.flatnonzero(segment)
    if target_index < idx.size:
        return offset + int(idx[target_index])
    return None


def segment_prime_count(segment: np.ndarray) -> int:
    return int(np.count_nonzero(segment))


def primes_in_segment(segment: np.ndarray, offset: int) -> np.ndarray:
    return (offset + np.flatnonzero(segment)).astype(np.int64)


def nth_prime(n: int, *, segment_size: int = MAX_SEGMENT_SIZE, sieve=sieve_segment) -> int:
    """
    Value of the n-th prime, 0-indexed (n=0 -> 2).

    Raises ValueError for a negative or non-integral n, and
    BoundExceededError when the estimated bound is exhausted.
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise ValueError(f"n must be a non-negative integer, got {n!r}")
    if n < 0:
        raise ValueError("n must be non-negative")
    if isinstance(segment_size, bool) or not isinstance(segment_size, numbers.Integral) or segment_size < 1:
        raise ValueError(f"segment_size must be a positive integer, got {segment_size!r}")
    n = int(n)
    if n == 0:
        return 2

    upper_limit = estimate_upper_bound(n + 1)
    return find_nth_prime(n, upper_limit, segment_size=int(segment_size), sieve=sieve)


def find_nth_prime(n: int, upper_limit: int, *, segment_size: int = MAX_SEGMENT_SIZE,
                   sieve=sieve_segment) -> int:
    """Walk [0, upper_limit] segment by segment until the n-th prime turns up."""
    stop = upper_limit + 1  # the bound itself is searched
    prime_count = 0
    offset = 0

    while offset < stop:
        length = min(stop - offset, segment_size)
        segment = sieve(offset, length)

        result = find_target_in_segment(segment, n - prime_count, offset)
        if result is not None:
            return result

        prime_count += segment_prime_count(segment)
        offset += length

    raise BoundExceededError(n, upper_limit)


def main(argv=None):
    ap = argparse.ArgumentParser(description="n-th prime via a segmented sieve (NumPy).")
    ap.add_argument("n", type=int, help="Zero-based rank of the prime (0 -> 2).")
    ap.add_argument("--segment-size", type=int, default=MAX_SEGMENT_SIZE,
                    help=f"Integers per segment (default: {MAX_SEGMENT_SIZE:,}).")
    args = ap.parse_args(argv)

    try:
        result = nth_prime(args.n, segment_size=args.segment_size)
    except (ValueError, BoundExceededError) as exc:
        ap.error(str(exc))

    upper = estimate_upper_bound(args.n + 1) if args.n > 0 else 2
    print(f"Mode: n-th prime | n: {args.n:,} | Upper bound: {upper:,} | Segment size: {args.segment_size:,}")
    print(f"Result: {result:,}")
    return 0


if __name__ == "__main__":
    main()
