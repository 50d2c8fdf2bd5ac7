#!/usr/bin/env python3
"""
Segmented n-th prime sieve on an accelerator with PyTorch (CUDA / Apple MPS).

Each segment's mask is built on the device; only the finished bool mask is
copied back to the host, where prime_numpy's scanner and orchestrator take over.

Examples:
  python prime_torch.py 1000000
  python prime_torch.py 1000000 --segment-size 5000000 --cpu
"""

import argparse

import torch

from prime_numpy import (
    MAX_SEGMENT_SIZE,
    BoundExceededError,
    estimate_upper_bound,
    nth_prime,
)


def pick_device(prefer_gpu: bool = True, name: str | None = None) -> torch.device:
    if name is not None:
        return torch.device(name)
    if prefer_gpu and torch.cuda.is_available():
        return torch.device("cuda")
    if prefer_gpu and torch.backends.mps.is_available():
        return torch.device("mps")
    return torch.device("cpu")


def sieve_segment_torch(offset: int, length: int, device: torch.device) -> torch.Tensor:
    """Device-side twin of prime_numpy.sieve_segment; returns a torch.bool mask."""
    mask = torch.ones(length, dtype=torch.bool, device=device)
    high = offset + length  # exclusive

    if offset == 0:
        mask[:2] = False
    elif offset == 1:
        mask[0] = False

    # Divisors that fall inside the segment are checked against the mask,
    # so keep one host copy of that window instead of a sync per divisor.
    p = 2
    host = None
    while p * p < high:
        if p >= offset:
            if host is None:
                host = mask.to("cpu")
            if not host[p - offset]:
                p += 1
                continue
        start = max(p * p, ((offset + p - 1) // p) * p)
        if start < high:
            mask[start - offset::p] = False  # strided stores on device
            if host is not None:
                host[start - offset::p] = False
        p += 1

    return mask


def make_torch_sieve(device: torch.device):
    """Adapt sieve_segment_torch to the (offset, length) -> np.ndarray sieve hook."""
    def sieve(offset, length):
        return sieve_segment_torch(offset, length, device).to("cpu").numpy()
    return sieve


def nth_prime_torch(n: int, *, segment_size: int = MAX_SEGMENT_SIZE, device: torch.device | None = None) -> int:
    if device is None:
        device = pick_device()
    return nth_prime(n, segment_size=segment_size, sieve=make_torch_sieve(device))


def main(argv=None):
    ap = argparse.ArgumentParser(description="n-th prime via a segmented sieve with PyTorch.")
    ap.add_argument("n", type=int, help="Zero-based rank of the prime (0 -> 2).")
    ap.add_argument("--segment-size", type=int, default=MAX_SEGMENT_SIZE,
                    help=f"Integers per segment (default: {MAX_SEGMENT_SIZE:,}).")
    g = ap.add_mutually_exclusive_group()
    g.add_argument("--cpu", action="store_true", help="Force CPU even if a GPU is available.")
    g.add_argument("--device", help="Explicit torch device, e.g. cuda:1.")
    args = ap.parse_args(argv)

    device = pick_device(prefer_gpu=not args.cpu, name=args.device)
    try:
        result = nth_prime_torch(args.n, segment_size=args.segment_size, device=device)
    except (ValueError, BoundExceededError) as exc:
        ap.error(str(exc))

    upper = estimate_upper_bound(args.n + 1) if args.n > 0 else 2
    print(f"Device: {device.type.upper()} | Mode: n-th prime | n: {args.n:,} | "
          f"Upper bound: {upper:,} | Segment size: {args.segment_size:,}")
    print(f"Result: {result:,}")
    return 0


if __name__ == "__main__":
    main()
