"""Availability zone lookup and shuffling."""

import random
from typing import Optional, Sequence

import pulumi
import pulumi_aws as aws


def shuffle_zones(zones: Sequence[str], seed: Optional[str] = None) -> list[str]:
    """Return the zones in shuffled order.

    With a seed (normally the stack name) the order is the same on every
    run, so subnets do not move between zones on later updates. Without
    a seed the zones are returned in their given order.
    """
    shuffled = list(zones)
    if seed is not None:
        random.Random(seed).shuffle(shuffled)
    return shuffled


def lookup_availability_zones(provider: Optional[aws.Provider] = None) -> list[str]:
    """List the available zones of the provider's region, sorted by name."""
    result = aws.get_availability_zones(
        state="available",
        opts=pulumi.InvokeOptions(provider=provider),
    )
    return sorted(result.names)
