"""
Deterministic seed derivation for the biome grid.

Nothing here touches Python's ``random`` or NumPy's global state: every seed
is a pure function of world seed and coordinates, and every stream is an
AleaPRNG, so a world regenerates identically after a restart.
"""

from ..core.alea_prng import AleaPRNG

_INT64_MASK = 0xFFFFFFFFFFFFFFFF


def _to_int64(value: int) -> int:
    """Wrap an arbitrary integer to a signed 64-bit value."""
    value &= _INT64_MASK
    if value >= 1 << 63:
        value -= 1 << 64
    return value


def pair_coordinates(x: int, z: int) -> int:
    """
    Signed Cantor pairing of two integer coordinates.

    Negative values are folded onto the odd naturals first
    (``n >= 0 -> 2n``, ``n < 0 -> -2n - 1``) so the mapping stays injective
    over the whole integer plane.
    """
    a = 2 * x if x >= 0 else -2 * x - 1
    b = 2 * z if z >= 0 else -2 * z - 1
    return (a + b) * (a + b + 1) // 2 + b


def cell_seed(seed: int, cell_x: int, cell_z: int, axis: int) -> int:
    """Seed for one blob cell and axis, mixed with 64-bit wraparound."""
    mixed = _to_int64(seed)
    mixed = _to_int64(mixed * 31 + cell_x)
    mixed = _to_int64(mixed * 31 + cell_z)
    mixed = _to_int64(mixed * 31 + axis)
    return mixed


def coordinate_prng(x: int, z: int) -> AleaPRNG:
    """PRNG for a single coordinate's selection draw."""
    return AleaPRNG(pair_coordinates(x, z))


def derive_seeds(seed, count: int):
    """
    Derive ``count`` independent 31-bit seeds from a world seed.

    Used to give each noise field its own permutation table.
    """
    prng = AleaPRNG(seed)
    return [int(prng.random() * 0x7FFFFFFF) for _ in range(count)]
