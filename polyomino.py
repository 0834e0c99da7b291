"""
Polyomino generation by backtracking over lattice-point nets.

Two-phase algorithm: enumerate (grows nets one cell at a time, pruning shapes
already known up to rotation/reflection) -> materialize (stamps one sampled
net into a Quadrille).
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from grid_types import DEFAULT_FILLER, Empty, EnumerationCancelled, InvalidArgumentError
from quadrille import Quadrille, to_cell

logger = logging.getLogger(__name__)

Point = tuple[int, int]
CanonicalNet = tuple[Point, ...]
NetBucket = dict[int, list[CanonicalNet]]

# Growth directions, tried in this order from every square of a net
DIRECTIONS: tuple[Point, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


class Convergence(Enum):
    """How an enumeration run decides it is finished."""

    EXHAUSTION = "exhaustion"  # Outermost level ran out of moves
    STALL = "stall"  # Elapsed time unchanged across one polling window


@dataclass(frozen=True)
class EnumerationSettings:
    """Settings governing an enumeration run."""

    convergence: Convergence = Convergence.EXHAUSTION
    poll_interval: float = 0.02  # seconds, STALL only
    max_steps: int | None = None  # None = unlimited


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


# =============================================================================
# Canonical Form and Symmetry Search
# =============================================================================


def normalize_net(net: Sequence[Sequence[int]]) -> CanonicalNet:
    """
    Translation-normalize a net.

    Points are sorted by x ascending then y descending, and translated so the
    first point is (0, 0). Two nets are equal up to translation iff their
    normalized forms are equal.
    """
    if not net:
        return ()
    points = sorted(((x, y) for x, y in net), key=lambda p: (p[0], -p[1]))
    ox, oy = points[0]
    return tuple((x - ox, y - oy) for x, y in points)


def dihedral_variants(net: Sequence[Sequence[int]]) -> list[CanonicalNet]:
    """
    Normalized forms of the 8 symmetries of a net.

    Two passes of an axis swap (x, y) -> (y, x), each followed by four
    quarter turns (x, y) -> (-y, x). The first pass yields the four
    reflections, the second the four rotations (ending with the identity).
    """
    points = list(normalize_net(net))
    variants: list[CanonicalNet] = []
    for _ in range(2):
        points = [(y, x) for x, y in points]
        for _ in range(4):
            points = [(-y, x) for x, y in points]
            variants.append(normalize_net(points))
    return variants


def find_equivalent(net: Sequence[Sequence[int]], nets: NetBucket) -> CanonicalNet | None:
    """Return the stored net equivalent to net under rotation/reflection, if any."""
    stored = nets.get(len(net))
    if not stored:
        return None
    for variant in dihedral_variants(net):
        for candidate in stored:
            if variant == candidate:
                return candidate
    return None


# =============================================================================
# Backtracking Enumerator
# =============================================================================


@dataclass
class LevelCursor:
    """
    Resume point of one search level.

    Level l extends the live net from l to l + 1 points by trying every
    direction from every square in turn.
    """

    level: int
    square_index: int = 0
    direction_index: int = -1

    def reset(self) -> None:
        self.square_index = 0
        self.direction_index = -1


@dataclass
class SearchState:
    """All mutable state of a single enumeration run."""

    size: int
    net: list[Point] = field(default_factory=lambda: [(0, 0)])
    nets: NetBucket = field(default_factory=dict)
    children: dict[CanonicalNet, set[CanonicalNet]] = field(default_factory=dict)
    cursors: list[LevelCursor] = field(default_factory=list)
    halted: bool = False
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        if not self.cursors:
            self.cursors = [LevelCursor(level) for level in range(1, self.size)]


def _check_size(size: Any) -> None:
    if not isinstance(size, int) or isinstance(size, bool) or size < 1:
        raise InvalidArgumentError(f"{size!r}-ominoes don't exist: size must be a positive integer")


class Enumerator:
    """
    Enumerates the free polyominoes of one size.

    Each step grows the live net by one square (or backtracks) and files the
    result in the bucket for its size, unless an equivalent net is already
    there. The search is depth first: every newly found shape is extended
    before its siblings are tried.
    """

    def __init__(self, size: int, settings: EnumerationSettings | None = None) -> None:
        _check_size(size)
        self.size = size
        self.settings = settings or EnumerationSettings()
        self.state = SearchState(size)
        self.steps = 0
        self._started: float | None = None

    @property
    def halted(self) -> bool:
        return self.state.halted

    @property
    def children(self) -> dict[CanonicalNet, set[CanonicalNet]]:
        return self.state.children

    def shapes(self, size: int | None = None) -> list[CanonicalNet]:
        return list(self.state.nets.get(self.size if size is None else size, []))

    def _extend(self, cursor: LevelCursor, stop: bool) -> bool:
        """Try to add one square at this cursor's level. Returns True on success."""
        state = self.state
        net = state.net
        level = cursor.level

        if len(net) < level:
            return False
        if len(net) == level:
            cursor.reset()
        # Drop squares left over from abandoned deeper attempts
        del net[level:]

        while True:
            cursor.direction_index += 1
            if cursor.direction_index == len(DIRECTIONS):
                cursor.direction_index = 0
                cursor.square_index += 1
            if cursor.square_index >= level:
                if stop:
                    state.halted = True
                return False

            x, y = net[cursor.square_index]
            dx, dy = DIRECTIONS[cursor.direction_index]
            candidate = (x + dx, y + dy)
            if candidate in net:
                continue

            parent = normalize_net(net)
            net.append(candidate)
            match = find_equivalent(net, state.nets)
            if match is None:
                return True
            # Already reached through another growth order
            state.children.setdefault(match, set()).add(parent)
            net.pop()

    def _advance(self) -> bool:
        # Innermost level first; an outer level only moves once every deeper
        # level is out of moves.
        for cursor in reversed(self.state.cursors):
            if self._extend(cursor, stop=cursor.level == 1):
                return True
        return False

    def step(self) -> None:
        """Advance the search by one net and record the result."""
        state = self.state
        if state.halted:
            return
        if self._started is None:
            self._started = time.monotonic()

        if state.cursors:
            self._advance()
        else:
            # A monomino cannot be grown
            state.halted = True
        self.steps += 1

        if find_equivalent(state.net, state.nets) is None:
            state.nets.setdefault(len(state.net), []).append(normalize_net(state.net))
            logger.debug(
                "step %d: new %d-omino (%d known)",
                self.steps,
                len(state.net),
                len(state.nets[len(state.net)]),
            )
        state.elapsed = time.monotonic() - self._started

    def _check_continue(self, cancel: CancelToken | None) -> None:
        if cancel is not None and cancel.is_set():
            raise EnumerationCancelled(f"{self.size}-omino enumeration cancelled after {self.steps} steps")
        max_steps = self.settings.max_steps
        if max_steps is not None and self.steps >= max_steps and not self.state.halted:
            raise EnumerationCancelled(f"{self.size}-omino enumeration exceeded {max_steps} steps")

    def _run_until_stalled(self, cancel: CancelToken | None) -> None:
        poll_interval = self.settings.poll_interval
        last_sample: float | None = None
        next_poll = time.monotonic() + poll_interval
        while True:
            self._check_continue(cancel)
            now = time.monotonic()
            if now >= next_poll:
                sample = self.state.elapsed
                if sample == last_sample:
                    return
                last_sample = sample
                next_poll = now + poll_interval
            elif self.state.halted:
                time.sleep(next_poll - now)
            else:
                self.step()

    def run(self, cancel: CancelToken | None = None) -> list[CanonicalNet]:
        """
        Step until the search converges and return the nets of the target size.

        Args:
            cancel: Optional token (e.g. threading.Event); once set, the run
                raises EnumerationCancelled before its next step

        Returns:
            Canonical nets of the target size, pairwise inequivalent

        Raises:
            EnumerationCancelled: If cancelled or max_steps is exceeded
        """
        convergence = self.settings.convergence
        logger.info("generating %d-ominoes (convergence=%s)", self.size, convergence.value)

        if convergence is Convergence.EXHAUSTION:
            while not self.state.halted:
                self._check_continue(cancel)
                self.step()
        else:
            self._run_until_stalled(cancel)

        shapes = self.shapes()
        logger.info(
            "%d-omino search found %d shapes in %d steps (%.3f seconds)",
            self.size,
            len(shapes),
            self.steps,
            self.state.elapsed,
        )
        return shapes


# =============================================================================
# Shape Materializer
# =============================================================================


def materialize(net: Sequence[Sequence[int]], filler: Any = None) -> Quadrille:
    """
    Stamp a net into a new Quadrille.

    Point (x, y) lands at row y - min_y, column x. Nets are expected in
    canonical form, so the minimum x is 0. The net itself is not modified.
    """
    if not net:
        raise InvalidArgumentError("Cannot materialize an empty net")

    max_x = max_y = min_y = 0
    for x, y in net:
        max_x = max(max_x, x)
        max_y = max(max_y, y)
        min_y = min(min_y, y)

    cell = DEFAULT_FILLER if filler is None else to_cell(filler)
    if isinstance(cell, Empty):
        cell = DEFAULT_FILLER

    grid = Quadrille(max_y - min_y + 1, max_x + 1)
    grid.set_cell([(y - min_y, x) for x, y in net], cell)
    return grid


def generate_polyomino(
    size: int,
    filler: Any = None,
    *,
    rng: random.Random | None = None,
    settings: EnumerationSettings | None = None,
    cancel: CancelToken | None = None,
) -> Quadrille:
    """
    Create a quadrille holding one randomly chosen size-omino.

    Args:
        size: Number of squares, a positive integer
        filler: Cell value stamped into every square (cyan when omitted)
        rng: Random source for picking among the shapes (default: module random)
        settings: EnumerationSettings for the search
        cancel: Optional cancellation token, see Enumerator.run

    Returns:
        A quadrille just large enough to hold the chosen shape

    Raises:
        InvalidArgumentError: If size is not a positive integer
    """
    enumerator = Enumerator(size, settings)
    shapes = enumerator.run(cancel)
    chooser = rng if rng is not None else random
    return materialize(chooser.choice(shapes), filler)
