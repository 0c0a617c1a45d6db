# src/qcircuitsim/core/rng.py
"""
Named, seeded random streams for reproducible circuit trajectories.

A simulation consumes randomness from several independent *streams*, each
identified by a short name:

- ``ctrl``       decisions about whether to apply control operations
- ``proj``       decisions about whether to apply projective checks
- ``haar``       Haar random unitary generation
- ``born``       Born-rule measurement outcomes
- ``state_init`` random initial state generation

The :class:`RNGRegistry` owns these streams. Every component that needs
randomness receives the registry explicitly; there is no module-level
random source anywhere in the package.

Usage
-----
>>> registry = RNGRegistry.standard(ctrl=42, proj=43, haar=44, born=45)
>>> r = registry.draw("ctrl")
>>> 0.0 <= r < 1.0
True
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

from qcircuitsim.core.errors import (
    RegistryFrozenError,
    StreamExhaustedError,
    UnknownStreamError,
)

if TYPE_CHECKING:
    from qcircuitsim.core.config import RNGConfig

logger = logging.getLogger(__name__)

STANDARD_STREAMS: Tuple[str, ...] = ("ctrl", "proj", "haar", "born", "state_init")


class RandomStream(ABC):
    """A seeded source of reproducible pseudo-random values.

    Subclasses supply :meth:`_uniform` and :meth:`_normal`; the base class
    keeps the count of uniform draws consumed so callers can verify how
    much of a stream a run used.

    Attributes
    ----------
    draws : int
        Number of uniform values drawn so far.
    """

    def __init__(self) -> None:
        self.draws = 0

    def draw(self) -> float:
        """Draw one uniform value in [0, 1)."""
        value = float(self._uniform())
        self.draws += 1
        return value

    def normal(self, size: Union[None, int, Tuple[int, ...]] = None):
        """Draw standard normal value(s); a scalar when ``size`` is None."""
        return self._normal(size)

    @abstractmethod
    def _uniform(self) -> float:
        ...

    @abstractmethod
    def _normal(self, size):
        ...


class GeneratorStream(RandomStream):
    """Stream backed by a numpy ``Generator`` over the MT19937 bit generator.

    Parameters
    ----------
    seed : int
        Non-negative integer seed. The same seed yields the same sequence
        on every platform.
    """

    def __init__(self, seed: int):
        super().__init__()
        if int(seed) < 0:
            raise ValueError(f"seed must be non-negative, got {seed}")
        self.seed = int(seed)
        self._generator = np.random.Generator(np.random.MT19937(self.seed))

    def _uniform(self) -> float:
        return self._generator.random()

    def _normal(self, size):
        return self._generator.standard_normal(size)

    def __repr__(self) -> str:
        return f"GeneratorStream(seed={self.seed}, draws={self.draws})"


class SequenceStream(RandomStream):
    """Stream that replays recorded values in order.

    Used to check a trajectory against draws recorded from a reference
    run. Uniform and normal values are kept in separate queues.

    Parameters
    ----------
    values : Iterable[float]
        Uniform values returned by :meth:`draw`, each in [0, 1).
    normals : Iterable[float]
        Values returned (and reshaped) by :meth:`normal`.
    """

    def __init__(self, values: Iterable[float] = (), normals: Iterable[float] = ()):
        super().__init__()
        self._values: List[float] = [float(v) for v in values]
        self._normals: List[float] = [float(v) for v in normals]
        for v in self._values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"Recorded uniform value {v} is not in [0, 1)")
        self._pos = 0
        self._normal_pos = 0

    @property
    def remaining(self) -> int:
        """Uniform values not yet consumed."""
        return len(self._values) - self._pos

    def _uniform(self) -> float:
        if self._pos >= len(self._values):
            raise StreamExhaustedError(
                f"Recorded stream exhausted after {len(self._values)} draws"
            )
        value = self._values[self._pos]
        self._pos += 1
        return value

    def _normal(self, size):
        count = 1 if size is None else int(np.prod(size))
        if self._normal_pos + count > len(self._normals):
            raise StreamExhaustedError(
                f"Recorded normal stream exhausted: need {count}, "
                f"have {len(self._normals) - self._normal_pos}"
            )
        chunk = self._normals[self._normal_pos:self._normal_pos + count]
        self._normal_pos += count
        if size is None:
            return chunk[0]
        return np.asarray(chunk, dtype=float).reshape(size)

    def __repr__(self) -> str:
        return f"SequenceStream(draws={self.draws}, remaining={self.remaining})"


class RNGRegistry:
    """Mapping from stream names to :class:`RandomStream` objects.

    Streams are registered during setup. The first successful
    :meth:`get_stream` marks the registry as in use (frozen); after that
    any registration raises :class:`RegistryFrozenError`, so a running
    trajectory can never have one of its streams silently reset.

    Several names may refer to the same stream object via :meth:`alias`,
    which reproduces the interleaved consumption of a reference
    implementation that used one generator for several purposes.

    Parameters
    ----------
    seeds : Optional[Dict[str, int]]
        Initial ``name -> seed`` mapping; each becomes a
        :class:`GeneratorStream`.
    """

    def __init__(self, seeds: Optional[Dict[str, int]] = None):
        self._streams: Dict[str, RandomStream] = {}
        self._frozen = False
        for name, seed in (seeds or {}).items():
            self.register(name, seed)

    # ── construction ────────────────────────────────────────────────────

    @classmethod
    def standard(
        cls,
        ctrl: int,
        proj: int,
        haar: int,
        born: int,
        state_init: int = 0,
    ) -> "RNGRegistry":
        """Registry with the five standard streams, each independently seeded."""
        return cls({
            "ctrl": ctrl,
            "proj": proj,
            "haar": haar,
            "born": born,
            "state_init": state_init,
        })

    @classmethod
    def ct_compat(cls, circuit: int, measurement: int) -> "RNGRegistry":
        """Registry where ``ctrl``, ``proj`` and ``haar`` share one stream.

        Matches reference runs that drew every circuit decision and every
        random unitary from a single generator, with Born outcomes on a
        second one.
        """
        registry = cls()
        registry.register("ctrl", circuit)
        registry.alias("proj", "ctrl")
        registry.alias("haar", "ctrl")
        registry.register("born", measurement)
        registry.register("state_init", 0)
        return registry

    @classmethod
    def from_config(cls, config: "RNGConfig") -> "RNGRegistry":
        """Build a registry from an :class:`~qcircuitsim.core.config.RNGConfig`."""
        if config.ct_compat:
            return cls.ct_compat(circuit=config.ctrl, measurement=config.born)
        return cls.standard(
            ctrl=config.ctrl,
            proj=config.proj,
            haar=config.haar,
            born=config.born,
            state_init=config.state_init,
        )

    # ── registration ────────────────────────────────────────────────────

    def _check_can_register(self, name: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register stream {name!r}: registry is already in use"
            )
        if name in self._streams:
            raise ValueError(f"Stream {name!r} is already registered")

    def register(self, name: str, seed: int) -> RandomStream:
        """Register a new :class:`GeneratorStream` seeded with ``seed``."""
        return self.register_stream(name, GeneratorStream(seed))

    def register_stream(self, name: str, stream: RandomStream) -> RandomStream:
        """Register an already constructed stream under ``name``."""
        self._check_can_register(name)
        if not isinstance(stream, RandomStream):
            raise TypeError(f"Expected a RandomStream, got {type(stream).__name__}")
        self._streams[name] = stream
        logger.debug("Registered RNG stream %r: %r", name, stream)
        return stream

    def alias(self, name: str, target: str) -> RandomStream:
        """Make ``name`` refer to the same stream object as ``target``."""
        self._check_can_register(name)
        if target not in self._streams:
            raise UnknownStreamError(target, self._streams)
        self._streams[name] = self._streams[target]
        return self._streams[name]

    def freeze(self) -> None:
        """Disallow further registration."""
        if not self._frozen:
            logger.debug("RNG registry frozen with streams %s", sorted(self._streams))
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ── lookup ──────────────────────────────────────────────────────────

    def get_stream(self, name: str) -> RandomStream:
        """Return the stream registered under ``name``.

        Raises
        ------
        UnknownStreamError
            If ``name`` was never registered. No stream is consumed.
        """
        try:
            stream = self._streams[name]
        except KeyError:
            raise UnknownStreamError(name, self._streams) from None
        self.freeze()
        return stream

    def draw(self, name: str) -> float:
        """Draw one uniform value from the named stream."""
        return self.get_stream(name).draw()

    def normal(self, name: str, size=None):
        """Draw standard normal value(s) from the named stream."""
        return self.get_stream(name).normal(size)

    @property
    def names(self) -> List[str]:
        return sorted(self._streams)

    def shares_stream(self, first: str, second: str) -> bool:
        """True if two names are aliases of one stream object.

        A lookup only; the registry is not frozen.
        """
        for name in (first, second):
            if name not in self._streams:
                raise UnknownStreamError(name, self._streams)
        return self._streams[first] is self._streams[second]

    def __contains__(self, name: object) -> bool:
        return name in self._streams

    def __len__(self) -> int:
        return len(self._streams)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"RNGRegistry({', '.join(self.names)}; {state})"
