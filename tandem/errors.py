# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# errors.py
# -----------------------------------------------------------------------------
# Purpose:
#   Exception types raised by the tandem simulator. Everything under
#   SimulationError is a broken invariant and aborts the run.
#
# Usage:
#   from tandem.errors import EmptyQueueError
# -----------------------------------------------------------------------------

from __future__ import annotations


class SimulationError(RuntimeError):
    """Base class for fatal invariant violations during a run."""


class EmptyQueueError(SimulationError, IndexError):
    """Pop/extract called on an empty event list or stage queue."""


class UnknownEventError(SimulationError):
    """The driver popped an event whose kind has no transition."""


class ZeroMassError(SimulationError, ZeroDivisionError):
    """A distribution with zero accumulated time cannot be normalized."""


class InvariantError(SimulationError):
    """Occupancy bookkeeping disagrees with the stage records."""


class ConfigError(ValueError):
    """Invalid run configuration (rates, horizon, stage count, policy)."""
