"""Core type definitions for puzzlebox."""

type StateName = str
"""Name of a state; unique within one puzzle."""

type ActionName = str
"""Name of an action; unique within one state."""

type GuardName = str
"""Opaque guard identifier, interpreted only by a GuardOracle."""

type SubscriberToken = str
"""Opaque token for a subscriber, usually a transport session id."""
