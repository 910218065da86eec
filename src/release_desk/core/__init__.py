"""Headless async core of release-desk.

Services here own no UI. Each exposes imperative async operations plus a
snapshot of its observable state that presentation layers subscribe to.
"""
