"""
NEAT Innovation Registry Module

This module implements the InnovationRegistry class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationRegistry: Source of innovation numbers for connection genes
"""

class InnovationRegistry:
    """
    Hands out innovation numbers for newly created connection genes.

    Every call to 'next_id()' returns a number that has never been returned
    before by the same registry, so no two connections created through one
    registry ever share an innovation number. Innovation numbers are never
    reused, not even when the connection that carried one is discarded.

    A registry is owned by whoever runs an evolutionary process (normally a
    Population) and shared by all genomes of that process. Two registries are
    completely independent of each other, which keeps concurrent runs and
    tests isolated.

    Public Properties:
        current: The innovation number the next call to 'next_id()' returns

    Public Methods:
        next_id():                 Allocate a new innovation number
        advance_past(innovation):  Make sure 'innovation' is never handed out
    """

    def __init__(self, start: int = 0):
        """
        Parameters:
            start: the first innovation number to hand out
        """
        self._current: int = start

    @property
    def current(self) -> int:
        return self._current

    def next_id(self) -> int:
        """
        Allocate a new innovation number.

        Returns:
            an innovation number never handed out before by this registry
        """
        innovation     = self._current
        self._current += 1
        return innovation

    def advance_past(self, innovation: int) -> None:
        """
        Move the counter beyond 'innovation', if it has not moved beyond it already.

        Used when genomes created elsewhere (e.g. loaded from a durable record)
        join a process served by this registry, so that innovation numbers they
        already carry are not issued again to new connections.

        Parameters:
            innovation: an innovation number already in use
        """
        if innovation >= self._current:
            self._current = innovation + 1

    def __repr__(self):
        return f"InnovationRegistry(current={self._current})"
