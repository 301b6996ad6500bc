"""Generator module for creating random exact cover instances."""

from .generator import InstanceGenerator, ExactCoverInstance, Difficulty

__all__ = ["InstanceGenerator", "ExactCoverInstance", "Difficulty"]
