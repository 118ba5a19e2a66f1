"""
Errors raised by genome handling and neural-net evaluation.
"""


class LifeformError(Exception):
    pass


class StructuralMismatch(LifeformError):
    """A gene names a neuron the compiled net does not have."""


class EmptyGenomePrecondition(LifeformError):
    """Mutation was asked for on a genome with no genes."""


class MissingSensorValue(LifeformError):
    """Evaluation got no value for a declared input neuron."""
