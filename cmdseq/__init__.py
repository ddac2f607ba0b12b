"""cmdseq - run one command per invocation from a repeating schedule.

Each invocation is a fresh process; the position in the cycle lives in a
small state file keyed by the invocation's arguments.
"""

__version__ = "0.1.0"
