"""
Node Checker

Checks Ethereum beacon, execution and colibri prover nodes for the features
colibri light clients depend on, including verification of served light
client updates against their attested state roots.
"""

__version__ = "1.0.0"
