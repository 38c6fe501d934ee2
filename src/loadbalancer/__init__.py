"""
Least-loaded task dispatch with periodic corrective rebalancing.

The package is organised as follows:
 - low: data structures shared by everything else -- nodes, configuration, outcomes, errors
 - scheduler: the min-heap of node loads, the rebalancing policy and the dispatch api
 - controller: step-driven simulation on top of the scheduler, and reporting
 - simulation: random configuration generators and the command line entrypoint
 - contextgraph: informational network topology, never consulted for decisions
"""

from loadbalancer.version import __version__
