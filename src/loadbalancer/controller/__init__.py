"""
This module drives the scheduler: given a State and a task source, it dispatches tasks one at a
time, triggers on-demand rebalances and hands every record and outcome over for reporting.

The module is organised as follows:
 - impl holds the step-driven Simulation and the batch `run` entrypoint
 - report renders records, outcomes and the final SimulationReport
"""
