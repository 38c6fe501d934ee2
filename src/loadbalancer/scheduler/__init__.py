"""
Scheduler module is responsible for determining task->node assignment.

There are multiple auxiliary submodules:
 - heap: the min-heap of node loads, answering "which node is least loaded" in O(log n)
 - rebalance: the corrective policy moving load from the most to the least loaded node
 - core: the State that bundles nodes and heap for one run

These are all used from the `api` module here, which provides the interface
for the Controller.
"""
