"""
Low Level representation of nodes, configuration and outcomes -- not expected to be user facing.

Used to stabilise contract between the scheduler, the controller and the reporting.
"""
