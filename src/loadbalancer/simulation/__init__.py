"""
Configuration sources and the command line entrypoint for running whole simulations
"""
