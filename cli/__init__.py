"""cli

Command-line entrypoint (:mod:`cli.main`) and argument builders (:mod:`cli.args`).
"""
