"""pipeline

Matching and comparison of findings between two Dependency-Track instances.

Stages, leaf first:

* :mod:`pipeline.normalize`   – clear instance-local fields
* :mod:`pipeline.ordering`    – canonical finding order
* :mod:`pipeline.canonical`   – JSON canonicalization and diff
* :mod:`pipeline.matching`    – pair source projects with target projects
* :mod:`pipeline.compare`     – compare one pair
* :mod:`pipeline.workers`     – worker pool over all pairs
* :mod:`pipeline.report`      – diff reports and run summary
* :mod:`pipeline.orchestrator` – one run, end to end
* :mod:`pipeline.wiring`      – configuration, logging, client construction
"""
