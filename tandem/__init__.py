"""
tandem package initializer.

This package contains the discrete-event engine for a tandem (series)
queueing network of exponential single-server stages fed by Poisson
arrivals: event and waiting queues, stage records, routing, arrival
generation, occupancy metrics, and the replication driver.
"""
__all__ = [
    "errors", "variates", "policies", "queues", "entities",
    "stations", "arrivals", "network", "metrics", "simulation",
]
