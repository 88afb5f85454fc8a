"""Agent Control Plane Operator: bridges Cluster API control planes and agent based installs."""

__version__ = "0.1.0"
