"""stalk: watch Kubernetes resources and print readable diffs of every change."""

__version__ = "0.1.0"
