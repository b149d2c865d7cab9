"""Kill switch package that contains compromised AWS accounts on demand."""

__all__ = [
    "handler",
    "cli",
    "credentials",
    "iam_lib",
    "scp_lib",
    "config",
    "errors",
    "notifier",
    "metrics",
    "types",
]
