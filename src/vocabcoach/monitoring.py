"""Monitoring configuration for the vocabulary coach."""
from prometheus_client import Counter, Gauge, start_http_server

# Scoring metrics
scores_recorded = Counter(
    "vocabcoach_scores_recorded_total",
    "Total number of grading results written to the score store",
    ["stars"],
)

tracked_words = Gauge(
    "vocabcoach_tracked_words",
    "Number of words with a score history",
)

# Selection metrics
words_selected = Counter(
    "vocabcoach_words_selected_total",
    "Total number of words served, by the rule that picked them",
    ["rule"],
)

# Dictionary metrics
words_imported = Counter(
    "vocabcoach_words_imported_total",
    "Total number of words merged into the dictionary from imports",
    ["outcome"],
)

# Storage metrics
storage_errors = Counter(
    "vocabcoach_storage_errors_total",
    "Total number of durable storage failures",
    ["operation"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
