"""Utility functions for metrics handling."""

import metrics


def update_llm_token_count(model: str, input_tokens: int, output_tokens: int) -> None:
    """Update token counters and call counter of given model."""
    metrics.llm_calls_total.labels(model).inc()
    metrics.llm_token_sent_total.labels(model).inc(input_tokens)
    metrics.llm_token_received_total.labels(model).inc(output_tokens)


def record_lost_debit(tokens: int) -> None:
    """Count consumption that could not be recorded in any account."""
    metrics.lost_debits_total.inc()
    metrics.lost_debit_tokens_total.inc(tokens)
