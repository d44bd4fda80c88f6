"""Metrics module for Token Usage Tracker."""

from prometheus_client import (
    Counter,
    Histogram,
)

# Counter to track REST API calls
# This will be used to count how many times each API endpoint is called
# and the status code of the response
rest_api_calls_total = Counter(
    "tut_rest_api_calls_total", "REST API calls counter", ["path", "status_code"]
)

# Histogram to measure response durations
# This will be used to track how long it takes to handle requests
response_duration_seconds = Histogram(
    "tut_response_duration_seconds", "Response durations", ["path"]
)

# Metric that counts how many LLM calls were made for each model
llm_calls_total = Counter("tut_llm_calls_total", "LLM calls counter", ["model"])

# Metric that counts how many LLM calls failed
llm_calls_failures_total = Counter(
    "tut_llm_calls_failures_total", "LLM calls failures"
)

# Tokens reported by the model, split by direction
llm_token_sent_total = Counter(
    "tut_llm_token_sent_total", "LLM input tokens consumed", ["model"]
)
llm_token_received_total = Counter(
    "tut_llm_token_received_total", "LLM output tokens consumed", ["model"]
)

# Requests rejected by the quota gate
quota_rejections_total = Counter(
    "tut_quota_rejections_total", "Requests rejected because quota was exhausted"
)

# Consumption that happened but could not be debited because the account
# disappeared in the meantime
lost_debits_total = Counter(
    "tut_lost_debits_total", "Metered operations whose consumption was not recorded"
)
lost_debit_tokens_total = Counter(
    "tut_lost_debit_tokens_total", "Tokens consumed but not recorded"
)
