"""Token quota accounting.

Tokens are the units of measurement used to quantify the amount of text that
the service sends to, or receives from, a large language model (LLM). Every
interaction with the LLM is counted in tokens, and LLM providers typically
charge for their services per token.

Each user owns an account with a token limit. The accounting core consists of
three parts:

1. the account store that creates, reads, updates the limit of, lists and
deletes accounts
1. the usage ledger that atomically adds consumed tokens and their cost to an
account; the addition is performed by the database itself, so concurrent
debits of the same account never overwrite each other
1. the quota gate that decides, from the last committed usage, whether a user
may start another metered operation

The gate does not reserve budget. Two requests admitted at nearly the same time
can therefore both be debited, and the usage can exceed the limit by the
consumption of the requests that were in flight. Remaining tokens reported to
clients are clamped at zero, while the stored usage keeps the real value.
"""
