"""Metered invocation of the generative model.

The model is an external operation whose consumption is only known after it
finishes. The adapter in `metering.invocation` admits the request through the
quota gate, calls the model, prices the reported consumption and debits it
through the usage ledger.
"""
