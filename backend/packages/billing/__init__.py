"""
Billing package - plans, subscriptions, usage metering and payment confirmation.

This package integrates with:
- Stripe: checkout session verification and webhooks

Quota is windowed per subscription period and usage is derived from the job
store on every check, so there is no counter to drift.
"""
