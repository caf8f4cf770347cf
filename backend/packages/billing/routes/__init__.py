"""HTTP surface of the billing package: plans, entitlement/subscription reads, payment intake."""
