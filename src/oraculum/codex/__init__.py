"""
Codex - Session-side bookkeeping for a bound contract.

- registry:  Method Registry (classification + lookup)
- inputs:    Input State Store (argument text per operation slot)
- outcome:   ExecutionOutcome (Success / Failure)
- formatter: Outcome -> operator message
- summary:   Registry -> interface signature listing
"""
