"""Queue names and delays shared with the orchestrator."""

# Input queue of the decider; carries workflow ids that must be re-evaluated.
DECIDER_QUEUE = "_deciderQueue"

# Same back-off the orchestrator applies when it enqueues a workflow for decision.
DECIDER_REPUSH_DELAY_SECONDS = 30
