"""Services — stores, the planning orchestrator and Ruby's model calls."""
