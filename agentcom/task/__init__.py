"""Task model, state machine, in-memory store, management and queries."""