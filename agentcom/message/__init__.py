"""Message envelopes, in-memory inbox and routing."""