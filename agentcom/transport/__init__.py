"""Unix socket transport, listeners and inbox polling."""