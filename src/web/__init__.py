"""HTTP and WebSocket surface of the Workforce Platform."""
