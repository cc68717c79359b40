"""Two-player tic-tac-toe server: authoritative in-memory games with event-stream updates."""
