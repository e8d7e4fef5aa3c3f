"""Real-time room chat relay: rooms, hosts/players, chat fan-out and an LLM relay."""

__version__ = "0.1.0"
