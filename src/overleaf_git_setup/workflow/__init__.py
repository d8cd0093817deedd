"""The setup workflow and the explicit state machine it moves through."""

__all__: list[str] = []
