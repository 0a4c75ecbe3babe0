# engine_py/src/bucaro_engine/errors.py

class GameError(Exception):
    """Base exception for rule violations. Raising one never leaves a partial state change."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")
