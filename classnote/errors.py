class ConflictError(Exception):
    """A unique constraint (username, student number, ...) was violated."""

    def __init__(self, message: str = "이미 존재하는 정보입니다."):
        super().__init__(message)
        self.message = message

class GenerationError(Exception):
    """The external text generation service failed or answered unusably."""
