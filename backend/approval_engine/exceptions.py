class AppError(Exception):
    """Base application exception.

    ``status_code`` follows HTTP semantics so the hosting service can map it
    straight onto a response.
    """

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)
