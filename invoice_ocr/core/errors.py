"""
Typed failures raised by the invoice service.

Only ``InvalidLlmJson`` comes out of the extraction engine itself; the rest
belong to the OCR and generative backends at the service boundary.
"""


class InvoiceServiceError(Exception):
    """Base class for all service errors"""


class InvalidLlmJson(InvoiceServiceError):
    """Generative parser output is not a JSON object (or a string holding one)"""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class BackendUnavailable(InvoiceServiceError):
    """A backend was requested but is not configured"""

    def __init__(self, backend: str, reason: str):
        super().__init__(f"{backend} backend unavailable: {reason}")
        self.backend = backend
        self.reason = reason


class OcrError(InvoiceServiceError):
    """The OCR backend failed or timed out"""


class GenerativeBackendError(InvoiceServiceError):
    """The generative backend returned an HTTP error or could not be reached"""
