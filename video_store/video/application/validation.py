"""
Upload Validation.

Stateless checks on the client-declared filename, content type and size.
The payload itself is never inspected: a file that lies about its type
passes here and fails later at playback.
"""

import logging

from ...core.config import UploadConfig
from ..domain.exceptions import UploadValidationError
from ..domain.models import ValidationFailure, ValidationOutcome, get_extension


class FileValidator:
    """Validates upload metadata against configured allow-lists and limits"""

    def __init__(self, upload_config: UploadConfig):
        self.upload_config = upload_config
        self._allowed_extensions = frozenset(ext.lower().lstrip(".") for ext in upload_config.allowed_extensions)
        self._allowed_mime_types = frozenset(mime.lower() for mime in upload_config.allowed_mime_types)
        self.logger = logging.getLogger(__name__)

    def validate(self, filename: str, content_type: str, size_bytes: int) -> ValidationOutcome:
        """Run the extension, MIME and size checks in that order"""
        if not self.is_valid_file_type(filename):
            return ValidationOutcome.invalid(ValidationFailure.BAD_EXTENSION)

        # Independent of the extension check; the two lists are kept in parallel
        if not self.is_valid_mime_type(content_type):
            return ValidationOutcome.invalid(ValidationFailure.BAD_MIME_TYPE)

        if size_bytes <= 0:
            return ValidationOutcome.invalid(ValidationFailure.EMPTY)
        if size_bytes > self.max_size_bytes():
            return ValidationOutcome.invalid(ValidationFailure.TOO_LARGE)

        return ValidationOutcome.valid()

    def ensure_valid(self, filename: str, content_type: str, size_bytes: int) -> None:
        """Raise UploadValidationError unless the upload is valid"""
        outcome = self.validate(filename, content_type, size_bytes)
        if outcome.is_valid:
            return

        message = self.describe_failure(outcome.failure)
        self.logger.warning(f"Upload rejected ({outcome.failure.value}): filename={filename!r} content_type={content_type!r} size={size_bytes}")
        raise UploadValidationError(outcome, message)

    def is_valid_file_type(self, filename: str) -> bool:
        extension = get_extension(filename or "")
        return bool(extension) and extension.lower() in self._allowed_extensions

    def is_valid_mime_type(self, content_type: str) -> bool:
        if not content_type:
            return False
        return content_type.strip().lower() in self._allowed_mime_types

    def is_valid_file_size(self, size_bytes: int) -> bool:
        return 0 < size_bytes <= self.max_size_bytes()

    def allowed_extensions_description(self) -> str:
        """e.g. "MP4, AVI, MOV", in configured order"""
        return ", ".join(ext.lstrip(".").upper() for ext in self.upload_config.allowed_extensions)

    def max_size_bytes(self) -> int:
        return self.upload_config.max_file_size_bytes

    def max_size_formatted(self) -> str:
        megabytes = self.max_size_bytes() / (1024 * 1024)
        return f"{megabytes:g} MB"

    def describe_failure(self, failure: ValidationFailure) -> str:
        """User-facing message for a failure"""
        if failure in (ValidationFailure.BAD_EXTENSION, ValidationFailure.BAD_MIME_TYPE):
            return f"Invalid file type. Allowed types: {self.allowed_extensions_description()}"
        if failure == ValidationFailure.TOO_LARGE:
            return f"File size exceeds the maximum allowed size of {self.max_size_formatted()}"
        return "The uploaded file is empty"
