from releng.services.errors import ReleaseError, ReleaseErrorKind

__all__ = ["ReleaseError", "ReleaseErrorKind"]
