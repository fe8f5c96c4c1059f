# storefront/utils/errors.py


class NotFoundError(LookupError):
    """A requested record does not exist (or is not visible to the caller)."""
