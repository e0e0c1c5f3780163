class BranchVizError(Exception):
    pass


class ValidationError(BranchVizError):
    """A commit record is missing its sha or its author date."""


class InvalidRepositoryUrl(BranchVizError):
    pass


class FetchError(BranchVizError):
    """Retrieving repository data from the remote API failed."""


class RateLimitError(FetchError):
    pass


class NotFoundError(FetchError):
    pass


class AuthenticationError(FetchError):
    pass
